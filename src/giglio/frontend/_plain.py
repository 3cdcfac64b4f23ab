"""giglio.frontend._plain -- print()-based frontend.

Used when stdout is not a TTY, and as the ``"quiet"`` frontend when
constructed with ``show_timings=False``.
"""

from __future__ import annotations

from giglio.domain.models import FunctionEntry, Module, ParameterSet

_UNITS = (("s", 1000.0), ("ms", 1.0), ("µs", 1e-3), ("ns", 1e-6))


def format_duration(ms: float) -> str:
    """Render a millisecond value with the largest unit that keeps it >= 1."""
    for unit, scale in _UNITS:
        if abs(ms) >= scale:
            return f"{ms / scale:.3f}{unit}"
    return f"{ms / _UNITS[-1][1]:.3f}ns"


def format_parameters(parameter_set: ParameterSet) -> str:
    return ", ".join(f"{k}={v!r}" for k, v in parameter_set.items())


def describe_timing(time_ms: float | None, reps: int) -> str:
    """One-line summary of a successful timed call."""
    if time_ms is None:
        return f"done ({reps:,} reps)"
    if reps > 0:
        per_rep = format_duration(time_ms / reps)
        return f"{format_duration(time_ms)} ({per_rep}/rep, {reps:,} reps)"
    return format_duration(time_ms)


class PlainFrontend:
    """Frontend implementation using only built-in print()."""

    def __init__(self, *, show_timings: bool = True) -> None:
        self._show_timings = show_timings

    @property
    def requires_output(self) -> bool:
        return self._show_timings

    # -- Module lifecycle ---------------------------------------------------

    def module_start(self, module: Module) -> None:
        print(f"Benchmarking {module.name}...")

    def module_end(self, module: Module) -> None:
        print()

    def parameter_set_start(self, module: Module, parameter_set: ParameterSet) -> None:
        print(f"  [{format_parameters(parameter_set)}]")

    # -- Function results ---------------------------------------------------

    def function_start(self, module: Module, entry: FunctionEntry, reps: int) -> None:
        # Runs inside the timed region.
        pass

    def function_success(
        self, module: Module, entry: FunctionEntry, time_ms: float | None, reps: int
    ) -> None:
        if self._show_timings:
            print(f"  {entry.name}: {describe_timing(time_ms, reps)}")

    def function_failure(
        self, module: Module, entry: FunctionEntry, exception: Exception
    ) -> None:
        print(f"  [failed] {entry.name}: {type(exception).__name__}: {exception}")

    def error(self, module: Module, entry: FunctionEntry, exception: Exception) -> None:
        print(
            f"  [error] {module.name}/{entry.name}: {type(exception).__name__}: {exception}"
        )
