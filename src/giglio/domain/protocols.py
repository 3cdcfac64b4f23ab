"""Protocol interfaces for Giglio components."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from giglio.domain.models import FunctionEntry, Module, ParameterSet


class Executor(Protocol):
    """Decides when a scheduled unit of work runs."""

    def schedule(self, fn: Callable[[], object]) -> None:
        """Run *fn* now or on a later turn of the event loop."""
        ...


class Timer(Protocol):
    """Measurement strategy wrapped around the timed call."""

    @property
    def has_output(self) -> bool:
        """True when ``time_end`` returns a numeric measurement."""
        ...

    def env_compatible(self) -> bool:
        """Return True if this timer can run in the current environment."""
        ...

    def time_start(self, module: Module, entry: FunctionEntry) -> None:
        """Mark the start of a timed call."""
        ...

    def time_end(self, module: Module, entry: FunctionEntry) -> float | None:
        """Return elapsed milliseconds, or None when no measurement is available."""
        ...


class Frontend(Protocol):
    """Reporting sink for benchmark progress and results."""

    @property
    def requires_output(self) -> bool:
        """True when the frontend needs numeric timings from the timer."""
        ...

    def module_start(self, module: Module) -> None:
        """Called before the first parameter set of *module*."""
        ...

    def module_end(self, module: Module) -> None:
        """Called once every parameter set of *module* has run."""
        ...

    def parameter_set_start(self, module: Module, parameter_set: ParameterSet) -> None:
        """Called before each combination of a parameterized module."""
        ...

    def function_start(self, module: Module, entry: FunctionEntry, reps: int) -> None:
        """Called right before the timed call."""
        ...

    def function_success(
        self, module: Module, entry: FunctionEntry, time_ms: float | None, reps: int
    ) -> None:
        """Called when the timed call returned."""
        ...

    def function_failure(
        self, module: Module, entry: FunctionEntry, exception: Exception
    ) -> None:
        """Called when warm-up or the timed call raised."""
        ...

    def error(self, module: Module, entry: FunctionEntry, exception: Exception) -> None:
        """Called when setup or teardown raised."""
        ...
