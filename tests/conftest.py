"""Shared pytest fixtures for giglio tests.

Provides a recording frontend, a scripted fake timer and executor
fixtures so engine tests can assert exact event order.
"""

from __future__ import annotations

from typing import Any

import pytest

from giglio.domain.models import Config, FunctionEntry, Module, ParameterSet
from giglio.sequencing.executors import ImmediateExecutor, ManualExecutor

# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class RecordingFrontend:
    """Frontend that records every event as a tuple."""

    def __init__(self, *, requires_output: bool = True) -> None:
        self.requires_output = requires_output
        self.events: list[tuple[Any, ...]] = []

    def names(self) -> list[tuple[str, ...]]:
        """Events reduced to (event, module name[, entry name])."""
        reduced: list[tuple[str, ...]] = []
        for event, module, *rest in self.events:
            entry = rest[0] if rest and isinstance(rest[0], FunctionEntry) else None
            if entry is None:
                reduced.append((event, module.name))
            else:
                reduced.append((event, module.name, entry.name))
        return reduced

    def module_start(self, module: Module) -> None:
        self.events.append(("module_start", module))

    def module_end(self, module: Module) -> None:
        self.events.append(("module_end", module))

    def parameter_set_start(self, module: Module, parameter_set: ParameterSet) -> None:
        self.events.append(("parameter_set_start", module, parameter_set))

    def function_start(self, module: Module, entry: FunctionEntry, reps: int) -> None:
        self.events.append(("function_start", module, entry, reps))

    def function_success(
        self, module: Module, entry: FunctionEntry, time_ms: float | None, reps: int
    ) -> None:
        self.events.append(("function_success", module, entry, time_ms, reps))

    def function_failure(
        self, module: Module, entry: FunctionEntry, exception: Exception
    ) -> None:
        self.events.append(("function_failure", module, entry, exception))

    def error(self, module: Module, entry: FunctionEntry, exception: Exception) -> None:
        self.events.append(("error", module, entry, exception))


class FakeTimer:
    """Timer returning a fixed measurement and counting its calls."""

    def __init__(
        self, *, elapsed: float | None = 1.5, has_output: bool = True, compatible: bool = True
    ) -> None:
        self.elapsed = elapsed
        self.has_output = has_output
        self.compatible = compatible
        self.starts: list[str] = []
        self.ends: list[str] = []

    def env_compatible(self) -> bool:
        return self.compatible

    def time_start(self, module: Module, entry: FunctionEntry) -> None:
        self.starts.append(entry.name)

    def time_end(self, module: Module, entry: FunctionEntry) -> float | None:
        self.ends.append(entry.name)
        return self.elapsed


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def frontend() -> RecordingFrontend:
    return RecordingFrontend()


@pytest.fixture()
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture()
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture()
def config(frontend: RecordingFrontend, timer: FakeTimer) -> Config:
    """Immediate executor, recording frontend, fake timer, warm-up of 2 reps."""
    return Config(frontend=frontend, timer=timer, executor=ImmediateExecutor(), warmup_reps=2)


@pytest.fixture()
def make_module() -> Any:
    """Factory for a Module holding the given functions."""

    def _factory(name: str = "M", *funcs: tuple[str, Any], **kwargs: Any) -> Module:
        module = Module(name=name, **kwargs)
        module.functions = [FunctionEntry(name=n, func=f) for n, f in funcs]
        return module

    return _factory


def noop(ctx: Any, reps: int) -> None:
    return None


def boom(ctx: Any, reps: int) -> None:
    raise RuntimeError("boom")
