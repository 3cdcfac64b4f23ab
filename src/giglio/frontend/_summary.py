"""giglio.frontend._summary -- counting wrapper around another frontend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from giglio.domain.models import FunctionEntry, Module, ParameterSet

if TYPE_CHECKING:
    from giglio.domain.protocols import Frontend


class SummaryFrontend:
    """Forwards every event to *inner* and tallies the outcomes.

    The overall run never reports failures on its own, so this is how
    a caller finds out whether anything went wrong.
    """

    def __init__(self, inner: Frontend) -> None:
        self.inner = inner
        self.modules = 0
        self.successes = 0
        self.failures = 0
        self.errors = 0

    @property
    def requires_output(self) -> bool:
        return self.inner.requires_output

    @property
    def ok(self) -> bool:
        return self.failures == 0 and self.errors == 0

    def module_start(self, module: Module) -> None:
        self.modules += 1
        self.inner.module_start(module)

    def module_end(self, module: Module) -> None:
        self.inner.module_end(module)

    def parameter_set_start(self, module: Module, parameter_set: ParameterSet) -> None:
        self.inner.parameter_set_start(module, parameter_set)

    def function_start(self, module: Module, entry: FunctionEntry, reps: int) -> None:
        self.inner.function_start(module, entry, reps)

    def function_success(
        self, module: Module, entry: FunctionEntry, time_ms: float | None, reps: int
    ) -> None:
        self.successes += 1
        self.inner.function_success(module, entry, time_ms, reps)

    def function_failure(
        self, module: Module, entry: FunctionEntry, exception: Exception
    ) -> None:
        self.failures += 1
        self.inner.function_failure(module, entry, exception)

    def error(self, module: Module, entry: FunctionEntry, exception: Exception) -> None:
        self.errors += 1
        self.inner.error(module, entry, exception)
