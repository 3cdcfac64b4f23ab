"""Core data models for Giglio."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

if TYPE_CHECKING:
    from giglio.domain.protocols import Executor, Frontend, Timer

T = TypeVar("T")


class GiglioError(Exception):
    """Base class for errors raised by Giglio itself."""


class IncompatibleConfigError(GiglioError):
    """The configured frontend, timer and executor cannot work together."""


class AlreadySettledError(GiglioError):
    """A Deferred was settled a second time."""


class RunCancelledError(GiglioError):
    """A sequence was stopped through its cancellation token."""


class RegistrationError(GiglioError):
    """A module or timing was declared after the run started."""


class DeferredState(Enum):
    """Lifecycle of a Deferred. Settlement is one-way."""

    PENDING = "pending"
    SETTLED = "settled"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Outcome of a step that completed normally."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Outcome of a step that raised."""

    error: Exception


Outcome = Success[Any] | Failure


class _NoParameters(Enum):
    NO_PARAMETERS = "no-parameters"

    def __repr__(self) -> str:
        return "NO_PARAMETERS"


NO_PARAMETERS = _NoParameters.NO_PARAMETERS
"""Marker for the single pass of a module that declares no parameters."""

ParameterSet = dict[str, Any]
PassParameters = ParameterSet | Literal[_NoParameters.NO_PARAMETERS]


def _nop(*args: Any) -> None:
    return None


@dataclass
class ExecutionContext:
    """Scratch object shared by setup, the timed function and teardown.

    User code is free to set any extra attribute on it; a fresh context is
    created for every timed run and dropped after teardown.
    """

    module: str
    function: str
    parameters: ParameterSet | None = None


BenchmarkFunc = Callable[[ExecutionContext, int], object]
SetupFunc = Callable[[ExecutionContext, ParameterSet | None], object]
TeardownFunc = Callable[[ExecutionContext], object]


@dataclass
class FunctionEntry:
    """A named function to be timed."""

    name: str
    func: BenchmarkFunc


@dataclass
class Module:
    """A named group of benchmark functions sharing setup and parameters."""

    name: str
    parameters: dict[str, list[Any]] = field(default_factory=lambda: dict[str, list[Any]]())
    setup: SetupFunc = _nop
    teardown: TeardownFunc = _nop
    functions: list[FunctionEntry] = field(default_factory=lambda: list[FunctionEntry]())

    @property
    def is_parameterized(self) -> bool:
        return bool(self.parameters)


@dataclass(frozen=True)
class Config:
    """Strategies used for one run. Never changes while the run is going.

    ``warmup_reps`` is the rep count passed to the single warm-up call, not a
    number of warm-up calls; 0 skips the warm-up.
    """

    frontend: "Frontend"
    timer: "Timer"
    executor: "Executor"
    warmup_reps: int = 10
