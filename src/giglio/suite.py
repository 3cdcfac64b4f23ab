"""Registration API: the explicit replacement for a global module registry.

Benchmark scripts declare modules and timings on a Suite, then run it::

    suite = Suite()
    suite.declare_module("lists", parameters={"size": [10, 1000]}, setup=make_list)
    suite.declare_timing("sort", lambda ctx, reps: ...)
    await suite.run(reps=1000)
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from giglio.domain.models import (
    BenchmarkFunc,
    Config,
    FunctionEntry,
    Module,
    Outcome,
    RegistrationError,
    SetupFunc,
    TeardownFunc,
)
from giglio.engine.runner import run_all
from giglio.frontend import PlainFrontend
from giglio.sequencing.deferred import Deferred
from giglio.sequencing.executors import ImmediateExecutor
from giglio.sequencing.process import CancellationToken
from giglio.timers import create_timer

logger = logging.getLogger(__name__)

DEFAULT_MODULE_NAME = "Benchmark"


def default_config() -> Config:
    """Plain output, best available timer, synchronous scheduling."""
    return Config(
        frontend=PlainFrontend(),
        timer=create_timer("auto"),
        executor=ImmediateExecutor(),
    )


class Suite:
    """Ordered collection of benchmark modules plus the config to run them with."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or default_config()
        self._modules: list[Module] = []
        self._started = False

    @property
    def modules(self) -> tuple[Module, ...]:
        return tuple(self._modules)

    @property
    def started(self) -> bool:
        return self._started

    def declare_module(
        self,
        name: str,
        *,
        parameters: Mapping[str, Sequence[Any]] | None = None,
        setup: SetupFunc | None = None,
        teardown: TeardownFunc | None = None,
    ) -> Module:
        """Start a new module; following timings are added to it."""
        self._check_open(f"module {name!r}")
        module = Module(name=name)
        if parameters:
            module.parameters = {key: list(values) for key, values in parameters.items()}
        if setup is not None:
            module.setup = setup
        if teardown is not None:
            module.teardown = teardown
        self._modules.append(module)
        logger.debug("Declared module %r (parameters=%s)", name, list(module.parameters))
        return module

    def declare_timing(self, name: str, func: BenchmarkFunc) -> FunctionEntry:
        """Add a timed function to the most recently declared module."""
        self._check_open(f"timing {name!r}")
        if not self._modules:
            self.declare_module(DEFAULT_MODULE_NAME)
        entry = FunctionEntry(name=name, func=func)
        self._modules[-1].functions.append(entry)
        return entry

    def run_benchmarks(
        self, reps: int, *, token: CancellationToken | None = None
    ) -> Deferred[None]:
        """Start running every declared module; returns the completion Deferred.

        Raises IncompatibleConfigError before anything runs if the config is
        unusable. Registration is closed from here on.
        """
        self._started = True
        try:
            return run_all(self.config, reps, self.modules, token=token)
        except Exception:
            self._started = False
            raise

    async def run(self, reps: int, *, token: CancellationToken | None = None) -> Outcome:
        """Run on the current event loop and wait for completion."""
        return await self.run_benchmarks(reps, token=token).wait()

    def script_namespace(self) -> dict[str, object]:
        """Globals handed to benchmark scripts executed by the CLI."""
        return {
            "giglio": self,
            "module": self.declare_module,
            "time": self.declare_timing,
            "declare_module": self.declare_module,
            "declare_timing": self.declare_timing,
        }

    def _check_open(self, what: str) -> None:
        if self._started:
            raise RegistrationError(f"Cannot declare {what} after the run has started")
