"""Benchmark engine: modules -> parameter sets -> functions.

Each level is one ``process`` run, so the whole benchmark is a fixed
depth-first walk::

    module0 -> (params0 -> (f0, f1, ...), params1 -> ...) -> module1 -> ...

Per function entry the lifecycle is::

    setup -> warm-up -> (timed success | timed failure) -> teardown

A failure of one function is reported to the frontend and never stops
its siblings or the following modules.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from functools import partial

from giglio.domain.models import (
    NO_PARAMETERS,
    Config,
    ExecutionContext,
    FunctionEntry,
    IncompatibleConfigError,
    Module,
    PassParameters,
)
from giglio.engine.parameters import expand_parameters
from giglio.sequencing.deferred import Deferred
from giglio.sequencing.process import CancellationToken, process

logger = logging.getLogger(__name__)


def validate_config(config: Config) -> None:
    """Raise IncompatibleConfigError if the strategies cannot work together."""
    if not config.timer.env_compatible():
        raise IncompatibleConfigError(
            f"{type(config.timer).__name__} is not supported in this environment"
        )
    if config.frontend.requires_output and not config.timer.has_output:
        raise IncompatibleConfigError(
            f"{type(config.frontend).__name__} needs timings but "
            f"{type(config.timer).__name__} does not produce any"
        )
    if config.warmup_reps < 0:
        raise IncompatibleConfigError(f"warmup_reps must be >= 0, got {config.warmup_reps}")


def run_all(
    config: Config,
    reps: int,
    modules: Sequence[Module],
    *,
    token: CancellationToken | None = None,
) -> Deferred[None]:
    """Run every module in order. Configuration errors raise before anything runs."""
    validate_config(config)
    if reps < 0:
        raise ValueError(f"reps must be >= 0, got {reps}")
    logger.debug("Running %d modules with reps=%d", len(modules), reps)
    return process(
        modules, partial(run_module, config, reps, token=token), config.executor, token=token
    )


def run_module(
    config: Config,
    reps: int,
    module: Module,
    *,
    token: CancellationToken | None = None,
) -> Deferred[None]:
    """Run every parameter combination of *module*, framed by start/end events."""
    config.frontend.module_start(module)
    parameter_sets = expand_parameters(module.parameters)
    if module.is_parameterized:
        logger.debug("Module %r expands to %d parameter sets", module.name, len(parameter_sets))
        if not parameter_sets:
            logger.warning("Module %r has a parameter with no values; nothing to run", module.name)

    done = process(
        parameter_sets,
        partial(run_parameter_set, config, reps, module, token=token),
        config.executor,
        token=token,
    )
    done.on_settle(lambda _outcome: config.frontend.module_end(module))
    return done


def run_parameter_set(
    config: Config,
    reps: int,
    module: Module,
    parameter_set: PassParameters,
    *,
    token: CancellationToken | None = None,
) -> Deferred[None]:
    """Run every function of *module* once for one parameter combination."""
    if parameter_set is not NO_PARAMETERS:
        config.frontend.parameter_set_start(module, parameter_set)

    def step(entry: FunctionEntry) -> Deferred[None]:
        return Deferred[None]().capture(run_function, config, reps, module, entry, parameter_set)

    return process(module.functions, step, config.executor, token=token)


@contextmanager
def _lifecycle(module: Module, context: ExecutionContext) -> Iterator[ExecutionContext]:
    module.setup(context, context.parameters)
    try:
        yield context
    finally:
        module.teardown(context)


def run_function(
    config: Config,
    reps: int,
    module: Module,
    entry: FunctionEntry,
    parameter_set: PassParameters,
) -> None:
    """Set up, warm up, time and tear down one function entry.

    Warm-up and timed failures are reported via ``function_failure``.
    Anything else (setup or teardown raising) goes to ``frontend.error``
    and is re-raised.
    """
    parameters = None if parameter_set is NO_PARAMETERS else parameter_set
    context = ExecutionContext(module=module.name, function=entry.name, parameters=parameters)
    try:
        with _lifecycle(module, context):
            _warm_up_and_time(config, reps, module, entry, context)
    except Exception as exc:
        logger.error("%s/%s failed outside the timed call: %s", module.name, entry.name, exc)
        config.frontend.error(module, entry, exc)
        raise


def _warm_up_and_time(
    config: Config,
    reps: int,
    module: Module,
    entry: FunctionEntry,
    context: ExecutionContext,
) -> None:
    frontend, timer = config.frontend, config.timer

    if config.warmup_reps:
        try:
            entry.func(context, config.warmup_reps)
        except Exception as exc:
            logger.debug("%s/%s: warm-up failed: %r", module.name, entry.name, exc)
            frontend.function_failure(module, entry, exc)
            return

    timer.time_start(module, entry)
    frontend.function_start(module, entry, reps)
    try:
        entry.func(context, reps)
    except Exception as exc:
        timer.time_end(module, entry)
        logger.debug("%s/%s: timed call failed: %r", module.name, entry.name, exc)
        frontend.function_failure(module, entry, exc)
        return
    elapsed = timer.time_end(module, entry)
    logger.debug("%s/%s: %s ms for %d reps", module.name, entry.name, elapsed, reps)
    frontend.function_success(module, entry, elapsed, reps)
