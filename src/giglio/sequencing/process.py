"""Run a list of asynchronous steps one at a time.

``process`` is the only place where sequenced work is scheduled. Every
level of a benchmark run (modules, parameter sets, functions) goes
through it, so ordering and failure absorption are defined here once.
"""

import logging
from collections import deque
from collections.abc import Callable, Iterable
from typing import TypeVar

from giglio.domain.models import Failure, Outcome, RunCancelledError
from giglio.domain.protocols import Executor
from giglio.sequencing.deferred import Deferred

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Stops a sequence before its next step is scheduled.

    The step already in flight always finishes; a benchmarked function
    is never interrupted.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def process(
    items: Iterable[T],
    step_fn: Callable[[T], Deferred[object]],
    executor: Executor,
    *,
    token: CancellationToken | None = None,
) -> Deferred[None]:
    """Call *step_fn* on each item in order, starting each after the last settles.

    The returned Deferred succeeds once every item has been processed,
    whatever the individual outcomes were. It fails only with
    ``RunCancelledError`` when *token* is cancelled mid-sequence.
    """
    queue = deque(items)
    done: Deferred[None] = Deferred()

    def advance(_outcome: Outcome | None = None) -> None:
        if not queue:
            done.resolve(None)
        elif token is not None and token.cancelled:
            logger.debug("Sequence cancelled with %d items left", len(queue))
            done.reject(RunCancelledError(f"cancelled with {len(queue)} items left"))
        else:
            executor.schedule(run_next)

    def run_next() -> None:
        item = queue.popleft()
        try:
            step = step_fn(item)
        except Exception as exc:
            logger.exception("Step for %r raised instead of returning a Deferred", item)
            step = Deferred()
            step.settle(Failure(exc))
        step.on_settle(advance)

    advance()
    return done
