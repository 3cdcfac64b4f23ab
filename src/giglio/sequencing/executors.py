"""Scheduling strategies for sequenced work."""

import asyncio
import logging
from collections import deque
from collections.abc import Callable

from giglio.domain.models import GiglioError
from giglio.domain.protocols import Executor

logger = logging.getLogger(__name__)


class ImmediateExecutor:
    """Runs work synchronously in the caller's stack frame.

    Work scheduled while another item is running is queued and run by the
    outermost ``schedule`` call once the current item returns, so the stack
    stays flat no matter how many steps a sequence has.
    """

    def __init__(self) -> None:
        self._pending: deque[Callable[[], object]] = deque()
        self._draining = False

    def schedule(self, fn: Callable[[], object]) -> None:
        self._pending.append(fn)
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending:
                self._pending.popleft()()
        finally:
            self._draining = False


class YieldingExecutor:
    """Runs work on a later turn of an asyncio event loop.

    The current call stack always unwinds before *fn* runs, which keeps
    recursion flat and lets other tasks on the loop make progress.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, fn: Callable[[], object]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(fn)


class ManualExecutor:
    """Holds scheduled work until the caller runs it with ``step()``.

    Meant for tests that need to inspect state between steps.
    """

    def __init__(self) -> None:
        self._pending: deque[Callable[[], object]] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def schedule(self, fn: Callable[[], object]) -> None:
        self._pending.append(fn)

    def step(self) -> bool:
        """Run the oldest pending item. Return False if nothing was pending."""
        if not self._pending:
            return False
        self._pending.popleft()()
        return True

    def flush(self) -> int:
        """Run pending items, including newly scheduled ones, until none remain."""
        count = 0
        while self.step():
            count += 1
        logger.debug("Flushed %d scheduled items", count)
        return count


EXECUTORS: dict[str, Callable[[], Executor]] = {
    "immediate": ImmediateExecutor,
    "yielding": YieldingExecutor,
}


def create_executor(name: str) -> Executor:
    """Build an executor by registry name."""
    try:
        factory = EXECUTORS[name]
    except KeyError:
        raise GiglioError(
            f"Unknown executor {name!r} (choose from {', '.join(sorted(EXECUTORS))})"
        ) from None
    return factory()
