"""Single-settlement future used to signal completion of one step.

A Deferred starts PENDING and is settled exactly once with an Outcome
(``Success`` or ``Failure``). Callbacks registered while pending run in
registration order at settlement time; callbacks registered afterwards
run immediately, inside the ``on_settle`` call.

Unlike ``asyncio.Future``, notification is synchronous, so a Deferred
works the same under the immediate executor and inside an event loop.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from giglio.domain.models import (
    AlreadySettledError,
    DeferredState,
    Failure,
    Outcome,
    Success,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SettleCallback = Callable[[Outcome], object]


class Deferred(Generic[T]):
    """The outcome of one asynchronous step."""

    def __init__(self) -> None:
        self._state = DeferredState.PENDING
        self._outcome: Outcome | None = None
        self._callbacks: list[SettleCallback] = []

    def __repr__(self) -> str:
        if self._outcome is None:
            return "<Deferred pending>"
        return f"<Deferred settled {self._outcome!r}>"

    @property
    def state(self) -> DeferredState:
        return self._state

    @property
    def is_settled(self) -> bool:
        return self._state is DeferredState.SETTLED

    @property
    def outcome(self) -> Outcome:
        """The stored outcome. Raises RuntimeError while still pending."""
        if self._outcome is None:
            raise RuntimeError("Deferred is still pending")
        return self._outcome

    def settle(self, outcome: Outcome) -> None:
        """Settle with *outcome* and notify every pending callback."""
        if self._state is DeferredState.SETTLED:
            raise AlreadySettledError(f"Deferred already settled with {self._outcome!r}")
        self._state = DeferredState.SETTLED
        self._outcome = outcome
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            self._notify(callback, outcome)

    def resolve(self, value: T) -> None:
        self.settle(Success(value))

    def reject(self, error: Exception) -> None:
        self.settle(Failure(error))

    def on_settle(self, callback: SettleCallback) -> None:
        """Register *callback*, or call it now if already settled."""
        if self._outcome is None:
            self._callbacks.append(callback)
        else:
            self._notify(callback, self._outcome)

    def capture(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Deferred[T]":
        """Call *fn* and settle with its return value or the exception it raised."""
        try:
            value = fn(*args, **kwargs)
        except Exception as exc:
            self.reject(exc)
        else:
            self.resolve(value)
        return self

    async def wait(self) -> Outcome:
        """Wait on the running event loop until settled and return the outcome."""
        if self._outcome is not None:
            return self._outcome
        future: asyncio.Future[Outcome] = asyncio.get_running_loop().create_future()

        def _transfer(outcome: Outcome) -> None:
            if not future.done():
                future.set_result(outcome)

        self.on_settle(_transfer)
        return await future

    @staticmethod
    def _notify(callback: SettleCallback, outcome: Outcome) -> None:
        try:
            callback(outcome)
        except Exception:
            logger.exception("Deferred callback %r failed", callback)
