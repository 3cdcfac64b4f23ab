"""Tests for the single-settlement Deferred."""

import asyncio
import logging

import pytest

from giglio.domain.models import (
    AlreadySettledError,
    DeferredState,
    Failure,
    Outcome,
    Success,
)
from giglio.sequencing.deferred import Deferred


class TestSettle:
    def test_starts_pending(self) -> None:
        d: Deferred[int] = Deferred()
        assert d.state is DeferredState.PENDING
        assert not d.is_settled
        with pytest.raises(RuntimeError):
            _ = d.outcome

    def test_resolve_stores_success(self) -> None:
        d: Deferred[int] = Deferred()
        d.resolve(3)
        assert d.is_settled
        assert d.outcome == Success(3)

    def test_reject_stores_failure(self) -> None:
        err = ValueError("bad")
        d: Deferred[int] = Deferred()
        d.reject(err)
        assert d.outcome == Failure(err)

    def test_none_is_a_real_result(self) -> None:
        d: Deferred[None] = Deferred()
        d.resolve(None)
        assert d.is_settled
        assert d.outcome == Success(None)

    def test_second_settle_raises_and_keeps_first_outcome(self) -> None:
        d: Deferred[int] = Deferred()
        d.resolve(1)
        with pytest.raises(AlreadySettledError):
            d.resolve(2)
        with pytest.raises(AlreadySettledError):
            d.reject(RuntimeError("late"))
        assert d.outcome == Success(1)


class TestOnSettle:
    def test_pending_callbacks_wait_for_settle(self) -> None:
        seen: list[Outcome] = []
        d: Deferred[str] = Deferred()
        d.on_settle(seen.append)
        assert seen == []
        d.resolve("x")
        assert seen == [Success("x")]

    def test_callbacks_run_in_registration_order(self) -> None:
        order: list[int] = []
        d: Deferred[None] = Deferred()
        for i in range(4):
            d.on_settle(lambda _o, i=i: order.append(i))
        d.resolve(None)
        assert order == [0, 1, 2, 3]

    def test_late_callback_runs_synchronously_once(self) -> None:
        d: Deferred[int] = Deferred()
        d.resolve(7)
        seen: list[Outcome] = []
        d.on_settle(seen.append)
        assert seen == [Success(7)]

    def test_callbacks_are_not_rerun(self) -> None:
        seen: list[Outcome] = []
        d: Deferred[int] = Deferred()
        d.on_settle(seen.append)
        d.resolve(1)
        d.on_settle(lambda _o: None)
        assert seen == [Success(1)]

    def test_failing_callback_is_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        seen: list[Outcome] = []

        def explode(_outcome: Outcome) -> None:
            raise RuntimeError("observer broke")

        d: Deferred[int] = Deferred()
        d.on_settle(explode)
        d.on_settle(seen.append)
        with caplog.at_level(logging.ERROR, logger="giglio.sequencing.deferred"):
            d.resolve(5)

        assert seen == [Success(5)]
        assert d.outcome == Success(5)
        assert "observer broke" in caplog.text

    def test_failing_late_callback_does_not_raise(self) -> None:
        d: Deferred[int] = Deferred()
        d.resolve(1)
        d.on_settle(lambda _o: 1 / 0)
        assert d.outcome == Success(1)

    def test_callback_registered_during_notification_runs_immediately(self) -> None:
        order: list[str] = []
        d: Deferred[None] = Deferred()

        def first(_outcome: Outcome) -> None:
            order.append("first")
            d.on_settle(lambda _o: order.append("nested"))

        d.on_settle(first)
        d.on_settle(lambda _o: order.append("second"))
        d.resolve(None)
        assert order == ["first", "nested", "second"]


class TestCapture:
    def test_return_value_becomes_success(self) -> None:
        d = Deferred[int]().capture(lambda a, b: a + b, 2, b=3)
        assert d.outcome == Success(5)

    def test_exception_becomes_failure(self) -> None:
        err = KeyError("k")

        def fail() -> None:
            raise err

        d = Deferred[None]().capture(fail)
        assert isinstance(d.outcome, Failure)
        assert d.outcome.error is err

    def test_base_exceptions_propagate(self) -> None:
        def interrupt() -> None:
            raise KeyboardInterrupt

        d: Deferred[None] = Deferred()
        with pytest.raises(KeyboardInterrupt):
            d.capture(interrupt)
        assert not d.is_settled


class TestWait:
    async def test_wait_for_later_settlement(self) -> None:
        d: Deferred[str] = Deferred()
        asyncio.get_running_loop().call_soon(d.resolve, "late")
        assert await d.wait() == Success("late")

    async def test_wait_on_settled(self) -> None:
        d: Deferred[str] = Deferred()
        d.reject(ValueError("x"))
        outcome = await d.wait()
        assert isinstance(outcome, Failure)
