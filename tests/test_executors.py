"""Tests for executor strategies."""

import asyncio

import pytest

from giglio.domain.models import GiglioError
from giglio.sequencing.executors import (
    ImmediateExecutor,
    ManualExecutor,
    YieldingExecutor,
    create_executor,
)


class TestImmediateExecutor:
    def test_runs_in_caller_frame(self) -> None:
        ran: list[int] = []
        ImmediateExecutor().schedule(lambda: ran.append(1))
        assert ran == [1]

    def test_nested_work_runs_after_current_item(self) -> None:
        executor = ImmediateExecutor()
        order: list[str] = []

        def outer() -> None:
            executor.schedule(lambda: order.append("inner"))
            order.append("outer done")

        executor.schedule(outer)
        assert order == ["outer done", "inner"]

    def test_deep_nesting_keeps_stack_flat(self) -> None:
        executor = ImmediateExecutor()
        remaining = 10_000

        def hop() -> None:
            nonlocal remaining
            remaining -= 1
            if remaining:
                executor.schedule(hop)

        executor.schedule(hop)
        assert remaining == 0

    def test_error_leaves_executor_usable(self) -> None:
        executor = ImmediateExecutor()

        def fail() -> None:
            raise RuntimeError("step")

        with pytest.raises(RuntimeError):
            executor.schedule(fail)
        ran: list[int] = []
        executor.schedule(lambda: ran.append(1))
        assert ran == [1]


class TestYieldingExecutor:
    async def test_runs_after_current_stack_unwinds(self) -> None:
        order: list[str] = []
        YieldingExecutor().schedule(lambda: order.append("scheduled"))
        order.append("caller")
        await asyncio.sleep(0)
        assert order == ["caller", "scheduled"]

    async def test_preserves_fifo_order(self) -> None:
        order: list[int] = []
        executor = YieldingExecutor()
        for i in range(3):
            executor.schedule(lambda i=i: order.append(i))
        await asyncio.sleep(0)
        assert order == [0, 1, 2]

    def test_explicit_loop(self) -> None:
        loop = asyncio.new_event_loop()
        try:
            ran: list[int] = []
            YieldingExecutor(loop).schedule(lambda: ran.append(1))
            assert ran == []
            loop.run_until_complete(asyncio.sleep(0))
            assert ran == [1]
        finally:
            loop.close()

    def test_requires_running_loop_without_explicit_loop(self) -> None:
        with pytest.raises(RuntimeError):
            YieldingExecutor().schedule(lambda: None)


class TestManualExecutor:
    def test_holds_work_until_step(self) -> None:
        ran: list[int] = []
        executor = ManualExecutor()
        executor.schedule(lambda: ran.append(1))
        executor.schedule(lambda: ran.append(2))
        assert ran == []
        assert len(executor) == 2

        assert executor.step()
        assert ran == [1]
        assert executor.step()
        assert ran == [1, 2]
        assert not executor.step()

    def test_flush_runs_newly_scheduled_work(self) -> None:
        executor = ManualExecutor()
        ran: list[str] = []

        def outer() -> None:
            ran.append("outer")
            executor.schedule(lambda: ran.append("inner"))

        executor.schedule(outer)
        assert executor.flush() == 2
        assert ran == ["outer", "inner"]
        assert len(executor) == 0


class TestCreateExecutor:
    def test_known_names(self) -> None:
        assert isinstance(create_executor("immediate"), ImmediateExecutor)
        assert isinstance(create_executor("yielding"), YieldingExecutor)

    def test_unknown_name(self) -> None:
        with pytest.raises(GiglioError, match="Unknown executor"):
            create_executor("threads")
