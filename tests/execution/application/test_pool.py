"""Tests for WorkerPool."""

import asyncio

import pytest

from fw_eval.execution.application.pool import WorkerPool


class TestWorkerPool:
    """Submitted work runs concurrently under the slot ceiling."""

    async def test_slot_caps_concurrency(self) -> None:
        active = 0
        peak = 0

        async def work(pool: WorkerPool) -> None:
            nonlocal active, peak
            async with pool.slot():
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        async with WorkerPool(max_concurrent=2) as pool:
            for _ in range(6):
                pool.submit(work(pool))

        assert peak == 2

    async def test_exit_waits_for_all_submissions(self) -> None:
        finished: list[int] = []

        async def work(index: int) -> int:
            await asyncio.sleep(0.01 * index)
            finished.append(index)
            return index

        async with WorkerPool(max_concurrent=4) as pool:
            tasks = [pool.submit(work(i)) for i in range(3)]

        assert sorted(finished) == [0, 1, 2]
        assert [t.result() for t in tasks] == [0, 1, 2]

    async def test_submit_outside_block_raises(self) -> None:
        pool = WorkerPool(max_concurrent=1)

        async def work() -> None:
            return None

        with pytest.raises(RuntimeError, match="outside"):
            pool.submit(work())

    def test_max_concurrent_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            WorkerPool(max_concurrent=0)

    async def test_failure_propagates_as_exception_group(self) -> None:
        async def boom() -> None:
            raise RuntimeError("boom")

        with pytest.raises(ExceptionGroup):
            async with WorkerPool(max_concurrent=1) as pool:
                pool.submit(boom())
