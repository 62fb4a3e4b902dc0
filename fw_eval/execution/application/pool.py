"""WorkerPool — a semaphore-bounded TaskGroup scoped to an async with block."""

import asyncio
from collections.abc import Coroutine
from types import TracebackType
from typing import Any, Self


class WorkerPool:
    """Runs submitted coroutines concurrently; at most ``max_concurrent`` hold a slot.

    Work acquires a slot with ``async with pool.slot():`` only around the part
    that should count against the ceiling, so retry backoff can sleep without
    blocking siblings. Leaving the ``async with pool:`` block waits for every
    submitted coroutine; none outlives the pool.
    """

    def __init__(self, max_concurrent: int) -> None:
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._group: asyncio.TaskGroup | None = None

    async def __aenter__(self) -> Self:
        self._group = asyncio.TaskGroup()
        await self._group.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        group, self._group = self._group, None
        assert group is not None
        return await group.__aexit__(exc_type, exc, tb)

    def slot(self) -> asyncio.Semaphore:
        return self._semaphore

    def submit[T](self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        if self._group is None:
            coro.close()
            raise RuntimeError("WorkerPool.submit() called outside 'async with'")
        return self._group.create_task(coro)
