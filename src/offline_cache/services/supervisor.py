"""Supervised background tasks.

Work that must outlive the response it was scheduled from (the
cache-first refresh) is spawned here instead of as a bare detached
coroutine. The supervisor holds a reference to every task until it
finishes, bounds how many run at once, and logs instead of raising.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any

from offline_cache.logger import get_logger

logger = get_logger(__name__)


class TaskSupervisor:
    """Bounded pool of fire-and-forget tasks with error suppression."""

    def __init__(self, max_concurrency: int = 16) -> None:
        """Initialize the supervisor.

        Args:
            max_concurrency: How many spawned tasks may run their body at
                once. Extra tasks wait for a slot.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._max_concurrency = max_concurrency
        self._semaphore: asyncio.Semaphore | None = None
        self._tasks: set[asyncio.Task] = set()

    def _slots(self) -> asyncio.Semaphore:
        # Created lazily so it binds to the running loop.
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)
        return self._semaphore

    async def _run(self, coro: Coroutine[Any, Any, Any], name: str) -> None:
        try:
            async with self._slots():
                await coro
        except asyncio.CancelledError:
            # Cancelled while waiting for a slot: the body never started.
            coro.close()
            raise
        except Exception:
            logger.warning("Background task %s failed", name, exc_info=True)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str = "background") -> asyncio.Task:
        """Schedule ``coro`` without awaiting it.

        Args:
            coro: Coroutine to run
            name: Label used in logs and as the task name

        Returns:
            The task; callers may ignore it
        """
        task = asyncio.get_running_loop().create_task(self._run(coro, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        """Number of spawned tasks that have not finished."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every spawned task, including ones spawned meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding tasks and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
