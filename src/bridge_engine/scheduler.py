"""
Deferred task scheduling.

The trick display delay is the only deferred work in the server. Production
code runs it on the asyncio loop; tests drive a ManualScheduler with a fake
clock so the delay is resolved deterministically.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Awaitable, Callable, List, Set, Tuple

logger = logging.getLogger(__name__)

Task = Callable[[], Awaitable[None]]


class AsyncioScheduler:
    """Runs deferred tasks on the running event loop."""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def call_later(self, delay: float, callback: Task) -> None:
        task = asyncio.create_task(self._run(delay, callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, delay: float, callback: Task) -> None:
        await asyncio.sleep(delay)
        try:
            await callback()
        except Exception:
            logger.exception("Deferred task failed")

    @property
    def pending(self) -> int:
        return len(self._tasks)


class ManualScheduler:
    """Fake-clock scheduler; tasks run only when advance() reaches them."""

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, Task]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Task) -> None:
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), callback))

    async def advance(self, seconds: float) -> int:
        """Move the clock forward, running every task that falls due. Returns how many ran."""
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            await callback()
            ran += 1
        self.now = target
        return ran

    @property
    def pending(self) -> int:
        return len(self._queue)
