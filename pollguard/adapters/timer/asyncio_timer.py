"""Asyncio timer adapter.

Implements TimerPort on top of the running event loop's monotonic clock
and call_at scheduling.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from pollguard.core.ports import TimerHandlePort, TimerPort

logger = logging.getLogger(__name__)


class AsyncioTimerHandle(TimerHandlePort):
    """Wraps an asyncio.TimerHandle."""

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioTimer(TimerPort):
    """Event-loop-backed timer source."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        """Initialize asyncio timer.

        Args:
            loop: Event loop to schedule on. If None, the running loop is
                looked up on first use.
        """
        self._loop = loop
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def pending_tasks(self) -> int:
        """Number of spawned tasks that have not finished yet."""
        return len(self._tasks)

    def now(self) -> float:
        return self.loop.time()

    def call_at(self, when: float, callback: Callable[[], None]) -> AsyncioTimerHandle:
        return AsyncioTimerHandle(self.loop.call_at(when, callback))

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        # Keep a strong reference until the task finishes.
        task = self.loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task failed: {exc}", exc_info=exc)
