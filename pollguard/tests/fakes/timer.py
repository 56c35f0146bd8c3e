"""Fake TimerPort implementation for testing.

Time only moves when a test calls advance() or jump(); due callbacks fire
in deadline order and the event loop is drained after each one, so
spawned invocations settle deterministically between ticks.
"""

import asyncio
import itertools
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

from pollguard.core.ports import TimerHandlePort, TimerPort

# Loop iterations needed for a resolved future to propagate through
# operation -> invoker -> scheduler.
_DRAIN_ITERATIONS = 25


@dataclass(eq=False)
class _Scheduled(TimerHandlePort):
    when: float
    seq: int
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimer(TimerPort):
    """Manually advanced timer for deterministic scheduler tests."""

    def __init__(self, start: float = 0.0) -> None:
        """Initialize the clock at `start`."""
        self._now = start
        self._seq = itertools.count()
        self._pending: list[_Scheduled] = []
        self.tasks: list[asyncio.Task[None]] = []
        self.call_at_count = 0

    def now(self) -> float:
        return self._now

    def call_at(self, when: float, callback: Callable[[], None]) -> _Scheduled:
        self.call_at_count += 1
        entry = _Scheduled(when=when, seq=next(self._seq), callback=callback)
        self._pending.append(entry)
        return entry

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        self.tasks.append(asyncio.get_running_loop().create_task(coro))

    @property
    def pending_count(self) -> int:
        """Number of scheduled callbacks that are neither fired nor cancelled."""
        return sum(1 for entry in self._pending if not entry.cancelled)

    async def sleep(self, delay: float) -> None:
        """Suspend until the fake clock has advanced by `delay`."""
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def _wake() -> None:
            if not future.done():
                future.set_result(None)

        self.call_at(self._now + delay, _wake)
        await future

    async def drain(self) -> None:
        """Let spawned tasks run until they block again."""
        for _ in range(_DRAIN_ITERATIONS):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback due on the way."""
        target = self._now + seconds
        await self.drain()
        while True:
            entry = self._next_due(target)
            if entry is None:
                break
            self._pending.remove(entry)
            self._now = max(self._now, entry.when)
            entry.callback()
            await self.drain()
        self._now = target
        await self.drain()

    async def jump(self, seconds: float) -> None:
        """Move the clock forward first, then fire everything now overdue.

        Simulates an event loop that was blocked: callbacks observe a
        now() later than their deadline.
        """
        self._now += seconds
        await self.advance(0)

    def _next_due(self, target: float) -> _Scheduled | None:
        due = [e for e in self._pending if not e.cancelled and e.when <= target]
        if not due:
            return None
        return min(due, key=lambda e: (e.when, e.seq))
