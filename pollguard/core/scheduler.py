"""Single-flight interval scheduler.

Drives one PollTask from a TimerPort: the operation is invoked eagerly on
start and then once per interval tick, unless the previous invocation is
still outstanding, in which case the tick is skipped and lost.
"""

import asyncio
import inspect
import logging
import math
from collections.abc import Awaitable, Sequence
from functools import partial
from typing import Any

from .invoker import Invoker
from .models import (
    Outcome,
    PollTask,
    SchedulerState,
    TickEvent,
    TickKind,
    TickStats,
)
from .ports import TickListenerPort, TimerHandlePort, TimerPort

logger = logging.getLogger(__name__)


class CancellationHandle:
    """Handle returned by PollScheduler.start(); stops future ticks."""

    def __init__(self, scheduler: "PollScheduler"):
        self._scheduler = scheduler

    @property
    def scheduler(self) -> "PollScheduler":
        return self._scheduler

    @property
    def stopped(self) -> bool:
        return self._scheduler.stopped

    def stop(self) -> None:
        """Stop scheduling new invocations. Safe to call more than once."""
        self._scheduler.stop()


class PollScheduler:
    """Owns the repeating timer, the in-flight flag, and stop handling.

    Ticks are placed on a fixed grid measured from the start time
    (tick k fires at start + k * interval), independent of how long
    invocations take. Must be driven from a single event loop thread.

    The in-flight flag is cleared before the handler runs, so a slow async
    handler does not hold back polling. Awaitable handler results run one
    at a time in completion order; a handler that is consistently slower
    than the interval builds an unbounded backlog of pending handler runs.
    """

    def __init__(
        self,
        task: PollTask,
        timer: TimerPort,
        listeners: Sequence[TickListenerPort] = (),
    ):
        """Initialize poll scheduler.

        Args:
            task: Validated polling configuration.
            timer: Clock and timer source driving ticks.
            listeners: Observers notified of every tick decision.
        """
        self.task = task
        self.stats = TickStats()
        self._timer = timer
        self._listeners = list(listeners)
        self._invoker = Invoker(name=task.name)
        self._handler_lock = asyncio.Lock()
        self._handle: TimerHandlePort | None = None
        self._origin = 0.0
        self._started = False
        self._stopped = False
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def state(self) -> SchedulerState:
        if self._stopped:
            return SchedulerState.STOPPED
        if self._in_flight:
            return SchedulerState.INVOKING
        return SchedulerState.IDLE

    def add_listener(self, listener: TickListenerPort) -> None:
        self._listeners.append(listener)

    def start(self) -> CancellationHandle:
        """Invoke the operation immediately and arm the repeating timer.

        Returns:
            CancellationHandle whose stop() halts future ticks.

        Raises:
            RuntimeError: If the scheduler was already started or stopped.
        """
        if self._started:
            raise RuntimeError(f"Poll scheduler '{self.task.name}' already started")
        if self._stopped:
            raise RuntimeError(f"Poll scheduler '{self.task.name}' was stopped")

        self._started = True
        self._origin = self._timer.now()
        logger.info(
            f"[{self.task.name}] Starting poll scheduler with "
            f"{self.task.interval_seconds}s interval"
        )

        self._tick(0, self._origin)
        if not self._stopped:
            self._arm(1)
        return CancellationHandle(self)

    def stop(self) -> None:
        """Stop future ticks. An in-flight invocation is left to complete."""
        if self._stopped:
            return

        self._stopped = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

        if self._in_flight:
            logger.info(
                f"[{self.task.name}] Poll scheduler stopped; "
                f"in-flight invocation will still be reported"
            )
        else:
            logger.info(f"[{self.task.name}] Poll scheduler stopped")

    def _scheduled_time(self, tick: int) -> float:
        return self._origin + tick * self.task.interval_seconds

    def _arm(self, tick: int) -> None:
        self._handle = self._timer.call_at(
            self._scheduled_time(tick), partial(self._fire, tick)
        )

    def _fire(self, tick: int) -> None:
        """Timer callback for scheduled tick `tick`."""
        self._handle = None
        if self._stopped:
            return

        # Timer fired late: drop every tick whose time has already passed
        # and act on the most recent one only.
        latest = math.floor((self._timer.now() - self._origin) / self.task.interval_seconds)
        if latest > tick:
            logger.warning(
                f"[{self.task.name}] Timer fell behind, dropping "
                f"{latest - tick} missed tick(s)"
            )
            for missed in range(tick, latest):
                self._emit(
                    TickEvent(
                        task_name=self.task.name,
                        tick=missed,
                        kind=TickKind.MISSED,
                        scheduled_at=self._scheduled_time(missed),
                    )
                )
            tick = latest

        self._arm(tick + 1)
        self._tick(tick, self._scheduled_time(tick))

    def _tick(self, tick: int, scheduled_at: float) -> None:
        """Start an invocation unless one is already in flight."""
        if self._in_flight:
            logger.debug(
                f"[{self.task.name}] Tick #{tick} skipped: "
                f"previous invocation still in flight"
            )
            self._emit(
                TickEvent(
                    task_name=self.task.name,
                    tick=tick,
                    kind=TickKind.SKIPPED,
                    scheduled_at=scheduled_at,
                )
            )
            return

        self._in_flight = True
        logger.debug(f"[{self.task.name}] Tick #{tick} started invocation")
        self._emit(
            TickEvent(
                task_name=self.task.name,
                tick=tick,
                kind=TickKind.STARTED,
                scheduled_at=scheduled_at,
            )
        )
        self._timer.spawn(self._invoke(tick))

    async def _invoke(self, tick: int) -> None:
        started_at = self._timer.now()
        await self._invoker.invoke(
            self.task.operation,
            partial(self._complete, tick, started_at),
            timeout_seconds=self.task.timeout_seconds,
        )

    def _complete(self, tick: int, started_at: float, outcome: Outcome) -> None:
        """Return to idle, then hand the outcome to the result handler."""
        self._in_flight = False
        self.stats.record_outcome(outcome)

        elapsed = self._timer.now() - started_at
        if outcome.ok:
            logger.debug(
                f"[{self.task.name}] Invocation from tick #{tick} "
                f"succeeded in {elapsed:.2f}s"
            )
        else:
            logger.warning(
                f"[{self.task.name}] Invocation from tick #{tick} failed "
                f"in {elapsed:.2f}s: {type(outcome.error).__name__}: {outcome.error}"
            )

        try:
            result = self.task.handler(outcome.error, outcome.value)
        except Exception as e:
            logger.error(
                f"[{self.task.name}] Result handler raised: {e}", exc_info=True
            )
            return

        if inspect.isawaitable(result):
            self._timer.spawn(self._await_handler(result))

    async def _await_handler(self, pending: Awaitable[Any]) -> None:
        # Serialize async handlers so one never overlaps the next.
        async with self._handler_lock:
            try:
                await pending
            except Exception as e:
                logger.error(
                    f"[{self.task.name}] Result handler raised: {e}", exc_info=True
                )

    def _emit(self, event: TickEvent) -> None:
        self.stats.record(event)
        for listener in self._listeners:
            try:
                listener.on_tick(event)
            except Exception as e:
                logger.error(
                    f"[{self.task.name}] Tick listener {type(listener).__name__} "
                    f"raised: {e}",
                    exc_info=True,
                )
