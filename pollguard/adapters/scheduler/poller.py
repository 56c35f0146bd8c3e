"""Poller adapter.

Wires the core PollScheduler to the asyncio timer and exposes the
public start() entry point.
"""

import logging
from collections.abc import Sequence

from pollguard.adapters.timer.asyncio_timer import AsyncioTimer
from pollguard.core.models import Operation, PollTask, ResultHandler
from pollguard.core.ports import TickListenerPort, TimerPort
from pollguard.core.scheduler import CancellationHandle, PollScheduler

logger = logging.getLogger(__name__)


def start(
    operation: Operation,
    interval_seconds: float,
    handler: ResultHandler,
    *,
    name: str = "poll",
    timeout_seconds: float | None = None,
    timer: TimerPort | None = None,
    listeners: Sequence[TickListenerPort] = (),
) -> CancellationHandle:
    """Start polling `operation` every `interval_seconds`.

    The first invocation happens immediately. Must be called with a
    running event loop unless a timer bound to another loop is supplied.

    Args:
        operation: Zero-argument callable producing an eventual value.
        interval_seconds: Tick period, measured between scheduled tick times.
        handler: Called as handler(error, value) once per invocation. An
            async handler is awaited without blocking later ticks; runs
            queue behind each other, so it should keep up with the interval.
        name: Label used in log lines and tick events.
        timeout_seconds: Optional per-invocation timeout.
        timer: Timer source (defaults to AsyncioTimer on the running loop).
        listeners: Tick observers.

    Returns:
        CancellationHandle whose stop() halts future invocations.

    Raises:
        ConfigurationError: If the task configuration is invalid. Raised
            before any timer is armed.
    """
    task = PollTask(
        operation=operation,
        interval_seconds=interval_seconds,
        handler=handler,
        name=name,
        timeout_seconds=timeout_seconds,
    )
    return PollerFactory.create(task, timer=timer, listeners=listeners).start()


class PollerFactory:
    """Factory for creating poll scheduler instances."""

    @staticmethod
    def create(
        task: PollTask,
        timer: TimerPort | None = None,
        listeners: Sequence[TickListenerPort] = (),
    ) -> PollScheduler:
        """Create a new poll scheduler instance.

        Args:
            task: Validated polling configuration.
            timer: Timer source (defaults to AsyncioTimer).
            listeners: Tick observers.

        Returns:
            PollScheduler instance, not yet started.
        """
        return PollScheduler(
            task=task,
            timer=timer if timer is not None else AsyncioTimer(),
            listeners=listeners,
        )
