"""Port interfaces for the pollguard scheduler.

These abstract base classes define the boundaries between the core
scheduling logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - TimerPort: Clock and one-shot timer source that drives ticks
   - TickListenerPort: Observability side channel for tick events

2. **Caller-supplied callables** (see models.Operation / models.ResultHandler)
   - Operation: zero-argument producer of an eventual outcome
   - ResultHandler: receives (error, value) once per completed invocation
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any

from .models import Operation, ResultHandler, TickEvent

__all__ = [
    "Operation",
    "ResultHandler",
    "TickListenerPort",
    "TimerHandlePort",
    "TimerPort",
]


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class TimerHandlePort(ABC):
    """Handle for a single pending timer callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the callback if it has not fired yet.

        Must be idempotent: cancelling an already fired or already
        cancelled handle has no effect.
        """


class TimerPort(ABC):
    """Port for the clock and timer source that drives scheduler ticks.

    Implementations must:
    - Report a monotonic time in seconds via now()
    - Invoke callbacks scheduled with call_at() no earlier than their
      deadline, in deadline order, on the thread that owns the scheduler
    """

    @abstractmethod
    def now(self) -> float:
        """Return the current time of this timer's monotonic clock."""

    @abstractmethod
    def call_at(self, when: float, callback: Callable[[], None]) -> TimerHandlePort:
        """Schedule callback to run once at absolute time `when`.

        Args:
            when: Deadline on the clock returned by now().
            callback: Zero-argument callable to invoke.

        Returns:
            Handle that can cancel the pending callback.
        """

    @abstractmethod
    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        """Run coro as a background task.

        The task must start on the same thread as timer callbacks so
        that in-flight state transitions stay serialized with ticks.
        """


class TickListenerPort(ABC):
    """Port for observing tick decisions.

    Listeners receive one TickEvent per tick: whether an invocation was
    started, skipped because one is still in flight, or missed because
    the timer fired late. Listeners must not block; exceptions raised
    here are logged by the scheduler and otherwise ignored.
    """

    @abstractmethod
    def on_tick(self, event: TickEvent) -> None:
        """Receive a tick event."""
