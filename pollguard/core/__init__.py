"""Core scheduling logic for pollguard.

This package contains zero external dependencies and represents
the single-flight scheduling logic of the application. Timer sources,
operations, and observers are supplied through the adapters package.
"""

from .invoker import Invoker, callback_operation
from .models import (
    ConfigurationError,
    Operation,
    Outcome,
    PollTask,
    ResultHandler,
    SchedulerState,
    TickEvent,
    TickKind,
    TickStats,
)
from .scheduler import CancellationHandle, PollScheduler

__all__ = [
    "CancellationHandle",
    "ConfigurationError",
    "Invoker",
    "Operation",
    "Outcome",
    "PollScheduler",
    "PollTask",
    "ResultHandler",
    "SchedulerState",
    "TickEvent",
    "TickKind",
    "TickStats",
    "callback_operation",
]
