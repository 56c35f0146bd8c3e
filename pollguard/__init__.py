"""pollguard: single-flight interval polling on asyncio.

Public entry point:

    handle = start(operation, interval_seconds, handler)
    ...
    handle.stop()
"""

from pollguard.adapters.scheduler.poller import start
from pollguard.core.invoker import callback_operation
from pollguard.core.models import ConfigurationError, Outcome, PollTask, TickEvent, TickKind
from pollguard.core.scheduler import CancellationHandle, PollScheduler

__all__ = [
    "CancellationHandle",
    "ConfigurationError",
    "Outcome",
    "PollScheduler",
    "PollTask",
    "TickEvent",
    "TickKind",
    "callback_operation",
    "start",
]
