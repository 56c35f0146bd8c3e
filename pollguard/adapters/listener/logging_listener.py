"""Logging tick listener adapter.

Implements TickListenerPort by writing one log line per tick decision.
"""

import logging

from pollguard.core.models import TickEvent, TickKind
from pollguard.core.ports import TickListenerPort

logger = logging.getLogger(__name__)

_LEVELS = {
    TickKind.STARTED: logging.INFO,
    TickKind.SKIPPED: logging.INFO,
    TickKind.MISSED: logging.WARNING,
}


class LoggingTickListener(TickListenerPort):
    """Logs started, skipped, and missed ticks."""

    def on_tick(self, event: TickEvent) -> None:
        if event.kind is TickKind.STARTED:
            message = "started invocation"
        elif event.kind is TickKind.SKIPPED:
            message = "skipped, previous invocation still in flight"
        else:
            message = "missed, timer fired late"
        logger.log(_LEVELS[event.kind], f"[{event.task_name}] Tick #{event.tick} {message}")
