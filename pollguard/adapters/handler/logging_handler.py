"""Logging result handler adapter.

Writes each poll outcome to the application log with a compact,
human-readable summary of the value.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


class LoggingResultHandler:
    """Logs successes at INFO and failures at WARNING."""

    def __init__(self, name: str = "poll", max_chars: int = 200):
        """Initialize logging result handler.

        Args:
            name: Label included in every log line.
            max_chars: Values longer than this are truncated in the log.
        """
        if max_chars <= 0:
            raise ValueError(f"max_chars must be positive, got {max_chars}")
        self.name = name
        self.max_chars = max_chars
        self.successes = 0
        self.failures = 0

    def __call__(self, error: BaseException | None, value: Any) -> None:
        if error is not None:
            self.failures += 1
            logger.warning(f"[{self.name}] Poll failed: {type(error).__name__}: {error}")
            return

        self.successes += 1
        logger.info(f"[{self.name}] Poll result: {self.format_value(value)}")

    def format_value(self, value: Any) -> str:
        """Render a value as a single truncated line."""
        try:
            text = json.dumps(value, default=str, sort_keys=True)
        except (TypeError, ValueError):
            text = repr(value)
        if len(text) > self.max_chars:
            return text[: self.max_chars - 3] + "..."
        return text
