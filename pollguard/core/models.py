"""Domain models for the pollguard scheduler.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

# A zero-argument producer of an eventual outcome. Coroutine functions are
# the common case; plain callables returning a value are accepted too.
Operation: TypeAlias = Callable[[], Awaitable[Any] | Any]

# Receives (error, value); exactly one of them is populated.
ResultHandler: TypeAlias = Callable[[BaseException | None, Any], Awaitable[None] | None]


class ConfigurationError(ValueError):
    """Raised when a poll task is configured with invalid parameters."""


@dataclass(frozen=True)
class PollTask:
    """Immutable configuration of one polling session."""

    operation: Operation
    interval_seconds: float
    handler: ResultHandler
    name: str = "poll"
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        """Validate task configuration before any timer is armed."""
        if self.operation is None or not callable(self.operation):
            raise ConfigurationError("operation must be a callable")
        if self.handler is None or not callable(self.handler):
            raise ConfigurationError("handler must be a callable")
        if not _is_positive_number(self.interval_seconds):
            raise ConfigurationError(
                f"interval_seconds must be a positive number, got {self.interval_seconds!r}"
            )
        if self.timeout_seconds is not None and not _is_positive_number(
            self.timeout_seconds
        ):
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds!r}"
            )
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError("name must be a non-empty string")


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


@dataclass(frozen=True)
class Outcome:
    """Result of a single invocation: either a value or an error, never both."""

    value: Any = None
    error: BaseException | None = None

    def __post_init__(self) -> None:
        """Validate that the outcome is not both a success and a failure."""
        if self.error is not None and self.value is not None:
            raise ValueError("outcome cannot carry both a value and an error")

    @classmethod
    def success(cls, value: Any) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


class SchedulerState(Enum):
    """Lifecycle states for a poll scheduler.

    State transitions:
    - IDLE: no invocation outstanding, waiting for the next tick
    - INVOKING: one invocation outstanding; ticks are skipped
    - STOPPED: terminal; no further ticks fire. An invocation that was
      outstanding at stop time still completes and is reported.
    """

    IDLE = "idle"
    INVOKING = "invoking"
    STOPPED = "stopped"


class TickKind(Enum):
    """What happened on a single tick."""

    STARTED = "started"
    SKIPPED = "skipped"
    MISSED = "missed"


@dataclass(frozen=True)
class TickEvent:
    """Observability record emitted for each tick."""

    task_name: str
    tick: int  # 0 is the eager start
    kind: TickKind
    scheduled_at: float  # timer clock, not wall clock

    def __post_init__(self) -> None:
        """Validate tick event invariants on creation."""
        if self.tick < 0:
            raise ValueError(f"tick must be non-negative, got {self.tick}")


@dataclass
class TickStats:
    """Running counters for a scheduler instance."""

    started: int = 0
    skipped: int = 0
    missed: int = 0
    succeeded: int = 0
    failed: int = 0

    @property
    def completed(self) -> int:
        return self.succeeded + self.failed

    def record(self, event: TickEvent) -> None:
        if event.kind is TickKind.STARTED:
            self.started += 1
        elif event.kind is TickKind.SKIPPED:
            self.skipped += 1
        else:
            self.missed += 1

    def record_outcome(self, outcome: Outcome) -> None:
        if outcome.ok:
            self.succeeded += 1
        else:
            self.failed += 1
