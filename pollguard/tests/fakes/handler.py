"""Recording result handler for testing."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .timer import FakeTimer


@dataclass(frozen=True)
class HandledResult:
    """One captured handler call."""

    at: float
    error: BaseException | None
    value: Any
    scheduler_in_flight: bool | None


class RecordingHandler:
    """Captures every (error, value) delivered by the scheduler.

    If a probe is set, it is called on each delivery to record whether the
    scheduler still considered an invocation in flight at that moment.
    """

    def __init__(self, timer: FakeTimer) -> None:
        """Initialize with empty history."""
        self.timer = timer
        self.calls: list[HandledResult] = []
        self.in_flight_probe: Callable[[], bool] | None = None
        self.should_fail = False
        self.fail_message = "Handler failed"

    def __call__(self, error: BaseException | None, value: Any) -> None:
        probe = self.in_flight_probe() if self.in_flight_probe is not None else None
        self.calls.append(
            HandledResult(
                at=self.timer.now(),
                error=error,
                value=value,
                scheduler_in_flight=probe,
            )
        )
        if self.should_fail:
            raise RuntimeError(self.fail_message)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def successes(self) -> list[HandledResult]:
        return [call for call in self.calls if call.error is None]

    @property
    def failures(self) -> list[HandledResult]:
        return [call for call in self.calls if call.error is not None]

    def set_should_fail(self, should_fail: bool, message: str = "Handler failed") -> None:
        """Configure the handler to raise after recording."""
        self.should_fail = should_fail
        self.fail_message = message
