"""Fake/mock implementations for testing.

These in-memory implementations allow the core scheduler to be tested
deterministically without a real event loop clock:

- FakeTimer: Manually advanced TimerPort
- FakeOperation: Scripted operation with concurrency tracking
- RecordingHandler: Captured result handler calls for assertion
- RecordingTickListener: Captured tick events for assertion
"""

from .handler import HandledResult, RecordingHandler
from .listener import FailingTickListener, RecordingTickListener
from .operation import FakeOperation
from .timer import FakeTimer

__all__ = [
    "FailingTickListener",
    "FakeOperation",
    "FakeTimer",
    "HandledResult",
    "RecordingHandler",
    "RecordingTickListener",
]
