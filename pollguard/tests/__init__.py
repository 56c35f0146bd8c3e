"""Test suite for pollguard.

Organized into three categories:

1. core/: Unit tests for the scheduler, invoker, and models
   - No external dependencies, deterministic timing
   - Uses the manually advanced FakeTimer from tests/fakes/

2. adapters/: Tests for adapter implementations
   - Asyncio timer and poller against the real event loop clock
   - HTTP operation against httpx.MockTransport

3. fakes/: Test doubles
   - FakeTimer, FakeOperation, RecordingHandler, RecordingTickListener
"""
