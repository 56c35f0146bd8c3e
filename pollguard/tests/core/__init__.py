"""Unit tests for core scheduling logic.

These tests exercise the scheduler and invoker without external
dependencies. Timers are replaced with the in-memory fakes from tests/fakes/.
"""
