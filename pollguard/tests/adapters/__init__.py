"""Tests for adapter implementations.

These tests exercise adapters against the real event loop or mocked
HTTP transports to validate their behavior and error handling.
"""
