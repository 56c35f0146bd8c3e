"""Integration tests for configuration loading and the composition root."""

import asyncio
import os
from unittest.mock import patch

import pytest

from pollguard.config import Settings, load_settings
from pollguard.main import DrainingHandler, run_demo


class TestConfigurationLoading:
    """Test configuration loading and validation."""

    def test_load_settings_with_defaults(self) -> None:
        """Load settings with default values."""
        settings = load_settings()
        assert settings.poll_interval_seconds == 5.0
        assert settings.operation_timeout_seconds is None
        assert settings.demo_base_url == "https://httpbin.org"
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    def test_load_settings_from_env(self) -> None:
        """Load settings from environment variables."""
        with patch.dict(
            os.environ,
            {
                "POLL_INTERVAL_SECONDS": "0.5",
                "OPERATION_TIMEOUT_SECONDS": "2",
                "DEMO_QUERY": '{"symbol": "BTC"}',
                "LOG_LEVEL": "DEBUG",
            },
        ):
            settings = load_settings()
            assert settings.poll_interval_seconds == 0.5
            assert settings.operation_timeout_seconds == 2.0
            assert settings.demo_query == {"symbol": "BTC"}
            assert settings.log_level == "DEBUG"

    def test_load_settings_from_env_file(self, tmp_path) -> None:
        """Load settings from an explicit .env file."""
        env_file = tmp_path / "poll.env"
        env_file.write_text("POLL_INTERVAL_SECONDS=12\nTASK_NAME=prices\n")

        settings = load_settings(str(env_file))

        assert settings.poll_interval_seconds == 12
        assert settings.task_name == "prices"

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("POLL_INTERVAL_SECONDS", "0"),
            ("POLL_INTERVAL_SECONDS", "-3"),
            ("OPERATION_TIMEOUT_SECONDS", "0"),
            ("DEMO_RUN_SECONDS", "-1"),
            ("HTTP_TIMEOUT_SECONDS", "0"),
            ("DEMO_BASE_URL", "httpbin.org"),
            ("LOG_LEVEL", "VERBOSE"),
        ],
    )
    def test_invalid_values_rejected(self, name: str, value: str) -> None:
        """Validation rejects out-of-range values."""
        with patch.dict(os.environ, {name: value}):
            with pytest.raises(Exception):  # ValidationError
                load_settings()


class TestDrainingHandler:
    """DrainingHandler signals when the last outcome has arrived."""

    @pytest.mark.asyncio
    async def test_drained_immediately_when_idle(self) -> None:
        handler = DrainingHandler(lambda error, value: None)

        handler.mark_stopped(in_flight=False)

        assert handler.drained.is_set()

    @pytest.mark.asyncio
    async def test_drained_after_in_flight_outcome(self) -> None:
        seen: list[object] = []
        handler = DrainingHandler(lambda error, value: seen.append(value))

        handler(None, "before stop")
        assert not handler.drained.is_set()

        handler.mark_stopped(in_flight=True)
        assert not handler.drained.is_set()

        handler(None, "after stop")
        assert handler.drained.is_set()
        assert seen == ["before stop", "after stop"]


class TestRunDemo:
    """run_demo wires the poller, stops it, and drains."""

    @pytest.mark.asyncio
    async def test_runs_until_deadline(self) -> None:
        calls = 0

        async def operation() -> dict[str, int]:
            nonlocal calls
            calls += 1
            return {"n": calls}

        settings = Settings(poll_interval_seconds=0.01, demo_run_seconds=0.05)

        result_handler = await run_demo(settings, operation=operation)

        assert calls >= 2
        assert result_handler.successes == calls
        assert result_handler.failures == 0

    @pytest.mark.asyncio
    async def test_shutdown_event_stops_early_and_drains(self) -> None:
        started = asyncio.Event()
        shutdown = asyncio.Event()

        async def operation() -> str:
            started.set()
            await asyncio.sleep(0.05)
            return "done"

        async def trigger_shutdown() -> None:
            await started.wait()
            shutdown.set()

        settings = Settings(poll_interval_seconds=10, demo_run_seconds=30)

        result_handler, _ = await asyncio.wait_for(
            asyncio.gather(
                run_demo(settings, operation=operation, shutdown=shutdown),
                trigger_shutdown(),
            ),
            timeout=5,
        )

        assert result_handler.successes == 1

    @pytest.mark.asyncio
    async def test_failures_counted(self) -> None:
        async def operation() -> None:
            raise ConnectionError("offline")

        settings = Settings(poll_interval_seconds=0.01, demo_run_seconds=0.035)

        result_handler = await run_demo(settings, operation=operation)

        assert result_handler.failures >= 2
        assert result_handler.successes == 0
