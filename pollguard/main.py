"""Composition root for pollguard.

This module is the ONLY location that imports both core scheduling
logic and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the demo application.

Module Structure:
- Configuration loading via config module
- Logging configuration
- Adapter instantiation (HTTP operation, result handler, tick listener)
- Poller start, timed stop, and drain of the in-flight invocation
"""

import asyncio
import logging
import signal
import sys
from typing import Any

from pollguard.adapters.handler.logging_handler import LoggingResultHandler
from pollguard.adapters.listener.logging_listener import LoggingTickListener
from pollguard.adapters.operation.http_json import HttpJsonOperation, build_url
from pollguard.adapters.scheduler.poller import start
from pollguard.config import Settings, load_settings
from pollguard.core.models import ResultHandler


class DrainingHandler:
    """Wraps a result handler and signals when the last outcome arrives.

    Once mark_stopped() has been called, the next delivered outcome (or
    the call itself, if nothing is in flight) sets `drained`.
    """

    def __init__(self, inner: ResultHandler):
        self.inner = inner
        self.drained = asyncio.Event()
        self._stopped = False

    def mark_stopped(self, in_flight: bool) -> None:
        self._stopped = True
        if not in_flight:
            self.drained.set()

    def __call__(self, error: BaseException | None, value: Any) -> None:
        try:
            self.inner(error, value)
        finally:
            if self._stopped:
                self.drained.set()


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def _install_signal_handlers(shutdown: asyncio.Event) -> None:
    """Set shutdown on SIGINT/SIGTERM so the demo stops early."""
    logger = logging.getLogger(__name__)
    try:
        loop = asyncio.get_running_loop()

        def _handle_signal(sig: int) -> None:
            logger.info(f"Received signal {sig}, stopping poller...")
            shutdown.set()

        loop.add_signal_handler(signal.SIGTERM, _handle_signal, signal.SIGTERM)
        loop.add_signal_handler(signal.SIGINT, _handle_signal, signal.SIGINT)
    except NotImplementedError:
        # Signal handlers not available on Windows
        logger.debug("Signal handlers not available on this platform")


async def run_demo(
    settings: Settings,
    operation: Any = None,
    shutdown: asyncio.Event | None = None,
) -> LoggingResultHandler:
    """Poll the configured endpoint, stop after demo_run_seconds, then drain.

    Args:
        settings: Loaded application settings.
        operation: Operation override (defaults to an HttpJsonOperation on
            the configured URL).
        shutdown: Event that stops the demo early when set.

    Returns:
        The result handler, carrying success and failure counts.
    """
    logger = logging.getLogger(__name__)

    owns_operation = operation is None
    if operation is None:
        url = build_url(settings.demo_base_url, settings.demo_path, settings.demo_query)
        operation = HttpJsonOperation(url, timeout_seconds=settings.http_timeout_seconds)
        logger.info(f"Polling {url} every {settings.poll_interval_seconds}s")

    result_handler = LoggingResultHandler(name=settings.task_name)
    draining = DrainingHandler(result_handler)
    shutdown = shutdown or asyncio.Event()

    try:
        handle = start(
            operation,
            settings.poll_interval_seconds,
            draining,
            name=settings.task_name,
            timeout_seconds=settings.operation_timeout_seconds,
            listeners=[LoggingTickListener()],
        )

        try:
            await asyncio.wait_for(shutdown.wait(), timeout=settings.demo_run_seconds)
        except asyncio.TimeoutError:
            pass

        handle.stop()
        draining.mark_stopped(in_flight=handle.scheduler.in_flight)

        drain_timeout = settings.operation_timeout_seconds or settings.http_timeout_seconds
        try:
            await asyncio.wait_for(draining.drained.wait(), timeout=drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"In-flight invocation did not finish within {drain_timeout}s after stop"
            )

        stats = handle.scheduler.stats
        logger.info(
            f"Poller finished: {stats.started} started, {stats.skipped} skipped, "
            f"{stats.missed} missed, {stats.succeeded} succeeded, {stats.failed} failed"
        )
    finally:
        if owns_operation:
            await operation.close()

    return result_handler


async def bootstrap() -> None:
    """Load configuration, configure logging, and run the demo poller.

    Raises:
        ValidationError: On invalid configuration.
    """
    settings = load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Starting pollguard demo...")

    shutdown = asyncio.Event()
    _install_signal_handlers(shutdown)

    await run_demo(settings, shutdown=shutdown)


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
