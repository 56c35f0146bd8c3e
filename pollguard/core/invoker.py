"""Invocation of a single operation with a guaranteed single report.

The Invoker runs the caller-supplied operation once and collapses every
way it can finish (returned value, raised exception, timeout, task
cancellation) into exactly one Outcome passed to a report callable.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from .models import Operation, Outcome

logger = logging.getLogger(__name__)

Report = Callable[[Outcome], None]
Done = Callable[..., None]


class Invoker:
    """Executes an operation and reports exactly one outcome per call."""

    def __init__(self, name: str = "poll"):
        """Initialize invoker.

        Args:
            name: Task name used in log lines.
        """
        self.name = name

    async def invoke(
        self,
        operation: Operation,
        report: Report,
        timeout_seconds: float | None = None,
    ) -> None:
        """Run the operation once and report its outcome.

        Args:
            operation: Zero-argument callable. May return an awaitable
                (awaited) or a plain value (taken as the result).
            report: Called exactly once with the Outcome. Exceptions raised
                by report propagate to the caller.
            timeout_seconds: Optional bound on how long the awaitable may
                run. Expiry is reported as a failure.

        Raises:
            BaseException: Task cancellation and other faults that are not
                an Exception (KeyboardInterrupt, SystemExit, custom
                BaseException subclasses) are reported as a failure, then
                re-raised.
        """
        try:
            value = await self._run(operation, timeout_seconds)
        except Exception as e:
            logger.debug(f"[{self.name}] Operation failed: {type(e).__name__}: {e}")
            report(Outcome.failure(e))
        except BaseException as e:
            logger.warning(
                f"[{self.name}] Operation interrupted: {type(e).__name__}: {e}"
            )
            report(Outcome.failure(e))
            raise
        else:
            report(Outcome.success(value))

    @staticmethod
    async def _run(operation: Operation, timeout_seconds: float | None) -> Any:
        result = operation()
        if not inspect.isawaitable(result):
            return result
        if timeout_seconds is None:
            return await result
        return await asyncio.wait_for(result, timeout_seconds)


def callback_operation(fn: Callable[[Done], None]) -> Operation:
    """Adapt a callback-style producer into a zero-argument coroutine function.

    The producer is called with a ``done(error, value)`` callable. Only the
    first call to ``done`` settles the outcome; any later call, and any
    exception the producer raises after it already reported, is ignored.
    ``done`` must be called from the event loop thread.

    Args:
        fn: Callable accepting the ``done`` callback.

    Returns:
        Coroutine function suitable as a PollTask operation.
    """

    async def operation() -> Any:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def done(error: Any = None, value: Any = None) -> None:
            if future.done():
                logger.debug("Ignoring duplicate outcome report from callback operation")
                return
            if error is None:
                future.set_result(value)
                return
            if not isinstance(error, BaseException):
                error = RuntimeError(str(error))
            future.set_exception(error)

        try:
            fn(done)
        except Exception as e:
            if future.done():
                logger.debug(
                    f"Ignoring fault raised after outcome was reported: "
                    f"{type(e).__name__}: {e}"
                )
            else:
                future.set_exception(e)

        return await future

    return operation
