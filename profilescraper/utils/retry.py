"""Retry utilities with a fixed delay and per-attempt timeouts."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    delay: float = 2.0,
    attempt_timeout: float | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    name: str | None = None,
) -> T:
    """
    Run an async operation, retrying on failure after a fixed delay.

    A timed-out attempt raises ``asyncio.TimeoutError`` and counts as one
    failed attempt, so it must be covered by ``retry_on`` to be retried.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        max_attempts: Total number of attempts, including the first
        delay: Seconds to wait between attempts
        attempt_timeout: Optional bound in seconds for each individual attempt
        retry_on: Tuple of exception types to retry on
        name: Label for log events (defaults to the operation's name)

    Returns:
        Result from the first successful attempt

    Raises:
        The last exception if all attempts fail
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    label = name or getattr(operation, "__name__", "operation")

    for attempt in range(1, max_attempts + 1):
        try:
            if attempt_timeout is None:
                return await operation()
            return await asyncio.wait_for(operation(), timeout=attempt_timeout)
        except retry_on as e:
            if attempt == max_attempts:
                logger.error(
                    "retry_exhausted",
                    operation=label,
                    attempts=attempt,
                    error=str(e) or type(e).__name__,
                )
                raise

            logger.warning(
                "retry_attempt",
                operation=label,
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                error=str(e) or type(e).__name__,
            )
            await asyncio.sleep(delay)

    # Unreachable: the last attempt either returns or raises
    raise RuntimeError("Unexpected retry loop exit")
