"""Bounded retry with linear backoff for transient upstream failures."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from restaurant_search.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    backoff: float,
    retry_on: tuple[type[BaseException], ...],
    retry_if: Callable[[BaseException], bool] | None = None,
    description: str = "operation",
) -> T:
    """Await ``operation`` up to ``attempts`` times.

    The delay after the n-th failure is ``backoff * n`` seconds. Exceptions
    outside ``retry_on``, or rejected by ``retry_if``, propagate immediately;
    the last matching exception propagates once attempts are exhausted.

    Args:
        operation: Zero-argument coroutine factory.
        attempts: Total attempts, at least 1.
        backoff: Base delay in seconds.
        retry_on: Exception types considered transient.
        retry_if: Optional finer check on a caught exception; False means
            the failure is permanent and is raised at once.
        description: Label used in log messages.

    Returns:
        Whatever ``operation`` returns on its first success.
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            if attempt == attempts or (retry_if is not None and not retry_if(e)):
                raise
            delay = backoff * attempt
            logger.warning(
                f"{description} failed, retrying in {delay:.2f}s",
                extra={"attempt": attempt, "attempts": attempts, "error": str(e)},
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")  # pragma: no cover
