"""Retry helper for transient failures."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings for a retried operation."""

    attempts: int = 3
    initial_delay: float = 0.2
    multiplier: float = 2.0

    def delays(self) -> list[float]:
        """Return the sleep before each retry, in seconds."""
        return [
            self.initial_delay * self.multiplier**index
            for index in range(max(self.attempts - 1, 0))
        ]


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: tuple[type[BaseException], ...],
    description: str,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``operation`` and retry it on ``retry_on`` errors with backoff.

    The last error is re-raised once every attempt has failed.
    """
    delays = policy.delays()
    for attempt, delay in enumerate([*delays, None], start=1):
        try:
            return await operation()
        except retry_on as exc:
            if delay is None:
                logger.error(
                    "%s failed after %d attempts: %s", description, attempt, exc
                )
                raise
            logger.warning(
                "%s attempt %d/%d failed: %s; retrying in %.2fs",
                description,
                attempt,
                policy.attempts,
                exc,
                delay,
            )
            await sleep(delay)
    raise AssertionError("unreachable")  # pragma: no cover
