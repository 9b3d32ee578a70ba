"""
Retry with backoff for taurine-browser.

Provides bounded retry of async operations with an increasing delay between
attempts. Only session creation is retried by the manager; page and target
mutations are not assumed to be idempotent.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar

from taurine_browser.errors import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackoffStrategy(str, Enum):
    """Backoff strategies for retry delays."""

    FIXED = "fixed"
    """Fixed delay between retries."""

    LINEAR = "linear"
    """Delay grows as attempt number times the base delay."""

    EXPONENTIAL = "exponential"
    """Delay doubles after every attempt."""

    JITTER = "jitter"
    """Linear delay with up to +/-25% random jitter."""


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    """Maximum number of attempts, including the first one."""

    base_delay: float = 1.0
    """Base delay in seconds."""

    max_delay: float = 30.0
    """Maximum delay between attempts."""

    backoff: BackoffStrategy = BackoffStrategy.LINEAR
    """Backoff strategy."""

    retry_on: tuple[Type[BaseException], ...] = (Exception,)
    """Exception types that trigger another attempt."""

    on_retry: Optional[Callable[[int, BaseException, float], None]] = None
    """Callback on retry: (attempt, error, delay)."""

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")

    def calculate_delay(self, attempt: int) -> float:
        """Calculate the delay after the given failed attempt.

        Args:
            attempt: Attempt number that just failed (1-based).

        Returns:
            Delay in seconds.
        """
        base = self.base_delay

        if self.backoff == BackoffStrategy.FIXED:
            delay = base
        elif self.backoff == BackoffStrategy.EXPONENTIAL:
            delay = base * (2 ** (attempt - 1))
        elif self.backoff == BackoffStrategy.JITTER:
            delay = base * attempt * (1 + random.uniform(-0.25, 0.25))
        else:
            delay = base * attempt

        return min(delay, self.max_delay)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    *,
    backoff: BackoffStrategy = BackoffStrategy.LINEAR,
    max_delay: float = 30.0,
    retry_on: tuple[Type[BaseException], ...] = (Exception,),
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
) -> T:
    """Run ``operation`` until it succeeds or attempts run out.

    Args:
        operation: Zero-argument coroutine function to call.
        max_attempts: Maximum number of calls.
        base_delay: Base delay in seconds.
        backoff: How the delay grows between attempts.
        max_delay: Upper bound for a single delay.
        retry_on: Exception types that are retried; others propagate as is.
        on_retry: Optional callback invoked before each sleep.

    Returns:
        Result of the first successful call.

    Raises:
        RetryExhaustedError: If every attempt failed. Chained from the last
            failure.
    """
    config = RetryConfig(
        max_attempts=max_attempts,
        base_delay=base_delay,
        max_delay=max_delay,
        backoff=backoff,
        retry_on=retry_on,
        on_retry=on_retry,
    )
    return await run_with_retry(operation, config)


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
) -> T:
    """Same as ``with_retry`` but driven by a RetryConfig."""
    for attempt in range(1, config.max_attempts + 1):
        try:
            return await operation()
        except asyncio.CancelledError:
            raise
        except config.retry_on as e:
            if attempt >= config.max_attempts:
                raise RetryExhaustedError(config.max_attempts, e) from e

            delay = config.calculate_delay(attempt)

            if config.on_retry:
                config.on_retry(attempt, e, delay)

            logger.warning(
                f"Attempt {attempt}/{config.max_attempts} failed, "
                f"retrying in {delay:.1f}s: {e}"
            )

            await asyncio.sleep(delay)


def retry(
    max_attempts: int = 3,
    *,
    base_delay: float = 1.0,
    backoff: BackoffStrategy = BackoffStrategy.LINEAR,
    retry_on: tuple[Type[BaseException], ...] = (Exception,),
) -> Callable:
    """Decorator to add retry behavior to a coroutine function.

    Example:
        @retry(max_attempts=3, base_delay=1.0)
        async def fetch_data():
            # May fail and be retried
            pass
    """
    config = RetryConfig(
        max_attempts=max_attempts,
        base_delay=base_delay,
        backoff=backoff,
        retry_on=retry_on,
    )

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await run_with_retry(lambda: func(*args, **kwargs), config)

        return wrapper

    return decorator


__all__ = [
    "BackoffStrategy",
    "RetryConfig",
    "with_retry",
    "run_with_retry",
    "retry",
]
