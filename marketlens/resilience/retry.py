"""
MarketLens - Retry Logic with Exponential Backoff

Retries transient upstream failures (timeouts, 5xx, dropped connections)
with exponential backoff and jitter. What counts as transient is decided
by errors.is_retryable_error; rate limits and missing API keys are not.
Cache traffic is never retried.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from ..errors import is_retryable_error

if TYPE_CHECKING:
    from ..config import ProviderConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """
    Retry policy for one upstream provider.

    Attributes:
        max_retries: Extra attempts after the first call (0 disables retrying)
        base_delay: Delay before the first retry, in seconds
        max_delay: Upper bound on any single delay, in seconds
        multiplier: Growth factor between consecutive delays
        jitter: Random spread applied to each delay, as a fraction of it
    """

    max_retries: int = 2
    base_delay: float = 0.5
    max_delay: float = 10.0
    multiplier: float = 2.0
    jitter: float = 0.1

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if self.multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if not 0 <= self.jitter <= 1:
            raise ValueError("jitter must be between 0 and 1")

    @classmethod
    def for_provider(cls, config: "ProviderConfig") -> "RetryConfig":
        """Policy for a provider; only the retry count is configurable."""
        return cls(max_retries=config.max_retries)


def exponential_backoff(attempt: int, config: RetryConfig) -> float:
    """
    Delay in seconds before retry number attempt + 1.

    Example:
        >>> exponential_backoff(2, RetryConfig(jitter=0))
        2.0
    """
    delay = min(config.base_delay * config.multiplier**attempt, config.max_delay)
    if config.jitter:
        spread = delay * config.jitter
        delay += random.uniform(-spread, spread)
    return max(delay, 0.01)


async def with_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: RetryConfig | None = None,
    label: str | None = None,
    **kwargs: Any,
) -> T:
    """
    Await func(*args, **kwargs), retrying transient failures.

    Args:
        func: Async callable to run
        config: Retry policy (defaults to RetryConfig())
        label: Name used in log records (defaults to func.__name__)

    Raises:
        The first non-retryable error, or the last error once retries run out
    """
    config = config or RetryConfig()
    label = label or getattr(func, "__name__", repr(func))

    for attempt in range(config.max_retries + 1):
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            if not is_retryable_error(e) or attempt == config.max_retries:
                if attempt:
                    logger.error(
                        f"{label} failed after {attempt + 1} attempts: {e}",
                        extra={"call": label, "attempts": attempt + 1, "error_type": type(e).__name__},
                    )
                raise

            delay = exponential_backoff(attempt, config)
            logger.warning(
                f"{label} failed ({e}); retry {attempt + 1}/{config.max_retries} in {delay:.2f}s",
                extra={
                    "call": label,
                    "attempt": attempt + 1,
                    "max_retries": config.max_retries,
                    "delay_seconds": delay,
                    "error_type": type(e).__name__,
                },
            )
            await asyncio.sleep(delay)
            continue

        if attempt:
            logger.info(f"{label} succeeded on retry {attempt}", extra={"call": label, "attempt": attempt})
        return result

    # The loop always returns or raises
    raise AssertionError("unreachable")
