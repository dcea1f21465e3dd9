"""
MarketLens - Resilience Module

Exponential backoff retry for upstream provider calls.
"""

from .retry import RetryConfig, exponential_backoff, with_retry

__all__ = [
    "RetryConfig",
    "exponential_backoff",
    "with_retry",
]
