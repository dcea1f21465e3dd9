"""
MarketLens - Cache Module

Read-through cache with a networked (Redis) backend and an in-process
fallback.

Usage:
    from marketlens.cache import create_cache

    cache = create_cache()
    await cache.put("stock_quote_AAPL", quote, ttl_ms=300_000)
    quote = await cache.get("stock_quote_AAPL")
"""

from .factory import create_cache
from .interface import CacheBackend, CacheResult, CacheStatus, Clock
from .read_through import CacheMode, ReadThroughCache

__all__ = [
    "create_cache",
    "ReadThroughCache",
    "CacheMode",
    # Interface
    "CacheBackend",
    "CacheResult",
    "CacheStatus",
    "Clock",
]
