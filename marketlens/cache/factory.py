"""
MarketLens - Cache Factory

Builds the process's ReadThroughCache from configuration.

Key points:
- A configured Redis URL (REDIS_URL / UPSTASH_REDIS_URL) starts the cache in
  networked mode; without one the cache is in-process only
- The Redis client is imported lazily so the memory-only path does not
  need it
- No global registry: the caller owns the returned instance and passes it on

Examples:
    from marketlens.cache import create_cache
    from marketlens.config import CacheConfig

    cache = create_cache(CacheConfig(redis_url="redis://localhost:6379/0"))
    await cache.put("macro_CPI", {"value": 3.1}, 86_400_000)
"""

from __future__ import annotations

import logging

from ..config import CacheConfig, get_config
from ..errors import ConfigurationError
from .backends.memory import MemoryCacheBackend
from .interface import CacheBackend, Clock
from .read_through import ReadThroughCache

logger = logging.getLogger(__name__)


def _create_redis_backend(config: CacheConfig) -> CacheBackend:
    """Internal helper to construct a redis cache backend with lazy import."""
    try:
        from .backends.redis import RedisCacheBackend
    except ImportError as e:
        logger.error(
            "Redis URL configured but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis URL configured but redis client is unavailable. "
            "Install with: pip install 'redis>=5.0.0' or unset REDIS_URL.",
            details={"package": "redis>=5.0.0", "error": str(e)},
        ) from e

    return RedisCacheBackend(
        redis_url=config.redis_url,
        socket_timeout=config.redis_socket_timeout,
    )


def create_cache(
    config: CacheConfig | None = None,
    clock: Clock | None = None,
) -> ReadThroughCache:
    """
    Create a read-through cache based on configuration.

    Args:
        config: Cache configuration (uses global config if not provided)
        clock: Millisecond clock for the in-process backend

    Returns:
        A new ReadThroughCache

    Raises:
        ConfigurationError: If the networked backend cannot be constructed
    """
    if config is None:
        config = get_config().cache

    local = MemoryCacheBackend(clock=clock)
    networked = _create_redis_backend(config) if config.networked else None

    cache = ReadThroughCache(local=local, networked=networked)
    logger.info(
        f"Cache created in {cache.mode.value} mode",
        extra={"mode": cache.mode.value},
    )
    return cache
