"""
MarketLens - Redis Cache Backend

Networked cache backend over the minimal key-value protocol:
- GET key -> value | nil
- SET key value PX ttl_ms

Values are stored as UTF-8 JSON strings. Any backend error (connection
refused, timeout, malformed payload) is reported as a FAILURE result and
never raised.

Requires: redis>=5.0 with asyncio support

Example:
    backend = RedisCacheBackend(redis_url="redis://localhost:6379/0")
    await backend.set("stock_quote_AAPL", '{"value":150.25}', ttl_ms=300_000)
    result = await backend.get("stock_quote_AAPL")
"""

from __future__ import annotations

import logging
from typing import Any

from ..interface import CacheBackend, CacheResult, decode_value

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4+)
    from redis.asyncio import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisCacheBackend(CacheBackend):
    """
    Redis cache backend with JSON payloads and millisecond TTLs.

    Notes:
    - The connection is lazy; the first command opens it.
    - Concurrency is left to Redis (atomic per-key GET/SET).
    - socket_timeout bounds every call; a hung call surfaces as a failure.
    """

    name = "redis"

    def __init__(
        self,
        redis_url: str | None = None,
        socket_timeout: float = 5.0,
        client: Any | None = None,
    ) -> None:
        """
        Initialize Redis cache backend.

        Args:
            redis_url: Connection URL, e.g. redis://localhost:6379/0 or rediss:// for TLS
            socket_timeout: Socket connect/read timeout in seconds
            client: Pre-built async client (tests inject a mock here)
        """
        if client is None:
            if not redis_url:
                raise ValueError("redis_url is required")
            client = Redis.from_url(
                url=redis_url,
                decode_responses=True,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )

        self._client = client
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._failures = 0

    async def get(self, key: str) -> CacheResult:
        """Retrieve a value by key."""
        try:
            data = await self._client.get(key)
            if data is None:
                self._misses += 1
                return CacheResult.miss()

            value = decode_value(data)
        except Exception as e:
            self._failures += 1
            logger.error(
                f"Failed to get key '{key}' from Redis: {e}",
                extra={"key": key, "error": str(e), "error_type": type(e).__name__},
            )
            return CacheResult.failure(e)

        self._hits += 1
        return CacheResult.hit(value)

    async def set(self, key: str, payload: str, ttl_ms: int) -> CacheResult:
        """Store an encoded payload with a millisecond TTL."""
        try:
            await self._client.set(name=key, value=payload, px=ttl_ms)
        except Exception as e:
            self._failures += 1
            logger.error(
                f"Failed to set key '{key}' in Redis: {e}",
                extra={"key": key, "ttl_ms": ttl_ms, "error": str(e), "error_type": type(e).__name__},
            )
            return CacheResult.failure(e)

        self._sets += 1
        return CacheResult.stored()

    async def get_stats(self) -> dict[str, Any]:
        """Return client-side counters. Never touches the network."""
        total_requests = self._hits + self._misses
        return {
            "backend": self.name,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round((self._hits / total_requests) * 100, 2) if total_requests else 0.0,
            "sets": self._sets,
            "failures": self._failures,
        }

    async def close(self) -> None:
        """Close the Redis client and release resources."""
        try:
            await self._client.aclose()
            logger.info("Closed Redis cache backend")
        except Exception as e:
            logger.warning(f"Error closing Redis client: {e}", extra={"error": str(e)})
