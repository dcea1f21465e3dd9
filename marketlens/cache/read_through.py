"""
MarketLens - Read-Through Cache

Caller-facing cache with graceful backend failover.

The cache starts on the networked backend when one is configured. The first
read or write failure from that backend switches it, for the rest of the
process lifetime, to the in-process backend. Callers never see that
failure: "the cache is down" degrades to "the cache is empty".

One instance is built at startup (see factory.create_cache) and handed to
every service that needs it.
"""

import logging
import math
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from ..errors import ValidationError
from .backends.memory import MemoryCacheBackend
from .interface import CacheBackend, CacheResult, CacheStatus, encode_value

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheMode(str, Enum):
    """Which backend currently serves cache traffic."""

    NETWORKED = "networked"
    LOCAL = "local"


class ReadThroughCache:
    """
    Read-through cache over an optional networked backend and a local fallback.

    Args:
        local: In-process backend, always present
        networked: Optional networked backend; when given, the cache starts
            in NETWORKED mode
    """

    def __init__(
        self,
        local: MemoryCacheBackend | None = None,
        networked: CacheBackend | None = None,
    ) -> None:
        self._local = local or MemoryCacheBackend()
        self._networked = networked
        self._mode = CacheMode.NETWORKED if networked is not None else CacheMode.LOCAL
        self._downgrade_error: BaseException | None = None

    @property
    def mode(self) -> CacheMode:
        return self._mode

    @property
    def downgraded(self) -> bool:
        """True once a networked failure has forced the local backend."""
        return self._downgrade_error is not None

    @property
    def active_backend(self) -> CacheBackend:
        if self._mode is CacheMode.NETWORKED and self._networked is not None:
            return self._networked
        return self._local

    def _downgrade(self, operation: str, key: str, error: BaseException | None) -> None:
        if self._mode is CacheMode.LOCAL:
            return
        self._mode = CacheMode.LOCAL
        self._downgrade_error = error
        logger.error(
            f"Networked cache failed during {operation}; using in-process cache until restart: {error}",
            extra={
                "operation": operation,
                "key": key,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )

    @staticmethod
    def _check_key(key: str) -> None:
        if not isinstance(key, str) or not key:
            raise ValidationError("Cache key must be a non-empty string", details={"key": key})

    async def lookup(self, key: str) -> CacheResult:
        """
        Look up a key and return the backend's result.

        A FAILURE from the networked backend triggers the downgrade and is
        returned as-is so callers that care can inspect it.
        """
        self._check_key(key)
        backend = self.active_backend
        result = await backend.get(key)
        if result.failed and backend is self._networked:
            self._downgrade("get", key, result.error)
        return result

    async def store(self, key: str, value: Any, ttl_ms: int) -> CacheResult:
        """
        Encode and store a value, returning the backend's result.

        Raises:
            ValidationError: If the key is empty or ttl_ms is not positive
            CacheSerializationError: If the value is not JSON-serializable
        """
        self._check_key(key)
        if ttl_ms <= 0:
            raise ValidationError("ttl_ms must be positive", details={"key": key, "ttl_ms": ttl_ms})

        payload = encode_value(key, value)
        backend = self.active_backend
        # Fractional TTLs round up; a zero expiry is rejected by Redis
        result = await backend.set(key, payload, math.ceil(ttl_ms))
        if result.failed and backend is self._networked:
            self._downgrade("set", key, result.error)
        return result

    async def get(self, key: str) -> Any | None:
        """
        Get a cached value.

        Returns:
            The cached value, or None when it is absent, expired or the
            backend is unavailable
        """
        result = await self.lookup(key)
        if result.status is CacheStatus.HIT:
            return result.value
        return None

    async def put(self, key: str, value: Any, ttl_ms: int) -> None:
        """
        Cache a value for ttl_ms milliseconds. Best effort: a backend failure
        drops the write silently.
        """
        await self.store(key, value, ttl_ms)

    async def get_or_fetch(
        self,
        key: str,
        ttl_ms: int,
        fetch: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Return the cached value for key, or fetch, cache and return it.

        Errors raised by fetch propagate unchanged. None results are
        returned but not cached.
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}", extra={"key": key})
            return cached  # type: ignore[no-any-return]

        value = await fetch()
        if value is not None:
            await self.put(key, value, ttl_ms)
            logger.info(f"Fetched and cached {key}", extra={"key": key, "ttl_ms": ttl_ms})
        return value

    async def get_stats(self) -> dict[str, Any]:
        """Report the active mode and per-backend counters."""
        stats: dict[str, Any] = {
            "mode": self._mode.value,
            "backend": self.active_backend.name,
            "downgraded": self.downgraded,
            "local": await self._local.get_stats(),
        }
        if self._networked is not None:
            stats["networked"] = await self._networked.get_stats()
        if self._downgrade_error is not None:
            stats["downgrade_reason"] = str(self._downgrade_error)
        return stats

    async def close(self) -> None:
        """Close both backends."""
        if self._networked is not None:
            await self._networked.close()
        await self._local.close()
