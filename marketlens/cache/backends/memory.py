"""
MarketLens - Memory Cache Backend

In-process cache with per-key TTL and lazy expiry.
Entries are checked for freshness on read and are never evicted proactively.
Not shared across processes and lost on restart.
"""

import asyncio
import logging
import time
from typing import Any

from ..interface import CacheBackend, CacheResult, Clock, decode_value

logger = logging.getLogger(__name__)


def wall_clock_ms() -> float:
    """Current epoch time in milliseconds."""
    return time.time() * 1000


class MemoryCacheBackend(CacheBackend):
    """
    In-memory cache backend.

    Storage: key -> (payload, expires_at_ms). A key is fresh while
    now < expires_at_ms. Writes to the same key are last-write-wins.
    """

    name = "memory"

    def __init__(self, clock: Clock | None = None) -> None:
        """
        Initialize memory cache backend.

        Args:
            clock: Millisecond clock (defaults to wall-clock epoch ms)
        """
        self._clock = clock or wall_clock_ms
        self._entries: dict[str, tuple[str, float]] = {}

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0

        self._lock = asyncio.Lock()

    async def get(self, key: str) -> CacheResult:
        """Retrieve value from cache."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return CacheResult.miss()

            payload, expires_at = entry
            if self._clock() >= expires_at:
                # Stale entries stay in place until overwritten
                self._misses += 1
                return CacheResult.miss()

            self._hits += 1

        return CacheResult.hit(decode_value(payload))

    async def set(self, key: str, payload: str, ttl_ms: int) -> CacheResult:
        """Store value in cache."""
        async with self._lock:
            self._entries[key] = (payload, self._clock() + ttl_ms)
            self._sets += 1
        return CacheResult.stored()

    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        async with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

            return {
                "backend": self.name,
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "failures": 0,
            }

    async def close(self) -> None:
        """Memory backend doesn't need cleanup."""
        logger.debug("Memory cache backend closed")
