"""
MarketLens - Memory Cache Backend Tests

Tests TTL handling, lazy expiry, overwrite semantics and statistics of the
in-process backend.
"""

import asyncio

from marketlens.cache.backends.memory import MemoryCacheBackend
from marketlens.cache.interface import CacheStatus, encode_value


class TestMemoryCacheBackend:
    """Test suite for MemoryCacheBackend."""

    async def test_set_and_get(self, memory_backend: MemoryCacheBackend) -> None:
        """Test basic set and get operations."""
        result = await memory_backend.set("key1", encode_value("key1", "value1"), 1000)
        assert result.status is CacheStatus.STORED

        result = await memory_backend.get("key1")
        assert result.status is CacheStatus.HIT
        assert result.value == "value1"

        stats = await memory_backend.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 0
        assert stats["sets"] == 1

    async def test_get_nonexistent_key(self, memory_backend: MemoryCacheBackend) -> None:
        """Test getting a key that doesn't exist."""
        result = await memory_backend.get("nonexistent")
        assert result.status is CacheStatus.MISS
        assert result.value is None

        stats = await memory_backend.get_stats()
        assert stats["misses"] == 1

    async def test_expiry_is_lazy(self, memory_backend: MemoryCacheBackend, clock) -> None:
        """Expired entries read as misses but are not removed."""
        await memory_backend.set("k", encode_value("k", 1), 100)

        clock.advance(99)
        assert (await memory_backend.get("k")).status is CacheStatus.HIT

        clock.advance(1)
        assert (await memory_backend.get("k")).status is CacheStatus.MISS

        stats = await memory_backend.get_stats()
        assert stats["size"] == 1

    async def test_overwrite_resets_expiry(self, memory_backend: MemoryCacheBackend, clock) -> None:
        """A new write replaces value and expiry."""
        await memory_backend.set("k", encode_value("k", "old"), 100)
        clock.advance(90)
        await memory_backend.set("k", encode_value("k", "new"), 100)
        clock.advance(50)

        result = await memory_backend.get("k")
        assert result.value == "new"

    async def test_returns_fresh_copies(self, memory_backend: MemoryCacheBackend) -> None:
        """Mutating a returned value does not change the cached entry."""
        await memory_backend.set("k", encode_value("k", {"items": [1]}), 1000)

        first = (await memory_backend.get("k")).value
        first["items"].append(2)

        second = (await memory_backend.get("k")).value
        assert second == {"items": [1]}

    async def test_concurrent_writes_different_keys(self, memory_backend: MemoryCacheBackend) -> None:
        """Concurrent writes to different keys all land."""
        await asyncio.gather(
            *(memory_backend.set(f"key{i}", encode_value(f"key{i}", i), 1000) for i in range(50))
        )

        for i in range(50):
            assert (await memory_backend.get(f"key{i}")).value == i

        stats = await memory_backend.get_stats()
        assert stats["size"] == 50

    async def test_concurrent_writes_same_key(self, memory_backend: MemoryCacheBackend) -> None:
        """Concurrent writes to one key leave exactly one intact value."""
        values = [{"price": float(i), "volume": i * 100} for i in range(50)]
        await asyncio.gather(
            *(memory_backend.set("stock_AAPL", encode_value("stock_AAPL", v), 1000) for v in values)
        )

        result = await memory_backend.get("stock_AAPL")
        assert result.value in values

        stats = await memory_backend.get_stats()
        assert stats["size"] == 1

    async def test_default_clock_is_wall_clock(self) -> None:
        """Without an injected clock, entries are fresh immediately after set."""
        backend = MemoryCacheBackend()
        await backend.set("k", encode_value("k", "v"), 60_000)
        assert (await backend.get("k")).value == "v"
