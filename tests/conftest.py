"""
MarketLens - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from typing import Any
from unittest.mock import AsyncMock

import pytest

from marketlens.cache import ReadThroughCache
from marketlens.cache.backends.memory import MemoryCacheBackend
from marketlens.cache.backends.redis import RedisCacheBackend

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


@pytest.fixture
def clock() -> FakeClock:
    """Controllable millisecond clock."""
    return FakeClock()


@pytest.fixture
def memory_backend(clock: FakeClock) -> MemoryCacheBackend:
    """In-process backend on the fake clock."""
    return MemoryCacheBackend(clock=clock)


@pytest.fixture
def redis_client() -> AsyncMock:
    """
    Mock async Redis client: a dict-backed GET/SET that honours nothing
    but the key. Tests flip side_effect to simulate outages.
    """
    store: dict[str, str] = {}
    client = AsyncMock()

    async def _get(key: str) -> str | None:
        return store.get(key)

    async def _set(name: str, value: str, px: int) -> bool:
        store[name] = value
        return True

    client.get.side_effect = _get
    client.set.side_effect = _set
    client.store = store
    return client


@pytest.fixture
def redis_backend(redis_client: AsyncMock) -> RedisCacheBackend:
    """Networked backend over the mock client."""
    return RedisCacheBackend(client=redis_client)


@pytest.fixture
def local_cache(memory_backend: MemoryCacheBackend) -> ReadThroughCache:
    """Cache with no networked backend configured."""
    return ReadThroughCache(local=memory_backend)


@pytest.fixture
def networked_cache(memory_backend: MemoryCacheBackend, redis_backend: RedisCacheBackend) -> ReadThroughCache:
    """Cache starting in networked mode over the mock Redis client."""
    return ReadThroughCache(local=memory_backend, networked=redis_backend)


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample JSON-compatible data for cache testing."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "complex_dict": {
            "nested": {
                "key": "value",
                "number": 123,
                "list": [1, 2, 3],
            }
        },
        "complex_list": [
            {"symbol": "AAPL", "price": 150.25},
            {"symbol": "MSFT", "price": 410.5},
        ],
    }


@pytest.fixture
def finnhub_quote() -> dict[str, Any]:
    """Raw Finnhub /quote payload."""
    return {"c": 150.25, "h": 151.0, "l": 148.5, "o": 149.0, "pc": 148.0, "t": 1_700_000_000}


@pytest.fixture
def fred_observations() -> dict[str, Any]:
    """Raw FRED observations payload, newest first."""
    return {
        "observations": [
            {"date": "2024-03-01", "value": "312.2"},
            {"date": "2024-02-01", "value": "311.0"},
            {"date": "2024-01-01", "value": "."},
            {"date": "2023-12-01", "value": "309.7"},
        ]
    }


@pytest.fixture
def alpha_vantage_daily() -> dict[str, Any]:
    """Raw Alpha Vantage TIME_SERIES_DAILY payload (newest first, as served)."""
    return {
        "Meta Data": {"2. Symbol": "AAPL"},
        "Time Series (Daily)": {
            "2024-03-05": {
                "1. open": "170.0",
                "2. high": "172.0",
                "3. low": "169.0",
                "4. close": "171.0",
                "5. volume": "1000",
            },
            "2024-03-04": {
                "1. open": "168.0",
                "2. high": "170.5",
                "3. low": "167.5",
                "4. close": "170.0",
                "5. volume": "2000",
            },
        },
    }
