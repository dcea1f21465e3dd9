"""
MarketLens - Market Data Service Tests

Provider clients are mocked; the cache is a real ReadThroughCache so key
naming, TTLs and failover are exercised end to end.
"""

from typing import Any
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from marketlens.cache import CacheMode, ReadThroughCache
from marketlens.errors import NotFoundError, ProviderError, ValidationError
from marketlens.models import StockQuote
from marketlens.services import MarketDataService
from marketlens.services.market_data import MACRO_TTL_MS, QUOTE_TTL_MS


def _service(cache: ReadThroughCache) -> MarketDataService:
    return MarketDataService(
        cache=cache,
        finnhub=AsyncMock(),
        alpha_vantage=AsyncMock(),
        fred=AsyncMock(),
        news=AsyncMock(),
    )


class TestStockQuote:
    async def test_fetches_then_serves_from_cache(
        self, local_cache: ReadThroughCache, finnhub_quote: dict[str, Any]
    ) -> None:
        service = _service(local_cache)
        service.finnhub.quote.return_value = finnhub_quote

        first = await service.stock_quote("aapl")
        second = await service.stock_quote("AAPL")

        assert isinstance(first, StockQuote)
        assert first == second
        assert first.symbol == "AAPL"
        service.finnhub.quote.assert_awaited_once_with("AAPL")
        assert (await local_cache.get("stock_quote_AAPL"))["value"] == 150.25

    async def test_refetched_after_five_minutes(
        self, local_cache: ReadThroughCache, clock, finnhub_quote: dict[str, Any]
    ) -> None:
        service = _service(local_cache)
        service.finnhub.quote.return_value = finnhub_quote

        await service.stock_quote("AAPL")
        clock.advance(QUOTE_TTL_MS)
        await service.stock_quote("AAPL")

        assert service.finnhub.quote.await_count == 2

    async def test_unknown_symbol(self, local_cache: ReadThroughCache) -> None:
        service = _service(local_cache)
        service.finnhub.quote.return_value = {"c": 0, "pc": 0, "t": 0}

        with pytest.raises(NotFoundError):
            await service.stock_quote("ZZZZ")
        assert await local_cache.get("stock_quote_ZZZZ") is None

    async def test_blank_symbol(self, local_cache: ReadThroughCache) -> None:
        with pytest.raises(ValidationError):
            await _service(local_cache).stock_quote("  ")

    async def test_provider_error_propagates(self, local_cache: ReadThroughCache) -> None:
        service = _service(local_cache)
        service.finnhub.quote.side_effect = ProviderError("Finnhub down")

        with pytest.raises(ProviderError):
            await service.stock_quote("AAPL")

    async def test_redis_outage_still_answers(
        self, networked_cache: ReadThroughCache, redis_client: AsyncMock, finnhub_quote: dict[str, Any]
    ) -> None:
        """A dead cache makes requests slower, never failed."""
        redis_client.get.side_effect = RedisConnectionError("Connection refused")
        service = _service(networked_cache)
        service.finnhub.quote.return_value = finnhub_quote

        quote = await service.stock_quote("AAPL")

        assert quote.value == 150.25
        assert networked_cache.mode is CacheMode.LOCAL


class TestSearchSymbols:
    async def test_results_cached(self, local_cache: ReadThroughCache) -> None:
        service = _service(local_cache)
        service.finnhub.search.return_value = {
            "count": 1,
            "result": [{"description": "APPLE INC", "symbol": "AAPL", "type": "Common Stock"}],
        }

        await service.search_symbols("Apple")
        matches = await service.search_symbols("apple")

        assert [m.symbol for m in matches] == ["AAPL"]
        service.finnhub.search.assert_awaited_once()
        assert await local_cache.get("stock_search_apple") is not None

    async def test_empty_results_not_cached(self, local_cache: ReadThroughCache) -> None:
        service = _service(local_cache)
        service.finnhub.search.return_value = {"count": 0, "result": []}

        assert await service.search_symbols("qqqqq") == []
        assert await service.search_symbols("qqqqq") == []
        assert service.finnhub.search.await_count == 2

    async def test_blank_keywords(self, local_cache: ReadThroughCache) -> None:
        service = _service(local_cache)

        assert await service.search_symbols("   ") == []
        service.finnhub.search.assert_not_awaited()


class TestTimeSeries:
    async def test_cached_under_symbol_key(
        self, local_cache: ReadThroughCache, alpha_vantage_daily: dict[str, Any]
    ) -> None:
        service = _service(local_cache)
        service.alpha_vantage.daily_series.return_value = alpha_vantage_daily

        series = await service.time_series("aapl")

        assert series.data[-1].date == "2024-03-05"
        assert await local_cache.get("timeseries_AAPL") is not None


class TestMacroIndicator:
    async def test_fetches_series_by_id(
        self, local_cache: ReadThroughCache, clock, fred_observations: dict[str, Any]
    ) -> None:
        service = _service(local_cache)
        service.fred.observations.return_value = fred_observations

        series = await service.macro_indicator("cpi")

        assert series.live.value == 312.2
        service.fred.observations.assert_awaited_once_with("CPIAUCSL")

        clock.advance(MACRO_TTL_MS - 1)
        assert (await local_cache.get("macro_CPI"))["live"]["value"] == 312.2

    async def test_unknown_indicator(self, local_cache: ReadThroughCache) -> None:
        service = _service(local_cache)

        with pytest.raises(ValidationError) as exc_info:
            await service.macro_indicator("INFLATION")
        assert "CPI" in exc_info.value.details["supported"]
        service.fred.observations.assert_not_awaited()


class TestNews:
    async def test_not_cached(self, local_cache: ReadThroughCache) -> None:
        service = _service(local_cache)
        service.news_client.headlines.return_value = {"totalResults": 0, "articles": []}

        await service.news(theme="business")
        await service.news(theme="business")

        assert service.news_client.headlines.await_count == 2
        kwargs = service.news_client.headlines.await_args.kwargs
        assert kwargs["theme"] == "business"
        assert kwargs["sort_by"] == "popularity"
