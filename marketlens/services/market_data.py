"""
MarketLens - Market Data Service

Fetch-then-cache access to quotes, symbol search, daily history and macro
indicators. Keys follow "{domain}_{identifier}"; TTLs follow how fast the
data changes.
"""

import logging

from ..cache import ReadThroughCache
from ..errors import ValidationError
from ..models import MacroSeries, NewsPage, StockQuote, SymbolMatch, TimeSeries
from ..normalize import (
    MACRO_INDICATORS,
    normalize_macro,
    normalize_news,
    normalize_quote,
    normalize_search,
    normalize_time_series,
)
from ..providers import AlphaVantageClient, FinnhubClient, FredClient, NewsApiClient

logger = logging.getLogger(__name__)

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

QUOTE_TTL_MS = 5 * MINUTE_MS
SEARCH_TTL_MS = HOUR_MS
TIME_SERIES_TTL_MS = 24 * HOUR_MS
MACRO_TTL_MS = 24 * HOUR_MS


def _symbol(raw: str) -> str:
    symbol = (raw or "").strip().upper()
    if not symbol:
        raise ValidationError("Stock symbol is required", details={"symbol": raw})
    return symbol


class MarketDataService:
    """Cache-backed market data, built once and shared by every tool."""

    def __init__(
        self,
        cache: ReadThroughCache,
        finnhub: FinnhubClient,
        alpha_vantage: AlphaVantageClient,
        fred: FredClient,
        news: NewsApiClient,
    ) -> None:
        self.cache = cache
        self.finnhub = finnhub
        self.alpha_vantage = alpha_vantage
        self.fred = fred
        self.news_client = news

    async def stock_quote(self, symbol: str) -> StockQuote:
        """Latest quote for a symbol (cached 5 minutes)."""
        symbol = _symbol(symbol)

        async def fetch() -> dict:
            raw = await self.finnhub.quote(symbol)
            return normalize_quote(symbol, raw).model_dump(mode="json")

        data = await self.cache.get_or_fetch(f"stock_quote_{symbol}", QUOTE_TTL_MS, fetch)
        return StockQuote.model_validate(data)

    async def search_symbols(self, keywords: str) -> list[SymbolMatch]:
        """Symbol search (cached 1 hour). Empty result sets are not cached."""
        keywords = (keywords or "").strip()
        if not keywords:
            return []

        key = f"stock_search_{keywords.lower()}"
        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for search '{keywords}'", extra={"key": key})
            return [SymbolMatch.model_validate(item) for item in cached]

        matches = normalize_search(await self.finnhub.search(keywords))
        if matches:
            await self.cache.put(key, [m.model_dump(mode="json") for m in matches], SEARCH_TTL_MS)
        return matches

    async def time_series(self, symbol: str) -> TimeSeries:
        """Daily OHLCV history, oldest first (cached 24 hours)."""
        symbol = _symbol(symbol)

        async def fetch() -> dict:
            raw = await self.alpha_vantage.daily_series(symbol)
            return normalize_time_series(raw, symbol).model_dump(mode="json")

        data = await self.cache.get_or_fetch(f"timeseries_{symbol}", TIME_SERIES_TTL_MS, fetch)
        return TimeSeries.model_validate(data)

    async def macro_indicator(self, indicator: str) -> MacroSeries:
        """Latest reading and history of a macro indicator (cached 24 hours)."""
        indicator = (indicator or "").strip().upper()
        if indicator not in MACRO_INDICATORS:
            raise ValidationError(
                f"Invalid or missing indicator '{indicator}'",
                details={"indicator": indicator, "supported": sorted(MACRO_INDICATORS)},
            )

        async def fetch() -> dict:
            raw = await self.fred.observations(MACRO_INDICATORS[indicator].series_id)
            return normalize_macro(indicator, raw).model_dump(mode="json")

        data = await self.cache.get_or_fetch(f"macro_{indicator}", MACRO_TTL_MS, fetch)
        return MacroSeries.model_validate(data)

    async def news(
        self,
        theme: str | None = None,
        category: str | None = None,
        query: str | None = None,
        page: int = 1,
        page_size: int = 10,
        sort_by: str = "popularity",
    ) -> NewsPage:
        """Headlines straight from NewsAPI; news is not cached."""
        raw = await self.news_client.headlines(
            theme=theme,
            category=category,
            query=query,
            page=page,
            page_size=page_size,
            sort_by=sort_by,
        )
        return normalize_news(raw)
