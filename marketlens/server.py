"""
MarketLens - Server

FastMCP server exposing the market-data dashboard's data layer as tools.

- Single entrypoint; MCP stdio transport
- Resources (cache, provider clients, services) are built once in the
  lifespan and shared by every tool
- Graceful shutdown closes the cache and HTTP clients
- Configuration via typed Pydantic models only
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from fastmcp import FastMCP

from . import __version__
from .cache import ReadThroughCache, create_cache
from .config import MarketLensConfig, load_config
from .providers import AlphaVantageClient, FinnhubClient, FredClient, GeminiClient, NewsApiClient
from .services import InsightService, MarketDataService, WatchlistStore
from .validation import (
    ChatInput,
    MacroIndicatorInput,
    NewsInput,
    NoInput,
    SearchSymbolsInput,
    StockSymbolInput,
    validate_input,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


@dataclass
class AppContext:
    """Everything the tools need, built once per process."""

    config: MarketLensConfig
    cache: ReadThroughCache
    market_data: MarketDataService
    insights: InsightService
    watchlist: WatchlistStore

    async def close(self) -> None:
        await self.cache.close()
        for client in (
            self.market_data.finnhub,
            self.market_data.alpha_vantage,
            self.market_data.fred,
            self.market_data.news_client,
            self.insights.gemini,
        ):
            await client.close()


def build_app_context(config: MarketLensConfig, cache: ReadThroughCache | None = None) -> AppContext:
    """Wire cache, provider clients and services together."""
    cache = cache or create_cache(config.cache)
    providers = config.providers
    market_data = MarketDataService(
        cache=cache,
        finnhub=FinnhubClient(providers.finnhub),
        alpha_vantage=AlphaVantageClient(providers.alpha_vantage),
        fred=FredClient(providers.fred),
        news=NewsApiClient(providers.newsapi),
    )
    return AppContext(
        config=config,
        cache=cache,
        market_data=market_data,
        insights=InsightService(market_data, GeminiClient(providers.gemini)),
        watchlist=WatchlistStore(config.watchlist.path),
    )


_app: AppContext | None = None


def get_app() -> AppContext:
    """The running application context."""
    if _app is None:
        raise RuntimeError("MarketLens server is not initialized")
    return _app


async def initialize_server(config: MarketLensConfig | None = None) -> AppContext:
    """Initialize server resources on startup."""
    global _app

    if _app is not None:
        return _app

    config = config or load_config()
    setup_logging(config.log_level)
    logger.info(f"Initializing MarketLens server (environment: {config.environment})")

    _app = build_app_context(config)

    for name, provider in config.providers.model_dump().items():
        if not provider.get("api_key"):
            logger.warning(f"{name} API key is not set; its tools will return errors", extra={"provider": name})

    logger.info(
        f"MarketLens server initialized (cache mode: {_app.cache.mode.value})",
        extra={"cache_mode": _app.cache.mode.value},
    )
    return _app


async def cleanup_server() -> None:
    """Cleanup server resources on shutdown."""
    global _app

    if _app is None:
        return

    logger.info("Cleaning up MarketLens server...")
    try:
        await _app.close()
    except Exception as e:
        logger.error(f"Error during cleanup: {e}", exc_info=True)
    finally:
        _app = None
    logger.info("MarketLens server cleanup complete")


@asynccontextmanager
async def server_lifespan(server: Any) -> Any:
    """Server lifespan manager (startup/shutdown)."""
    await initialize_server()
    try:
        yield
    finally:
        await cleanup_server()


mcp = FastMCP("MarketLens - Market Data Dashboard", lifespan=server_lifespan)


# ============================================================================
# Status
# ============================================================================


@mcp.tool()
@validate_input(NoInput)
async def check_status() -> dict[str, Any]:
    """
    Check system health and status.

    Returns:
        Service status, cache mode and which providers are configured
    """
    app = get_app()
    providers = app.config.providers
    return {
        "status": "healthy",
        "service": "marketlens",
        "version": __version__,
        "cache": {"mode": app.cache.mode.value, "downgraded": app.cache.downgraded},
        "providers": {
            "finnhub": providers.finnhub.enabled,
            "alpha_vantage": providers.alpha_vantage.enabled,
            "fred": providers.fred.enabled,
            "newsapi": providers.newsapi.enabled,
            "gemini": providers.gemini.enabled,
        },
    }


@mcp.tool()
@validate_input(NoInput)
async def get_cache_stats() -> dict[str, Any]:
    """
    Get cache statistics.

    Returns:
        Active mode, downgrade state and per-backend counters
    """
    return await get_app().cache.get_stats()


# ============================================================================
# Market data
# ============================================================================


@mcp.tool()
@validate_input(StockSymbolInput)
async def get_stock_quote(symbol: str) -> dict[str, Any]:
    """
    Latest quote for a stock or ETF (cached for 5 minutes).

    Args:
        symbol: Ticker symbol, e.g. AAPL or SPY
    """
    quote = await get_app().market_data.stock_quote(symbol)
    return quote.model_dump(mode="json")


@mcp.tool()
@validate_input(SearchSymbolsInput)
async def search_symbols(keywords: str) -> list[dict[str, Any]]:
    """
    Search ticker symbols by company name or fragment (cached for 1 hour).

    Args:
        keywords: Search text
    """
    matches = await get_app().market_data.search_symbols(keywords)
    return [m.model_dump(mode="json") for m in matches]


@mcp.tool()
@validate_input(StockSymbolInput)
async def get_time_series(symbol: str) -> dict[str, Any]:
    """
    Daily OHLCV history for a symbol, oldest first (cached for 24 hours).

    Args:
        symbol: Ticker symbol
    """
    series = await get_app().market_data.time_series(symbol)
    return series.model_dump(mode="json")


@mcp.tool()
@validate_input(MacroIndicatorInput)
async def get_macro_indicator(indicator: str) -> dict[str, Any]:
    """
    Latest reading and history of a macro indicator (cached for 24 hours).

    Args:
        indicator: CPI, GDP, FEDERAL_FUNDS_RATE or UNEMPLOYMENT
    """
    series = await get_app().market_data.macro_indicator(indicator)
    return series.model_dump(mode="json")


@mcp.tool()
@validate_input(NewsInput)
async def get_news(
    theme: str | None = None,
    category: str | None = None,
    query: str | None = None,
    page: int = 1,
    page_size: int = 10,
    sort_by: str = "popularity",
) -> dict[str, Any]:
    """
    Latest headlines by theme, category or query.

    Args:
        theme: business, technology, political, geopolitical, economics or general
        category: NewsAPI category (used when no theme is given)
        query: Free-text query (used when neither theme nor category applies)
        page: Page number
        page_size: Results per page
        sort_by: popularity, publishedAt or relevancy
    """
    page_data = await get_app().market_data.news(
        theme=theme,
        category=category,
        query=query,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
    )
    return page_data.model_dump(mode="json", by_alias=True)


# ============================================================================
# AI insights
# ============================================================================


@mcp.tool()
@validate_input(NoInput)
async def get_market_insights() -> dict[str, Any]:
    """
    "What's moving markets today?" narrative built from news, key stocks,
    major indices and macro indicators.
    """
    return {"insight": await get_app().insights.market_summary()}


@mcp.tool()
@validate_input(StockSymbolInput)
async def get_stock_insights(symbol: str) -> dict[str, Any]:
    """
    Short, non-advisory overview of one stock.

    Args:
        symbol: Ticker symbol
    """
    return {"insight": await get_app().insights.stock_summary(symbol)}


@mcp.tool()
@validate_input(ChatInput)
async def chat(message: str, history: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """
    Ask a question about the markets with current market data as context.

    Args:
        message: User message
        history: Prior turns as {"role": "user"|"assistant", "content": str}
    """
    return {"reply": await get_app().insights.chat(message, history)}


# ============================================================================
# Watchlist
# ============================================================================


@mcp.tool()
@validate_input(NoInput)
async def get_watchlist() -> dict[str, Any]:
    """Symbols on the watchlist."""
    return {"watchlist": get_app().watchlist.get()}


@mcp.tool()
@validate_input(StockSymbolInput)
async def add_to_watchlist(symbol: str) -> dict[str, Any]:
    """
    Add a symbol to the watchlist (no duplicates).

    Args:
        symbol: Ticker symbol
    """
    return {"watchlist": get_app().watchlist.add(symbol)}


@mcp.tool()
@validate_input(StockSymbolInput)
async def remove_from_watchlist(symbol: str) -> dict[str, Any]:
    """
    Remove a symbol from the watchlist.

    Args:
        symbol: Ticker symbol
    """
    return {"watchlist": get_app().watchlist.remove(symbol)}


def main() -> None:
    """CLI entry point for the marketlens command."""
    mcp.run()


if __name__ == "__main__":
    main()
