"""
MarketLens - Services

Cache-backed market data, AI insights and the watchlist.
"""

from .insights import InsightService
from .market_data import (
    MACRO_TTL_MS,
    QUOTE_TTL_MS,
    SEARCH_TTL_MS,
    TIME_SERIES_TTL_MS,
    MarketDataService,
)
from .watchlist import WatchlistStore

__all__ = [
    "MarketDataService",
    "InsightService",
    "WatchlistStore",
    "QUOTE_TTL_MS",
    "SEARCH_TTL_MS",
    "TIME_SERIES_TTL_MS",
    "MACRO_TTL_MS",
]
