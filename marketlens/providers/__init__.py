"""
MarketLens - Upstream Providers

HTTP clients for quotes (Finnhub), daily history (Alpha Vantage), macro
series (FRED), news (NewsAPI) and narrative generation (Gemini).
"""

from .alpha_vantage import AlphaVantageClient
from .base import BaseProvider
from .finnhub import FinnhubClient
from .fred import FredClient
from .gemini import GeminiClient
from .newsapi import NewsApiClient, resolve_news_request

__all__ = [
    "BaseProvider",
    "FinnhubClient",
    "AlphaVantageClient",
    "FredClient",
    "NewsApiClient",
    "GeminiClient",
    "resolve_news_request",
]
