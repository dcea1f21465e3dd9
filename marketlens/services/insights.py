"""
MarketLens - Insight Service

Aggregates market data in parallel and asks Gemini for a narrative.
Each data source is awaited independently; a source that fails is left
out of the prompt rather than failing the whole insight.
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from datetime import datetime
from typing import Any, TypeVar

from ..errors import ValidationError
from ..models import MacroSeries, NewsPage, StockQuote, TimeSeries
from ..providers import GeminiClient
from .market_data import MarketDataService

logger = logging.getLogger(__name__)

T = TypeVar("T")

BIG_STOCK_SYMBOLS = ["AAPL", "MSFT", "GOOGL", "AMZN", "TSLA", "NVDA"]
MAJOR_INDEX_SYMBOLS = ["SPY", "QQQ", "DIA", "IWM"]

# Indicator -> label used in prompts
MACRO_LABELS = {
    "CPI": "CPI",
    "GDP": "GDP Growth",
    "FEDERAL_FUNDS_RATE": "Interest Rate",
    "UNEMPLOYMENT": "Employment",
}

# Approximate trading days
ONE_MONTH_BARS = 20
SIX_MONTH_BARS = 120

MARKET_SUMMARY_INSTRUCTIONS = """Please generate a "What's Moving Markets Today?" summary based on the market data above.
The entire response MUST be in Markdown format, starting directly with the main heading.
The entire summary, across all sections, must not exceed 6 sentences.
Focus on interrelationships and potential market impacts, avoiding speculative language.
Structure the summary strictly with the following sections:

## What's Moving Markets Today?

### Overall Market Summary
### Key Drivers
### Notable News
### Economic Outlook

Ensure clarity, use bold text for emphasis where appropriate, and maintain a calm, analytical tone.
"""

CHAT_INSTRUCTIONS = """You are a market data assistant. Answer using the market data above where relevant.
Be concise and factual. Never provide investment advice, buy/sell recommendations, or price predictions.
"""


async def _settled(awaitable: Awaitable[T], label: str) -> T | None:
    """Await one data source; log and return None if it fails."""
    try:
        return await awaitable
    except Exception as e:
        logger.warning(f"Insight data source '{label}' failed: {e}", extra={"source": label, "error": str(e)})
        return None


def _pct(current: float, previous: float) -> float:
    return (current - previous) / previous * 100 if previous else 0.0


def _news_lines(page: NewsPage | None, limit: int = 3, with_dates: bool = False) -> list[str]:
    if page is None:
        return []
    lines = []
    for article in page.articles[:limit]:
        line = f"- {article.title} ({article.source.name})"
        if with_dates and article.published_at:
            try:
                published = datetime.fromisoformat(article.published_at.replace("Z", "+00:00"))
                line += f" - Published: {published:%b %d, %Y}"
            except ValueError:
                pass
        lines.append(line)
    return lines


def _quote_lines(quotes: Iterable[StockQuote | None]) -> list[str]:
    return [f"- {q.symbol}: {q.value:.2f} ({q.change_percent:.2f}%)" for q in quotes if q is not None]


def _macro_line(series: MacroSeries) -> str:
    label = MACRO_LABELS.get(series.indicator, series.name)
    change_info = ""
    if len(series.historical) >= 2:
        latest = series.historical[0].value
        previous = series.historical[1].value
        change_info = f" (Change: {latest - previous:.2f} / {_pct(latest, previous):.2f}%)"
    return f"- {label}: {series.live.value:.2f}{series.live.unit}{change_info}"


def _section(title: str, lines: list[str]) -> str:
    if not lines:
        return ""
    return f"--- {title} ---\n" + "\n".join(lines) + "\n\n"


class InsightService:
    """Builds prompts from aggregated market data and calls Gemini."""

    def __init__(self, market_data: MarketDataService, gemini: GeminiClient) -> None:
        self.market_data = market_data
        self.gemini = gemini

    async def _quotes(self, symbols: list[str]) -> list[StockQuote | None]:
        return list(await asyncio.gather(*(_settled(self.market_data.stock_quote(s), s) for s in symbols)))

    async def _macros(self) -> list[MacroSeries | None]:
        return list(
            await asyncio.gather(
                *(_settled(self.market_data.macro_indicator(ind), ind) for ind in MACRO_LABELS)
            )
        )

    async def market_context(self) -> str:
        """Render current news, key stocks, indices and macro readings as prompt text."""
        news, stocks, indices, macros = await asyncio.gather(
            _settled(self.market_data.news(category="general", page_size=5), "news"),
            self._quotes(BIG_STOCK_SYMBOLS),
            self._quotes(MAJOR_INDEX_SYMBOLS),
            self._macros(),
        )

        return (
            _section("Latest News", _news_lines(news))
            + _section("Key Stocks", _quote_lines(stocks))
            + _section("Major Indices", _quote_lines(indices))
            + _section("Macro Economic Indicators", [_macro_line(m) for m in macros if m is not None])
        )

    async def market_summary(self) -> str:
        """'What's moving markets today?' narrative."""
        context = await self.market_context()
        prompt = (
            "Generate a 'What's moving markets today?' summary based on the following data:\n\n"
            + context
            + MARKET_SUMMARY_INSTRUCTIONS
        )
        return await self.gemini.generate(prompt)

    async def stock_summary(self, symbol: str) -> str:
        """Short, non-advisory overview of one stock."""
        symbol = (symbol or "").strip().upper()
        if not symbol:
            raise ValidationError("Stock symbol is required", details={"symbol": symbol})

        quote, series, news = await asyncio.gather(
            _settled(self.market_data.stock_quote(symbol), "quote"),
            _settled(self.market_data.time_series(symbol), "time_series"),
            _settled(self.market_data.news(query=symbol, page_size=5), "news"),
        )

        prompt = (
            f"Generate a concise, analytical overview for the stock {symbol} based on the following data.\n"
            "The response MUST be in Markdown format, start directly with the main heading, "
            "and be for informational purposes only.\n"
            "The entire response must not exceed 4 sentences.\n"
            "NEVER provide investment advice, buy/sell recommendations, or price predictions.\n\n"
            f"## Stock Analysis for {symbol}\n\n"
        )
        prompt += self._quote_section(quote)
        prompt += self._trend_section(series)
        news_lines = _news_lines(news, with_dates=True)
        if news_lines:
            prompt += "### Recent News Impact\n" + "\n".join(news_lines) + "\n\n"
        prompt += (
            f"Based on this data, provide an objective summary of {symbol}'s current status, "
            "recent performance, and potential influencing factors."
        )
        return await self.gemini.generate(prompt)

    @staticmethod
    def _quote_section(quote: StockQuote | None) -> str:
        if quote is None:
            return ""
        return (
            "### Current Performance\n"
            f"- Price: {quote.value:.2f} {quote.currency}\n"
            f"- Change: {quote.change:.2f} ({quote.change_percent:.2f}%)\n"
            f"- Open: {quote.open:.2f}, High: {quote.high:.2f}, Low: {quote.low:.2f}\n"
            f"- Last Updated: {quote.timestamp}\n\n"
        )

    @staticmethod
    def _trend_section(series: TimeSeries | None) -> str:
        if series is None or not series.data:
            return ""
        # Bars are oldest first
        bars = series.data
        latest = bars[-1].close
        month_ago = bars[max(0, len(bars) - 1 - ONE_MONTH_BARS)].close
        six_months_ago = bars[max(0, len(bars) - 1 - SIX_MONTH_BARS)].close

        return (
            "### Historical Trends\n"
            f"- Latest Close: {latest:.2f}\n"
            f"- 1 Month Change: {_pct(latest, month_ago):.2f}%\n"
            f"- 6 Month Change: {_pct(latest, six_months_ago):.2f}%\n\n"
        )

    async def chat(self, message: str, history: list[dict[str, Any]] | None = None) -> str:
        """Answer a user message with current market data as context."""
        if not message or not message.strip():
            raise ValidationError("Message is required", details={"message": message})

        context = await self.market_context()
        prompt = "Here is the current market data:\n\n" + context + CHAT_INSTRUCTIONS + f"\nUser: {message.strip()}"
        return await self.gemini.generate(prompt, history=history)
