"""
MarketLens - Normalized Data Models

Uniform schemas that every provider payload is reshaped into before it is
cached or returned. Cached values are the JSON dump of these models.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StockQuote(BaseModel):
    """Latest quote for a stock or ETF."""

    symbol: str = Field(..., description="Upper-case ticker symbol")
    asset_type: Literal["stock"] = Field(default="stock")
    timestamp: str = Field(..., description="Quote time, ISO 8601 UTC")
    value: float = Field(..., description="Current price")
    open: float
    high: float
    low: float
    close: float = Field(..., description="Previous close")
    volume: int = Field(default=0, description="Not provided by the quote endpoint")
    change: float
    change_percent: float
    currency: Literal["USD"] = Field(default="USD")
    source: Literal["Finnhub"] = Field(default="Finnhub")


class SymbolMatch(BaseModel):
    """One symbol search hit."""

    symbol: str
    name: str
    type: str


class TimeSeriesPoint(BaseModel):
    """Daily OHLCV bar."""

    date: str = Field(..., description="YYYY-MM-DD")
    open: float
    high: float
    low: float
    close: float
    volume: int


class TimeSeries(BaseModel):
    """Daily history for a symbol, oldest first."""

    symbol: str
    data: list[TimeSeriesPoint] = Field(default_factory=list)


class MacroObservation(BaseModel):
    """One observation of a macro series."""

    date: str
    value: float


class MacroLive(MacroObservation):
    """Most recent observation with its display unit."""

    unit: str = ""


class MacroSeries(BaseModel):
    """A macro indicator: latest reading plus history, newest first."""

    indicator: str
    name: str
    live: MacroLive
    historical: list[MacroObservation] = Field(default_factory=list)


class NewsSource(BaseModel):
    id: str | None = None
    name: str | None = None


class NewsArticle(BaseModel):
    """A headline as returned by NewsAPI."""

    model_config = ConfigDict(populate_by_name=True)

    source: NewsSource = Field(default_factory=NewsSource)
    author: str | None = None
    title: str | None = None
    description: str | None = None
    url: str | None = None
    url_to_image: str | None = Field(default=None, alias="urlToImage")
    published_at: str | None = Field(default=None, alias="publishedAt")
    content: str | None = None


class NewsPage(BaseModel):
    """A page of news results."""

    articles: list[NewsArticle] = Field(default_factory=list)
    total_results: int = 0
