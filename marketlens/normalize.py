"""
MarketLens - Payload Normalization

Pure functions that reshape provider-specific JSON into the models in
models.py. They raise NotFoundError when a payload carries no usable data.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from .errors import NotFoundError
from .models import (
    MacroLive,
    MacroObservation,
    MacroSeries,
    NewsArticle,
    NewsPage,
    StockQuote,
    SymbolMatch,
    TimeSeries,
    TimeSeriesPoint,
)


@dataclass(frozen=True)
class MacroIndicator:
    """A supported macro indicator and its FRED series."""

    series_id: str
    name: str
    unit: str


MACRO_INDICATORS: dict[str, MacroIndicator] = {
    "CPI": MacroIndicator(series_id="CPIAUCSL", name="CPI", unit=""),
    "GDP": MacroIndicator(series_id="GDPC1", name="Real GDP", unit="B"),
    "FEDERAL_FUNDS_RATE": MacroIndicator(series_id="FEDFUNDS", name="Interest Rate", unit="%"),
    "UNEMPLOYMENT": MacroIndicator(series_id="UNRATE", name="Unemployment", unit="%"),
}


def _iso_utc(epoch_seconds: float) -> str:
    stamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_float(raw: Any) -> float | None:
    """Parse a numeric string; FRED uses "." for missing values."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) or math.isinf(value) else value


def normalize_quote(symbol: str, raw: dict[str, Any] | None) -> StockQuote:
    """
    Normalize a Finnhub /quote payload.

    Finnhub answers unknown symbols with an all-zero quote, which is
    reported as NotFoundError.
    """
    if not raw or (not raw.get("c") and not raw.get("pc")):
        raise NotFoundError("Stock", symbol)

    current = float(raw["c"])
    previous_close = float(raw.get("pc") or 0.0)
    change = current - previous_close
    change_percent = (change / previous_close) * 100 if previous_close else 0.0

    return StockQuote(
        symbol=symbol,
        timestamp=_iso_utc(float(raw.get("t") or 0)),
        value=current,
        open=float(raw.get("o") or 0.0),
        high=float(raw.get("h") or 0.0),
        low=float(raw.get("l") or 0.0),
        close=previous_close,
        change=change,
        change_percent=change_percent,
    )


def normalize_search(raw: dict[str, Any] | None) -> list[SymbolMatch]:
    """Normalize a Finnhub /search payload. No matches yields []."""
    if not raw:
        return []
    return [
        SymbolMatch(
            symbol=item.get("symbol", ""),
            name=item.get("description", ""),
            type=item.get("type", ""),
        )
        for item in raw.get("result") or []
    ]


def normalize_time_series(raw: dict[str, Any], symbol: str) -> TimeSeries:
    """Normalize an Alpha Vantage TIME_SERIES_DAILY payload, oldest bar first."""
    series = raw.get("Time Series (Daily)")
    if not series:
        raise NotFoundError("Time series", symbol)

    meta = raw.get("Meta Data") or {}
    points = [
        TimeSeriesPoint(
            date=day,
            open=float(bar["1. open"]),
            high=float(bar["2. high"]),
            low=float(bar["3. low"]),
            close=float(bar["4. close"]),
            volume=int(float(bar["5. volume"])),
        )
        for day, bar in series.items()
    ]
    # ISO dates sort lexically
    points.sort(key=lambda p: p.date)

    return TimeSeries(symbol=meta.get("2. Symbol", symbol), data=points)


def normalize_macro(indicator: str, raw: dict[str, Any] | None) -> MacroSeries:
    """
    Normalize a FRED series/observations payload (sorted newest first).

    Observations without a numeric value are dropped; the newest remaining
    observation becomes the live reading.
    """
    config = MACRO_INDICATORS[indicator]
    observations = (raw or {}).get("observations") or []

    historical = []
    for obs in observations:
        value = _to_float(obs.get("value"))
        if value is not None:
            historical.append(MacroObservation(date=obs.get("date", ""), value=value))

    if not historical:
        raise NotFoundError("Macro indicator", indicator)

    latest = historical[0]
    return MacroSeries(
        indicator=indicator,
        name=config.name,
        live=MacroLive(date=latest.date, value=latest.value, unit=config.unit),
        historical=historical,
    )


def normalize_news(raw: dict[str, Any] | None) -> NewsPage:
    """Normalize a NewsAPI response body."""
    raw = raw or {}
    return NewsPage(
        articles=[NewsArticle.model_validate(article) for article in raw.get("articles") or []],
        total_results=int(raw.get("totalResults") or 0),
    )
