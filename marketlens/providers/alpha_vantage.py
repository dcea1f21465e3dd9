"""
Alpha Vantage Provider

Daily OHLCV history. Alpha Vantage reports errors and quota notices with
HTTP 200 and a message field, so those are translated here.
"""

import logging
from typing import Any

from ..errors import NotFoundError, ProviderRateLimitError, ValidationError
from .base import BaseProvider

logger = logging.getLogger(__name__)


class AlphaVantageClient(BaseProvider):
    """Client for the Alpha Vantage query API."""

    name = "Alpha Vantage"
    env_var = "ALPHA_VANTAGE_API_KEY"
    default_base_url = "https://www.alphavantage.co"

    async def daily_series(self, symbol: str) -> dict[str, Any]:
        """
        Fetch TIME_SERIES_DAILY (compact, ~100 bars) for a symbol.

        Raises:
            ValidationError: Alpha Vantage rejected the symbol
            ProviderRateLimitError: A quota notice was returned instead of data
            NotFoundError: The body was empty
        """
        data = await self._get_json(
            "/query",
            {
                "function": "TIME_SERIES_DAILY",
                "symbol": symbol,
                "outputsize": "compact",
                "apikey": self.api_key,
            },
        )
        if not data:
            raise NotFoundError("Time series", symbol)

        if data.get("Error Message"):
            logger.warning(f"Alpha Vantage API error for {symbol}: {data['Error Message']}")
            raise ValidationError(data["Error Message"], details={"symbol": symbol})

        notice = data.get("Note") or data.get("Information")
        if notice:
            logger.warning(f"Alpha Vantage API note for {symbol}: {notice}")
            raise ProviderRateLimitError(self.name, notice)

        return data
