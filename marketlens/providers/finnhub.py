"""
Finnhub Provider

Real-time quotes and symbol search.
"""

from typing import Any

from .base import BaseProvider


class FinnhubClient(BaseProvider):
    """Client for the Finnhub REST API."""

    name = "Finnhub"
    env_var = "FINNHUB_API_KEY"
    default_base_url = "https://finnhub.io/api/v1"

    async def quote(self, symbol: str) -> dict[str, Any] | None:
        """Raw /quote payload (c, h, l, o, pc, t), or None for an empty body."""
        return await self._get_json("/quote", {"symbol": symbol, "token": self.api_key})

    async def search(self, keywords: str) -> dict[str, Any] | None:
        """Raw /search payload ({"count": n, "result": [...]})."""
        return await self._get_json("/search", {"q": keywords, "token": self.api_key})
