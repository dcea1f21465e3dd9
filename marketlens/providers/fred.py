"""
FRED Provider

Macroeconomic series observations from the St. Louis Fed.
"""

from typing import Any

from .base import BaseProvider


class FredClient(BaseProvider):
    """Client for the FRED series API."""

    name = "FRED"
    env_var = "FRED_API_KEY"
    default_base_url = "https://api.stlouisfed.org/fred"

    async def observations(self, series_id: str, limit: int = 100) -> dict[str, Any] | None:
        """
        Fetch the newest observations of a series, newest first.

        100 observations covers about 8 years of a monthly series, enough
        to compute recent change.
        """
        return await self._get_json(
            "/series/observations",
            {
                "series_id": series_id,
                "api_key": self.api_key,
                "file_type": "json",
                "sort_order": "desc",
                "limit": limit,
            },
        )
