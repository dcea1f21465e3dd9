"""
NewsAPI Provider

Headlines by theme, category or free-text query.
"""

from dataclasses import dataclass
from typing import Any

from .base import BaseProvider

# Themes served from top-headlines by category
CATEGORY_THEMES = {"business", "technology"}

# Themes served from the everything endpoint with a fixed query
QUERY_THEMES = {
    "political": "politics",
    "geopolitical": "geopolitics",
    "economics": "economics",
}


@dataclass(frozen=True)
class NewsRequest:
    """Resolved NewsAPI endpoint and its selector parameter."""

    endpoint: str
    params: dict[str, str]


def resolve_news_request(
    theme: str | None = None,
    category: str | None = None,
    query: str | None = None,
) -> NewsRequest:
    """
    Pick the NewsAPI endpoint for a request.

    Precedence is theme, then a non-general category, then query. Anything
    else (including an unknown theme) is general top headlines.
    """
    if theme:
        if theme in CATEGORY_THEMES:
            return NewsRequest("/top-headlines", {"category": theme})
        if theme in QUERY_THEMES:
            return NewsRequest("/everything", {"q": QUERY_THEMES[theme]})
        return NewsRequest("/top-headlines", {"category": "general"})

    if category and category != "general":
        return NewsRequest("/top-headlines", {"category": category})

    if query:
        return NewsRequest("/everything", {"q": query})

    return NewsRequest("/top-headlines", {"category": "general"})


class NewsApiClient(BaseProvider):
    """Client for newsapi.org v2."""

    name = "NewsAPI"
    env_var = "NEWS_API_KEY"
    default_base_url = "https://newsapi.org/v2"

    async def headlines(
        self,
        theme: str | None = None,
        category: str | None = None,
        query: str | None = None,
        page: int = 1,
        page_size: int = 10,
        sort_by: str = "popularity",
    ) -> dict[str, Any] | None:
        """Raw NewsAPI body ({"status", "totalResults", "articles"})."""
        request = resolve_news_request(theme, category, query)
        params: dict[str, Any] = {
            **request.params,
            "language": "en",
            "pageSize": page_size,
            "page": page,
            "sortBy": sort_by,
            "apiKey": self.api_key,
        }
        return await self._get_json(request.endpoint, params)
