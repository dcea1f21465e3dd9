"""
MarketLens - Tool Input Validation Schemas

Pydantic models for validating all MCP tool inputs.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

NewsTheme = Literal["business", "technology", "political", "geopolitical", "economics", "general"]
NewsSort = Literal["popularity", "publishedAt", "relevancy"]


class NoInput(BaseModel):
    """Input validation for tools without parameters."""

    pass


class StockSymbolInput(BaseModel):
    """Input validation for tools keyed by a ticker symbol."""

    symbol: str = Field(..., min_length=1, max_length=20, description="Ticker symbol, e.g. AAPL")

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Strip whitespace and upper-case the symbol."""
        v = v.strip().upper()
        if not v:
            raise ValueError("Symbol cannot be empty or only whitespace")
        return v


class SearchSymbolsInput(BaseModel):
    """Input validation for search_symbols tool."""

    keywords: str = Field(..., max_length=100, description="Company name or ticker fragment")


class MacroIndicatorInput(BaseModel):
    """Input validation for get_macro_indicator tool."""

    indicator: Literal["CPI", "GDP", "FEDERAL_FUNDS_RATE", "UNEMPLOYMENT"] = Field(
        ..., description="Macro indicator name"
    )


class NewsInput(BaseModel):
    """Input validation for get_news tool."""

    theme: NewsTheme | None = Field(default=None, description="News theme (takes precedence)")
    category: str | None = Field(default=None, max_length=50, description="NewsAPI category")
    query: str | None = Field(default=None, max_length=500, description="Free-text query")
    page: int = Field(default=1, ge=1, le=100, description="Page number")
    page_size: int = Field(default=10, ge=1, le=100, description="Results per page")
    sort_by: NewsSort = Field(default="popularity", description="Sort order")


class ChatTurn(BaseModel):
    """One prior conversation turn."""

    role: Literal["user", "assistant", "model"]
    content: str = Field(..., max_length=20_000)


class ChatInput(BaseModel):
    """Input validation for chat tool."""

    message: str = Field(..., min_length=1, max_length=10_000, description="User message")
    history: list[ChatTurn] = Field(default_factory=list, max_length=50, description="Prior turns, oldest first")

    @field_validator("message")
    @classmethod
    def validate_message_not_empty(cls, v: str) -> str:
        """Ensure message is not just whitespace."""
        if not v.strip():
            raise ValueError("Message cannot be empty or only whitespace")
        return v
