"""
MarketLens - Input Validation Module

Pydantic-based validation for MCP tool inputs.
"""

from .decorators import validate_input
from .tool_schemas import (
    ChatInput,
    ChatTurn,
    MacroIndicatorInput,
    NewsInput,
    NoInput,
    SearchSymbolsInput,
    StockSymbolInput,
)

__all__ = [
    # Decorator
    "validate_input",
    # Tool input schemas
    "NoInput",
    "StockSymbolInput",
    "SearchSymbolsInput",
    "MacroIndicatorInput",
    "NewsInput",
    "ChatTurn",
    "ChatInput",
]
