"""
MarketLens

Market-data dashboard data layer: quotes, history, macro indicators, news
and AI narratives behind a read-through cache, served over MCP.
"""

__version__ = "1.0.0"
