"""
MarketLens - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    REDIS_URL_PLACEHOLDER,
    CacheConfig,
    Environment,
    GeminiConfig,
    LogLevel,
    MarketLensConfig,
    ProviderConfig,
    ProvidersConfig,
    WatchlistConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "MarketLensConfig",
    # Enums
    "Environment",
    "LogLevel",
    # Config sections
    "CacheConfig",
    "ProviderConfig",
    "GeminiConfig",
    "ProvidersConfig",
    "WatchlistConfig",
    "REDIS_URL_PLACEHOLDER",
]
