"""
MarketLens - Configuration Schemas

Typed configuration models using Pydantic for validation and type safety.
All configuration is defined here and validated at startup.

- All config via environment variables (or a .env file)
- The Redis URL is the only switch for the networked cache backend
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Value shipped in the sample .env; treated as "not configured".
REDIS_URL_PLACEHOLDER = "your_upstash_redis_url_here"


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CacheConfig(BaseModel):
    """Cache configuration."""

    redis_url: str | None = Field(default=None, description="Redis connection URL (unset = in-process cache)")
    redis_socket_timeout: float = Field(default=5.0, gt=0, description="Redis socket timeout in seconds")

    @field_validator("redis_url")
    @classmethod
    def normalize_redis_url(cls, v: str | None) -> str | None:
        """Treat blank and placeholder URLs as unset."""
        if v is None:
            return None
        v = v.strip()
        if not v or v == REDIS_URL_PLACEHOLDER:
            return None
        return v

    @property
    def networked(self) -> bool:
        """Whether a networked backend is configured."""
        return self.redis_url is not None


class ProviderConfig(BaseModel):
    """Configuration for a single upstream HTTP provider."""

    api_key: str | None = Field(default=None, description="API key for the provider")
    base_url: str | None = Field(default=None, description="Custom base URL (optional)")
    timeout: float = Field(default=10.0, ge=1.0, description="Request timeout in seconds")
    max_retries: int = Field(default=2, ge=0, description="Maximum retry attempts for transient failures")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


class GeminiConfig(ProviderConfig):
    """Google Gemini configuration."""

    model: str = Field(default="gemma-3-27b-it", description="Model used for narrative summaries")
    timeout: float = Field(default=30.0, ge=1.0, description="Request timeout in seconds")


class ProvidersConfig(BaseModel):
    """Configuration for upstream data providers."""

    finnhub: ProviderConfig = Field(default_factory=ProviderConfig, description="Finnhub quotes and search")
    alpha_vantage: ProviderConfig = Field(default_factory=ProviderConfig, description="Alpha Vantage time series")
    fred: ProviderConfig = Field(default_factory=ProviderConfig, description="FRED macro series")
    newsapi: ProviderConfig = Field(default_factory=ProviderConfig, description="NewsAPI headlines")
    gemini: GeminiConfig = Field(default_factory=GeminiConfig, description="Gemini narrative generation")


class WatchlistConfig(BaseModel):
    """Watchlist storage configuration."""

    path: str = Field(default="./data/watchlist.json", description="JSON file holding the watchlist")


class MarketLensConfig(BaseModel):
    """Root configuration for MarketLens."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    cache: CacheConfig = Field(default_factory=CacheConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    watchlist: WatchlistConfig = Field(default_factory=WatchlistConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
