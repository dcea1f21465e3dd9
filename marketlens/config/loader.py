"""
MarketLens - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Memoizes the loaded configuration; the server passes it on explicitly.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import MarketLensConfig

logger = logging.getLogger(__name__)

_config_instance: MarketLensConfig | None = None


def _provider(prefix: str, default_base_url: str) -> dict[str, object]:
    return {
        "api_key": os.getenv(f"{prefix}_API_KEY") or None,
        "base_url": os.getenv(f"{prefix}_BASE_URL", default_base_url),
        "timeout": float(os.getenv(f"{prefix}_TIMEOUT", "10.0")),
        "max_retries": int(os.getenv(f"{prefix}_MAX_RETRIES", "2")),
    }


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> MarketLensConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated MarketLensConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        # UPSTASH_REDIS_URL is accepted for deployments configured for Upstash
        redis_url = os.getenv("REDIS_URL") or os.getenv("UPSTASH_REDIS_URL")

        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "cache": {
                "redis_url": redis_url,
                "redis_socket_timeout": float(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            },
            "providers": {
                "finnhub": _provider("FINNHUB", "https://finnhub.io/api/v1"),
                "alpha_vantage": _provider("ALPHA_VANTAGE", "https://www.alphavantage.co"),
                "fred": _provider("FRED", "https://api.stlouisfed.org/fred"),
                "newsapi": _provider("NEWS", "https://newsapi.org/v2"),
                "gemini": {
                    "api_key": os.getenv("GEMINI_API_KEY") or None,
                    "model": os.getenv("GEMINI_MODEL", "gemma-3-27b-it"),
                    "timeout": float(os.getenv("GEMINI_TIMEOUT", "30.0")),
                    "max_retries": int(os.getenv("GEMINI_MAX_RETRIES", "0")),
                },
            },
            "watchlist": {
                "path": os.getenv("WATCHLIST_PATH", "./data/watchlist.json"),
            },
        }
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid numeric value in environment: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = MarketLensConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment})",
            extra={
                "environment": _config_instance.environment,
                "cache_networked": _config_instance.cache.networked,
            },
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors()},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> MarketLensConfig:
    """Get the current configuration, loading it on first access."""
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> MarketLensConfig:
    """Force reload configuration."""
    return load_config(env_file=env_file, reload=True)
