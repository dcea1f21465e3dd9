"""
MarketLens - Configuration Tests

Tests environment-driven configuration loading and validation.
"""

from pathlib import Path

import pytest

from marketlens.config import CacheConfig, MarketLensConfig, get_config, load_config, reload_config
from marketlens.errors import ConfigurationError

ENV_VARS = [
    "REDIS_URL",
    "UPSTASH_REDIS_URL",
    "REDIS_SOCKET_TIMEOUT",
    "FINNHUB_API_KEY",
    "FINNHUB_TIMEOUT",
    "ALPHA_VANTAGE_API_KEY",
    "FRED_API_KEY",
    "NEWS_API_KEY",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "WATCHLIST_PATH",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Strip MarketLens variables; return a path with no .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "missing.env"


class TestLoadConfig:
    """Test suite for load_config."""

    def test_defaults(self, clean_env: Path) -> None:
        """With nothing set the cache is in-process and providers are disabled."""
        config = load_config(env_file=str(clean_env), reload=True)

        assert isinstance(config, MarketLensConfig)
        assert config.environment == "test"
        assert config.cache.redis_url is None
        assert not config.cache.networked
        assert not config.providers.finnhub.enabled
        assert config.providers.gemini.model == "gemma-3-27b-it"
        assert config.watchlist.path == "./data/watchlist.json"

    def test_redis_url(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/0")

        config = load_config(env_file=str(clean_env), reload=True)
        assert config.cache.redis_url == "redis://cache:6379/0"
        assert config.cache.networked

    def test_upstash_url_fallback(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """UPSTASH_REDIS_URL is used when REDIS_URL is unset."""
        monkeypatch.setenv("UPSTASH_REDIS_URL", "rediss://default:pw@example.upstash.io:6379")

        config = load_config(env_file=str(clean_env), reload=True)
        assert config.cache.redis_url == "rediss://default:pw@example.upstash.io:6379"

    def test_placeholder_url_is_unset(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UPSTASH_REDIS_URL", "your_upstash_redis_url_here")

        config = load_config(env_file=str(clean_env), reload=True)
        assert not config.cache.networked

    def test_provider_keys(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FINNHUB_API_KEY", "fh-key")
        monkeypatch.setenv("NEWS_API_KEY", "news-key")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-2.0-flash")

        config = load_config(env_file=str(clean_env), reload=True)
        assert config.providers.finnhub.api_key == "fh-key"
        assert config.providers.newsapi.api_key == "news-key"
        assert config.providers.newsapi.enabled
        assert config.providers.gemini.model == "gemini-2.0-flash"

    def test_env_file_is_read(self, clean_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Variables from the .env file are applied."""
        # Registers FRED_API_KEY with monkeypatch so teardown removes the loaded value
        monkeypatch.setenv("FRED_API_KEY", "")
        env_file = tmp_path / ".env"
        env_file.write_text("FRED_API_KEY=fred-from-file\n")

        config = load_config(env_file=str(env_file), reload=True)
        assert config.providers.fred.api_key == "fred-from-file"

    def test_invalid_number_raises(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FINNHUB_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError):
            load_config(env_file=str(clean_env), reload=True)

    def test_invalid_value_raises(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDIS_SOCKET_TIMEOUT", "0")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(env_file=str(clean_env), reload=True)
        assert "validation_errors" in exc_info.value.details

    def test_memoized(self, clean_env: Path) -> None:
        first = load_config(env_file=str(clean_env), reload=True)
        assert load_config() is first

    def test_reload_picks_up_changed_env_file(
        self, clean_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GEMINI_MODEL", "")
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_MODEL=gemma-3-12b-it\n")
        first = load_config(env_file=str(env_file), reload=True)

        env_file.write_text("GEMINI_MODEL=gemini-2.0-flash\n")
        assert load_config() is first

        second = reload_config(env_file=str(env_file))
        assert second is not first
        assert second.providers.gemini.model == "gemini-2.0-flash"
        assert get_config() is second


class TestCacheConfig:
    def test_url_is_stripped(self) -> None:
        assert CacheConfig(redis_url="  redis://localhost:6379/0 ").redis_url == "redis://localhost:6379/0"

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            CacheConfig(redis_socket_timeout=0)
