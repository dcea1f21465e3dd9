"""
MarketLens - Base HTTP Provider

Shared plumbing for the upstream market-data APIs:
- One httpx.AsyncClient per provider, created from ProviderConfig
- Transport and HTTP failures mapped onto the ProviderError family
- Transient failures retried with exponential backoff
"""

import logging
from abc import ABC
from typing import Any

import httpx

from ..config import ProviderConfig
from ..errors import (
    ProviderError,
    ProviderNotConfiguredError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from ..resilience import RetryConfig, with_retry

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """
    Base class for upstream JSON-over-HTTP providers.

    Subclasses set name, env_var and default_base_url and call _get_json.
    """

    name: str = "provider"
    env_var: str = ""
    default_base_url: str = ""

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            config: Provider configuration (api key, base url, timeout, retries)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.config = config
        self._retry = RetryConfig.for_provider(config)
        self._client = httpx.AsyncClient(
            base_url=config.base_url or self.default_base_url,
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def api_key(self) -> str:
        """The configured API key. Raises ProviderNotConfiguredError if unset."""
        if not self.config.api_key:
            raise ProviderNotConfiguredError(self.name, self.env_var)
        return self.config.api_key

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or response.reason_phrase)
        return response.reason_phrase

    async def _request(self, path: str, params: dict[str, Any]) -> Any | None:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.name, self.config.timeout) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                f"Error contacting {self.name}: {e}",
                details={"provider": self.name, "path": path, "transport_error": True},
            ) from e

        if response.status_code == 429:
            raise ProviderRateLimitError(self.name, self._error_message(response))

        if response.is_error:
            message = self._error_message(response)
            logger.error(
                f"{self.name} API error for {path}: {response.status_code} {message}",
                extra={"provider": self.name, "path": path, "status": response.status_code},
            )
            raise ProviderError(
                f"Failed to fetch from {self.name}: {message}",
                details={"provider": self.name, "path": path, "upstream_status": response.status_code},
                status_code=response.status_code if response.status_code >= 500 else 502,
            )

        if not response.text.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"Malformed response from {self.name}",
                details={"provider": self.name, "path": path, "error": str(e)},
            ) from e

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any | None:
        """
        GET a JSON document, retrying transient failures.

        Returns:
            Decoded JSON, or None for an empty body
        """
        return await with_retry(self._request, path, params, config=self._retry, label=f"{self.name} {path}")

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
        logger.debug(f"{self.name} client closed")
