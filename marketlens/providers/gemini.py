"""
Gemini Provider

Narrative generation through Google's Gemini API (google-genai SDK).
Generated text is never cached.
"""

import asyncio
import logging
import time
from typing import Any

from google import genai

from ..config import GeminiConfig
from ..errors import ProviderError, ProviderNotConfiguredError, ProviderRateLimitError, ProviderTimeoutError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Google Gemini text generation client."""

    name = "Gemini"
    env_var = "GEMINI_API_KEY"

    def __init__(self, config: GeminiConfig, client: Any | None = None) -> None:
        """
        Initialize Gemini client.

        Args:
            config: Gemini configuration
            client: Pre-built genai.Client (tests inject a mock here). When
                omitted, the SDK client is created on first use.
        """
        self.config = config
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.config.api_key:
                raise ProviderNotConfiguredError(self.name, self.env_var)
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    @staticmethod
    def _to_contents(prompt: str, history: list[dict[str, str]] | None) -> list[dict[str, Any]]:
        """Convert chat turns to Gemini contents. Gemini calls the assistant "model"."""
        contents: list[dict[str, Any]] = []
        for turn in history or []:
            role = "model" if turn.get("role") in ("assistant", "model") else "user"
            contents.append({"role": role, "parts": [{"text": turn.get("content", "")}]})
        contents.append({"role": "user", "parts": [{"text": prompt}]})
        return contents

    async def generate(self, prompt: str, history: list[dict[str, str]] | None = None) -> str:
        """
        Generate text for a prompt, optionally continuing a conversation.

        Raises:
            ProviderNotConfiguredError: GEMINI_API_KEY is not set
            ProviderTimeoutError: The request exceeded the configured timeout
            ProviderRateLimitError: Quota or rate limit hit
            ProviderError: Any other API failure
        """
        start_time = time.time()
        client = self.client

        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(
                    model=self.config.model,
                    contents=self._to_contents(prompt, history),
                ),
                timeout=self.config.timeout,
            )
        except TimeoutError as e:
            logger.error(
                f"Gemini API request timed out after {self.config.timeout}s",
                extra={"provider": self.name, "model": self.config.model, "timeout": self.config.timeout},
            )
            raise ProviderTimeoutError(self.name, self.config.timeout) from e
        except Exception as e:
            error_str = str(e).lower()
            if "rate limit" in error_str or "quota" in error_str or "resource_exhausted" in error_str:
                logger.warning("Gemini rate limit exceeded", extra={"provider": self.name, "model": self.config.model})
                raise ProviderRateLimitError(self.name) from e

            logger.error(
                f"Error calling Gemini API: {e}",
                extra={"provider": self.name, "model": self.config.model, "error": str(e)},
                exc_info=True,
            )
            raise ProviderError(
                f"Failed to generate insight from Gemini: {e}",
                details={"provider": self.name, "model": self.config.model, "error": str(e)},
            ) from e

        text = getattr(response, "text", None) or ""
        logger.info(
            "Gemini completion successful",
            extra={
                "provider": self.name,
                "model": self.config.model,
                "latency_ms": (time.time() - start_time) * 1000,
                "chars": len(text),
            },
        )
        return text

    async def close(self) -> None:
        """The SDK client needs no explicit cleanup."""
        logger.debug("Closed Gemini client", extra={"provider": self.name})
