"""
MarketLens - Core Error Types

Defines the exception hierarchy for the MarketLens runtime.
All exceptions inherit from MarketLensError for consistent error handling.

- ErrorCode enum for structured tool responses
- Cache errors (only serialization failures ever reach callers)
- Provider errors for the upstream market-data and AI APIs
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for MCP tool responses.

    Used for structured error handling and client-side error recovery.
    """

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Provider errors
    PROVIDER_ERROR = "PROVIDER_ERROR"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    PROVIDER_NOT_CONFIGURED = "PROVIDER_NOT_CONFIGURED"
    RATE_LIMITED = "RATE_LIMITED"
    NOT_FOUND = "NOT_FOUND"

    # Cache errors
    CACHE_FAILURE = "CACHE_FAILURE"

    # Internal errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MarketLensError(Exception):
    """Base exception for all MarketLens errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(MarketLensError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class ValidationError(MarketLensError):
    """Raised when caller input is invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=400)


class NotFoundError(MarketLensError):
    """Raised when an upstream resource has no data."""

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} not found or no data for {identifier}"
        super().__init__(message, {"resource": resource, "identifier": identifier}, status_code=404)


class CacheError(MarketLensError):
    """Base exception for cache-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class CacheSerializationError(CacheError):
    """Raised when a value cannot be encoded for the cache."""

    def __init__(self, key: str, value_type: str, error: str):
        super().__init__(
            f"Value for cache key '{key}' is not JSON-serializable: {error}",
            details={"key": key, "value_type": value_type, "error": error},
        )


class ProviderError(MarketLensError):
    """Raised when an upstream provider call fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 502,
    ):
        super().__init__(message, details, status_code=status_code)


class ProviderTimeoutError(ProviderError):
    """Raised when an upstream provider request times out."""

    def __init__(self, provider: str, timeout: float):
        message = f"Provider {provider} timed out after {timeout}s"
        super().__init__(message, {"provider": provider, "timeout": timeout}, status_code=504)


class ProviderRateLimitError(ProviderError):
    """Raised when an upstream provider rejects a request for quota reasons."""

    def __init__(self, provider: str, message: str | None = None):
        super().__init__(
            message or f"Rate limit exceeded for provider {provider}",
            {"provider": provider},
            status_code=429,
        )


class ProviderNotConfiguredError(ProviderError):
    """Raised when a provider is used without an API key."""

    def __init__(self, provider: str, env_var: str):
        super().__init__(
            f"{provider} API key not configured. Set {env_var}.",
            {"provider": provider, "env": env_var},
            status_code=500,
        )


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response for MCP tools.

    Args:
        error_code: Standard error code
        message: Human-readable error message
        context: Additional context/details

    Returns:
        Standardized error response dictionary

    Example:
        >>> make_error_response(ErrorCode.NOT_FOUND, "Stock not found", {"symbol": "ZZZZ"})
        {'success': False, 'error_code': 'NOT_FOUND', 'message': 'Stock not found', 'details': {'symbol': 'ZZZZ'}}
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }


def is_retryable_error(error: Exception) -> bool:
    """
    Check if an error is transient and should be retried.

    Timeouts and upstream 5xx responses are retried. Rate limits are not:
    provider quotas reset on the provider's schedule, not ours.
    """
    if isinstance(error, ProviderTimeoutError):
        return True

    if isinstance(error, ProviderRateLimitError | ProviderNotConfiguredError):
        return False

    if isinstance(error, ProviderError):
        upstream_status = error.details.get("upstream_status")
        if upstream_status in (500, 502, 503, 504):
            return True
        return bool(error.details.get("transport_error"))

    return False


def extract_error_code(error: Exception) -> ErrorCode:
    """Extract the ErrorCode matching an exception."""
    if isinstance(error, ValidationError):
        return ErrorCode.INVALID_INPUT
    if isinstance(error, NotFoundError):
        return ErrorCode.NOT_FOUND
    if isinstance(error, ProviderTimeoutError):
        return ErrorCode.PROVIDER_TIMEOUT
    if isinstance(error, ProviderRateLimitError):
        return ErrorCode.RATE_LIMITED
    if isinstance(error, ProviderNotConfiguredError):
        return ErrorCode.PROVIDER_NOT_CONFIGURED
    if isinstance(error, ProviderError):
        return ErrorCode.PROVIDER_ERROR
    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE
    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR
    return ErrorCode.INTERNAL_ERROR
