"""
MarketLens - Validation Decorators

Decorators that validate MCP tool inputs with Pydantic and turn failures
into structured error responses.

- validate_input validates kwargs against a schema before the tool runs
- MarketLensError raised by the tool becomes a structured error response
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from ..errors import ErrorCode, MarketLensError, extract_error_code, make_error_response

logger = logging.getLogger(__name__)


def _validation_errors(error: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": " -> ".join(str(loc) for loc in item["loc"]),
            "message": item["msg"],
            "type": item["type"],
        }
        for item in error.errors()
    ]


def validate_input(
    schema: type[BaseModel],
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """
    Decorator to validate tool inputs using a Pydantic schema.

    Example:
        >>> @validate_input(StockSymbolInput)
        ... async def get_stock_quote(symbol: str) -> dict:
        ...     ...

    Error Response:
        {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Input validation failed",
            "details": {
                "validation_errors": [
                    {"field": "symbol", "message": "String should have at least 1 character", "type": "string_too_short"}
                ],
                "function": "get_stock_quote"
            }
        }
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                validated = schema(**kwargs)
            except ValidationError as e:
                validation_errors = _validation_errors(e)
                logger.warning(
                    f"Input validation failed for {func.__name__}",
                    extra={"function": func.__name__, "validation_errors": validation_errors},
                )
                return make_error_response(
                    error_code=ErrorCode.INVALID_INPUT,
                    message="Input validation failed",
                    context={"validation_errors": validation_errors, "function": func.__name__},
                )

            try:
                return await func(*args, **validated.model_dump(exclude_unset=False))
            except MarketLensError as e:
                logger.warning(
                    f"{func.__name__} failed: {e.message}",
                    extra={"function": func.__name__, "error_type": type(e).__name__, "details": e.details},
                )
                return make_error_response(
                    error_code=extract_error_code(e),
                    message=e.message,
                    context={**e.details, "status_code": e.status_code},
                )
            except Exception as e:
                logger.error(
                    f"Unexpected error in {func.__name__}: {e}",
                    extra={"function": func.__name__, "error": str(e), "error_type": type(e).__name__},
                    exc_info=True,
                )
                return make_error_response(
                    error_code=ErrorCode.INTERNAL_ERROR,
                    message="Internal server error.",
                    context={"function": func.__name__},
                )

        return async_wrapper

    return decorator
