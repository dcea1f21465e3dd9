"""
MarketLens - Cache Interface

Defines the abstract interface that cache backends implement and the
result type they report through.

Backends never raise for transport problems: every operation returns a
CacheResult, and a FAILURE result carries the captured error. The
ReadThroughCache decides what a failure means for the process.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import CacheSerializationError

# Millisecond wall clock; injectable so tests can move time forward.
Clock = Callable[[], float]


class CacheStatus(str, Enum):
    """Outcome of a single backend operation."""

    HIT = "hit"
    MISS = "miss"
    STORED = "stored"
    FAILURE = "failure"


@dataclass(frozen=True)
class CacheResult:
    """Result of a backend get/set."""

    status: CacheStatus
    value: Any = None
    error: BaseException | None = None

    @classmethod
    def hit(cls, value: Any) -> "CacheResult":
        return cls(CacheStatus.HIT, value)

    @classmethod
    def miss(cls) -> "CacheResult":
        return cls(CacheStatus.MISS)

    @classmethod
    def stored(cls) -> "CacheResult":
        return cls(CacheStatus.STORED)

    @classmethod
    def failure(cls, error: BaseException) -> "CacheResult":
        return cls(CacheStatus.FAILURE, error=error)

    @property
    def failed(self) -> bool:
        return self.status is CacheStatus.FAILURE


def encode_value(key: str, value: Any) -> str:
    """
    Serialize a value to the JSON wire format shared by all backends.

    Raises:
        CacheSerializationError: If the value is not JSON-compatible
    """
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise CacheSerializationError(key, type(value).__name__, str(e)) from e


def decode_value(payload: str | bytes) -> Any:
    """Deserialize a stored payload. Raises ValueError on malformed data."""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    return json.loads(payload)


class CacheBackend(ABC):
    """
    Abstract base class for cache backends.

    Values arrive already encoded (see encode_value) so every backend stores
    the same JSON payload and callers always get a fresh decoded copy back.
    """

    name: str = "abstract"

    @abstractmethod
    async def get(self, key: str) -> CacheResult:
        """
        Look up a key.

        Returns:
            HIT with the decoded value, MISS if absent or expired,
            FAILURE if the backend could not answer
        """

    @abstractmethod
    async def set(self, key: str, payload: str, ttl_ms: int) -> CacheResult:
        """
        Store an encoded payload for ttl_ms milliseconds.

        Returns:
            STORED on success, FAILURE if the backend could not store it
        """

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Get backend statistics (hits, misses, sets, failures, ...)."""

    async def close(self) -> None:
        """Release backend resources. Default is a no-op."""
