"""
MarketLens - Watchlist Store

The user's watchlist: an ordered list of symbols kept in a small JSON file
under the key "marketlens_watchlist". An unreadable or missing file reads
as an empty list.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

WATCHLIST_STORAGE_KEY = "marketlens_watchlist"


class WatchlistStore:
    """File-backed watchlist."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> list[str]:
        try:
            if not self.path.exists():
                return []
            payload = json.loads(self.path.read_text())
        except (OSError, ValueError) as exc:
            logger.warning("Watchlist: failed to read %s: %s", self.path, exc)
            return []
        symbols = payload.get(WATCHLIST_STORAGE_KEY) if isinstance(payload, dict) else None
        return [s for s in symbols if isinstance(s, str)] if isinstance(symbols, list) else []

    def _save(self, symbols: list[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Atomic replace: an interrupted write leaves the previous file in place
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump({WATCHLIST_STORAGE_KEY: symbols}, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self) -> list[str]:
        """Current watchlist."""
        with self._lock:
            return self._load()

    def add(self, symbol: str) -> list[str]:
        """Add a symbol if not already present; returns the updated list."""
        with self._lock:
            symbols = self._load()
            if symbol not in symbols:
                symbols.append(symbol)
                self._save(symbols)
            return symbols

    def remove(self, symbol: str) -> list[str]:
        """Remove a symbol; returns the updated list."""
        with self._lock:
            symbols = [s for s in self._load() if s != symbol]
            self._save(symbols)
            return symbols

    def contains(self, symbol: str) -> bool:
        return symbol in self.get()
