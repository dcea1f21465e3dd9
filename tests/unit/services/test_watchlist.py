"""
MarketLens - Watchlist Store Tests
"""

import json
from pathlib import Path

import pytest

from marketlens.services import WatchlistStore
from marketlens.services.watchlist import WATCHLIST_STORAGE_KEY


class TestWatchlistStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert WatchlistStore(tmp_path / "watchlist.json").get() == []

    def test_add_keeps_order_without_duplicates(self, tmp_path: Path) -> None:
        store = WatchlistStore(tmp_path / "watchlist.json")

        store.add("AAPL")
        store.add("MSFT")
        assert store.add("AAPL") == ["AAPL", "MSFT"]
        assert store.contains("MSFT")

    def test_remove(self, tmp_path: Path) -> None:
        store = WatchlistStore(tmp_path / "watchlist.json")
        store.add("AAPL")
        store.add("MSFT")

        assert store.remove("AAPL") == ["MSFT"]
        assert not store.contains("AAPL")
        assert store.remove("TSLA") == ["MSFT"]

    def test_persisted_under_storage_key(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "watchlist.json"
        WatchlistStore(path).add("SPY")

        assert json.loads(path.read_text()) == {WATCHLIST_STORAGE_KEY: ["SPY"]}
        assert WatchlistStore(path).get() == ["SPY"]

    def test_corrupt_file_reads_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "watchlist.json"
        path.write_text("{not json")

        store = WatchlistStore(path)
        assert store.get() == []
        assert store.add("QQQ") == ["QQQ"]

    def test_unexpected_shape_reads_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "watchlist.json"
        path.write_text(json.dumps(["AAPL"]))

        assert WatchlistStore(path).get() == []

    def test_failed_write_keeps_previous_list(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "watchlist.json"
        store = WatchlistStore(path)
        store.add("AAPL")

        def _fail(src: str, dst: Path) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("marketlens.services.watchlist.os.replace", _fail)
        with pytest.raises(OSError):
            store.add("MSFT")
        monkeypatch.undo()

        assert store.get() == ["AAPL"]
        assert [p.name for p in tmp_path.iterdir()] == ["watchlist.json"]
