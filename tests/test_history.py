"""History window selection and history store implementations."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from aicli.application.history import HistoryStore, ListHistory, ReadlineHistory, history_window


class _SparseHistory:
    def __init__(self, entries: List[Optional[str]]) -> None:
        self.entries = entries

    def length(self) -> int:
        return len(self.entries)

    def entry_at(self, index: int) -> Optional[str]:
        return self.entries[index]


class _FakeReadline:
    def __init__(self) -> None:
        self.items: List[str] = []

    def get_current_history_length(self) -> int:
        return len(self.items)

    def get_history_item(self, index: int) -> Optional[str]:
        if 1 <= index <= len(self.items):
            return self.items[index - 1]
        return None

    def add_history(self, entry: str) -> None:
        self.items.append(entry)


def test_window_is_most_recent_entries_oldest_first() -> None:
    store = ListHistory(["one", "two", "three", "four"])

    assert history_window(store, store.length(), 2) == ["three", "four"]


def test_window_stops_at_given_length() -> None:
    store = ListHistory(["one", "two", "three", "four"])

    assert history_window(store, 3, 2) == ["two", "three"]


def test_window_is_limited_by_available_history() -> None:
    store = ListHistory(["only"])

    assert history_window(store, 1, 5) == ["only"]
    assert history_window(store, 0, 5) == []


def test_zero_depth_yields_no_context() -> None:
    store = ListHistory(["one", "two"])

    assert history_window(store, 2, 0) == []


def test_absent_and_empty_entries_are_skipped() -> None:
    store = _SparseHistory(["a", None, "", "d"])

    assert history_window(store, 4, 4) == ["a", "d"]


def test_list_history_from_file(tmp_path: Path) -> None:
    path = tmp_path / "history"
    path.write_text("ls\ncd /tmp\n", encoding="utf-8")

    store = ListHistory.from_file(path)

    assert store.length() == 2
    assert store.entry_at(1) == "cd /tmp"
    assert store.entry_at(2) is None
    assert store.entry_at(-1) is None
    assert isinstance(store, HistoryStore)


def test_readline_history_uses_one_based_items() -> None:
    module = _FakeReadline()
    store = ReadlineHistory(module)
    store.append("first")
    store.append("second")

    assert store.length() == 2
    assert store.entry_at(0) == "first"
    assert store.entry_at(1) == "second"
    assert history_window(store, store.length(), 1) == ["second"]
