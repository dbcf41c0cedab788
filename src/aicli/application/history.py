"""Read-only window over the interactive history."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class HistoryStore(Protocol):
    """Minimal read interface of a command history."""

    def length(self) -> int:
        """Return the number of entries."""

    def entry_at(self, index: int) -> Optional[str]:
        """Return the entry at 0-based *index*, or None when absent."""


def history_window(store: HistoryStore, history_length: int, depth: int) -> List[str]:
    """Return the *depth* most recent entries before *history_length*, oldest first.

    Absent and empty entries are skipped rather than replaced, so the window may
    hold fewer than *depth* items.
    """

    window: List[str] = []
    for offset in range(depth - 1, -1, -1):
        index = history_length - 1 - offset
        if index < 0:
            continue
        entry = store.entry_at(index)
        if entry:
            window.append(entry)
    return window


@dataclass
class ListHistory:
    """In-memory history, optionally seeded from a history file."""

    entries: List[str] = field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path) -> ListHistory:
        text = path.read_text(encoding="utf-8", errors="replace")
        return cls(entries=text.splitlines())

    def length(self) -> int:
        return len(self.entries)

    def entry_at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def append(self, entry: str) -> None:
        self.entries.append(entry)


class ReadlineHistory:
    """History store backed by the GNU readline module."""

    def __init__(self, module: Any = None) -> None:
        if module is None:  # pragma: no cover - readline is missing on some platforms
            import readline as module
        self._readline = module

    def length(self) -> int:
        return self._readline.get_current_history_length()

    def entry_at(self, index: int) -> Optional[str]:
        # readline numbers history items from 1
        return self._readline.get_history_item(index + 1)

    def append(self, entry: str) -> None:
        self._readline.add_history(entry)


__all__ = ["HistoryStore", "history_window", "ListHistory", "ReadlineHistory"]
