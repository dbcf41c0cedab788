"""Editor action that replaces the edited line with an AI suggestion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from .history import HistoryStore
from .session import FetchResult, SuggestionSession


class EditBuffer(Protocol):
    """The line being edited in the host editor."""

    def text(self) -> str:
        """Return the current buffer contents."""

    def replace(self, text: str) -> None:
        """Replace the buffer contents with *text*."""


@dataclass
class QueryTrigger:
    """Zero-argument action bound to the editor's query key."""

    session: SuggestionSession
    buffer: EditBuffer
    store: HistoryStore
    record_history: Optional[Callable[[str], None]] = None

    def __call__(self) -> bool:
        prompt = self.buffer.text()
        history_length = self.store.length()
        self._echo_prompt(prompt)
        result = self.session.fetch(prompt, history_length, self.store)
        if not result.ok:
            return False
        self.buffer.replace(self.suggestion_text(result))
        return True

    def suggestion_text(self, result: FetchResult) -> str:
        prefix = self.session.config.general.response_prefix
        text = result.text or ""
        if prefix is not None:
            return f"{prefix} {text}"
        return text

    def _echo_prompt(self, prompt: str) -> None:
        # Echoed prompts are stored commented out.
        if self.record_history is None or not prompt:
            return
        comment = self.session.config.comment_prefix()
        self.record_history(f"{comment} {prompt}" if comment is not None else prompt)


__all__ = ["EditBuffer", "QueryTrigger"]
