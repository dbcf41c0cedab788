"""Suggestion session binding one backend adapter for the process lifetime."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from aicli.domain.config import Configuration
from aicli.infrastructure.adapters import (
    AdapterError,
    AdapterUnavailable,
    BackendAdapter,
    RequestsTransport,
    Transport,
    create_adapter,
)
from aicli.infrastructure.config.validators import validate_configuration
from aicli.utils.logfile import RequestLog

from .history import HistoryStore, history_window


class FetchState(enum.Enum):
    PARSED_OK = "parsed_ok"
    PARSED_ERROR = "parsed_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch: the suggestion text or a diagnostic."""

    state: FetchState
    text: str | None = None
    diagnostic: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is FetchState.PARSED_OK


@dataclass
class SuggestionSession:
    """Context passed to every fetch in place of process-wide state."""

    config: Configuration
    adapter: BackendAdapter
    transport: Transport
    console: Console
    request_log: RequestLog | None = None
    last_response: Optional[str] = field(default=None, init=False)

    @classmethod
    def create(
        cls,
        config: Configuration,
        *,
        transport: Transport | None = None,
        console: Console | None = None,
    ) -> SuggestionSession:
        """Validate *config* and bind its backend for the session lifetime."""

        console = console or Console(stderr=True)
        validate_configuration(config)
        adapter = create_adapter(config)
        request_log = None
        if config.general.logfile:
            request_log = RequestLog(Path(config.general.logfile), timestamp=bool(config.general.timestamp))
        if config.general.verbose:
            console.print(f"API set to {adapter.name}", markup=False, highlight=False)
        return cls(
            config=config,
            adapter=adapter,
            transport=transport or RequestsTransport(),
            console=console,
            request_log=request_log,
        )

    # ------------------------------------------------------------------
    def fetch(self, prompt: str, history_length: int, store: HistoryStore) -> FetchResult:
        """Ask the backend for a suggestion; failures are reported, never raised."""

        self.last_response = None
        history = history_window(store, history_length, self.config.context_depth())
        if self.config.general.verbose:
            self.console.print(f"Contacting {self.adapter.name} API...", markup=False, highlight=False)

        try:
            text = self.adapter.send(
                prompt=prompt,
                history=history,
                transport=self.transport,
                request_log=self.request_log,
            )
        except AdapterUnavailable as exc:
            return self._failure(FetchState.TRANSPORT_ERROR, str(exc), "API call failed")
        except AdapterError as exc:
            return self._failure(FetchState.PARSED_ERROR, str(exc), "invocation error")
        except OSError as exc:
            return self._failure(FetchState.TRANSPORT_ERROR, str(exc), "request log failed")

        self.last_response = text
        return FetchResult(FetchState.PARSED_OK, text=text)

    def _failure(self, state: FetchState, diagnostic: str, what: str) -> FetchResult:
        self.console.print(f"\n[red]{self.adapter.name} {what}: {escape(diagnostic)}[/red]")
        return FetchResult(state, diagnostic=diagnostic)


__all__ = ["FetchState", "FetchResult", "SuggestionSession"]
