"""AI suggestions for command-line editing."""

from __future__ import annotations

from aicli.application.history import HistoryStore, ListHistory, ReadlineHistory, history_window
from aicli.application.session import FetchResult, FetchState, SuggestionSession
from aicli.application.trigger import EditBuffer, QueryTrigger
from aicli.config_loader import ConfigError, Configuration, load_configuration, resolve_config

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Configuration",
    "EditBuffer",
    "FetchResult",
    "FetchState",
    "HistoryStore",
    "ListHistory",
    "QueryTrigger",
    "ReadlineHistory",
    "SuggestionSession",
    "history_window",
    "load_configuration",
    "resolve_config",
]
