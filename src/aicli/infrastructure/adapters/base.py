"""Core adapter protocol and helper utilities."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Literal, Mapping, Protocol, Sequence, runtime_checkable

from aicli.domain.config import Configuration

Role = Literal["system", "user", "assistant"]
Message = Dict[str, str]
Payload = Dict[str, Any]


class AdapterError(Exception):
    """Base class for failures inside a backend adapter."""


class AdapterUnavailable(AdapterError):
    """Raised when the backend cannot be reached."""


class AdapterResponseError(AdapterError):
    """Raised when a response body is not in the expected shape."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class AdapterBackendError(AdapterError):
    """Raised when the backend reports an error in its response."""


class Transport(Protocol):
    """HTTP exchange collaborator."""

    def send(self, url: str, headers: Mapping[str, str], body: str) -> str:
        """POST *body* to *url* and return the response body."""


class RequestLogger(Protocol):
    def write(self, message: str) -> None:
        """Record a request or response body."""


@runtime_checkable
class BackendAdapter(Protocol):
    """Interface shared by every backend.

    Adapters own the request and response formats of their backend; the
    network exchange is delegated to a :class:`Transport`.
    """

    name: str

    def build_request(self, prompt: str, history: Sequence[str]) -> Payload:
        """Return the request body for *prompt* with *history* as context."""

    def parse_response(self, body: str) -> str:
        """Return the suggestion text contained in *body*."""

    def send(
        self,
        *,
        prompt: str,
        history: Sequence[str],
        transport: Transport,
        request_log: RequestLogger | None = None,
    ) -> str:
        """Obtain a suggestion for *prompt* and return its text."""


def make_message(role: Role, content: str) -> Message:
    """Create a chat message dictionary."""

    return {"role": role, "content": content}


def shot_messages(config: Configuration) -> List[Message]:
    """Return the program's example turns as chat messages."""

    return [make_message(role, text) for role, text in config.shots()]  # type: ignore[arg-type]


def build_messages(
    *,
    system: str | None,
    shots: Iterable[Message],
    history: Iterable[str],
    prompt: str,
) -> List[Message]:
    """Create a message list suitable for chat APIs.

    History entries are sent as user turns between the examples and the prompt.
    """

    messages: List[Message] = []
    if system:
        messages.append(make_message("system", system))
    messages.extend(shots)
    for entry in history:
        messages.append(make_message("user", entry))
    messages.append(make_message("user", prompt))
    return messages


def load_json(body: str, backend: str) -> Any:
    """Parse a response body, reporting the parser location on failure."""

    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise AdapterResponseError(
            f"{backend} JSON error: on line {exc.lineno}: {exc.msg}", line=exc.lineno
        ) from exc


def error_message(data: Any, body: str) -> str:
    """Return the message of an ``{"error": {"message": ...}}`` payload, else *body*."""

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return body


__all__ = [
    "Role",
    "Message",
    "Payload",
    "AdapterError",
    "AdapterUnavailable",
    "AdapterResponseError",
    "AdapterBackendError",
    "Transport",
    "RequestLogger",
    "BackendAdapter",
    "make_message",
    "shot_messages",
    "build_messages",
    "load_json",
    "error_message",
]
