"""Anthropic Messages API adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from aicli.domain.config import AnthropicCfg, Configuration

from .base import (
    AdapterBackendError,
    AdapterResponseError,
    Message,
    Payload,
    RequestLogger,
    Transport,
    error_message,
    load_json,
    make_message,
    shot_messages,
)
from .http_utils import exchange

ACKNOWLEDGEMENT = "OK"
CONTEXT_EXPLANATION = (
    "Before my final prompt to which I expect a reply, I am also supplying you as "
    "context with one or more previously issued commands, to which you simply reply OK"
)

_GENERATION_PARAMS = ("temperature", "top_k", "top_p")


def context_messages(history: Sequence[str]) -> List[Message]:
    """Return *history* as alternating user/assistant turns.

    The API rejects consecutive turns with the same role, so each entry is
    answered with a fixed acknowledgement, and the first one is preceded by an
    explanation that these turns are context only. That explanation is answered
    too, so a non-empty history yields one more acknowledgement than entries.
    """

    messages: List[Message] = []
    for entry in history:
        if not messages:
            messages.append(make_message("user", CONTEXT_EXPLANATION))
            messages.append(make_message("assistant", ACKNOWLEDGEMENT))
        messages.append(make_message("user", entry))
        messages.append(make_message("assistant", ACKNOWLEDGEMENT))
    return messages


@dataclass
class AnthropicAdapter:
    """Adapter that sends requests to the Anthropic Messages API."""

    config: Configuration
    name: str = "anthropic"

    @property
    def settings(self) -> AnthropicCfg:
        return self.config.anthropic

    # ------------------------------------------------------------------
    def send(
        self,
        *,
        prompt: str,
        history: Sequence[str],
        transport: Transport,
        request_log: RequestLogger | None = None,
    ) -> str:
        payload = self.build_request(prompt, history)
        body = exchange(
            self.settings.endpoint or "",
            self.headers(),
            payload,
            transport=transport,
            request_log=request_log,
        )
        return self.parse_response(body)

    def headers(self) -> Dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self.settings.key or "",
            "anthropic-version": self.settings.version or "",
        }

    def build_request(self, prompt: str, history: Sequence[str]) -> Payload:
        messages = shot_messages(self.config)
        messages.extend(context_messages(history))
        messages.append(make_message("user", prompt))

        payload: Payload = {
            "model": self.settings.model,
            "max_tokens": self.settings.max_tokens,
            "system": self.config.system_prompt(),
        }
        for key in _GENERATION_PARAMS:
            if self.config.is_set("anthropic", key):
                payload[key] = getattr(self.settings, key)
        payload["messages"] = messages
        return payload

    def parse_response(self, body: str) -> str:
        data = load_json(body, "Anthropic")
        content = data.get("content") if isinstance(data, dict) else None
        if content is None:
            raise AdapterBackendError(error_message(data, body))
        try:
            text = content[0]["text"]
        except (IndexError, KeyError, TypeError) as exc:
            raise AdapterResponseError("Anthropic response did not include text content.") from exc
        if not isinstance(text, str):
            raise AdapterResponseError("Anthropic response content is not text.")
        return text


__all__ = ["ACKNOWLEDGEMENT", "CONTEXT_EXPLANATION", "AnthropicAdapter", "context_messages"]
