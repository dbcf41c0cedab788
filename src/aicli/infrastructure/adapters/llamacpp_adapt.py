"""llama.cpp server completion adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from aicli.domain.config import Configuration, LlamaCppCfg

from .base import (
    AdapterBackendError,
    AdapterResponseError,
    Payload,
    RequestLogger,
    Transport,
    load_json,
)
from .http_utils import exchange

ASSISTANT_MARKER = "Assistant: "

# Sent only when configured, in the order the server documents them.
_GENERATION_PARAMS = (
    "temperature",
    "top_k",
    "top_p",
    "n_predict",
    "n_keep",
    "tfs_z",
    "typical_p",
    "repeat_penalty",
    "repeat_last_n",
    "penalize_nl",
    "presence_penalty",
    "frequency_penalty",
    "mirostat",
    "mirostat_tau",
    "mirostat_eta",
    "seed",
)

_ROLE_LABELS = {"user": "User", "assistant": "Assistant"}


def _line(role: str, text: str | None) -> str:
    if not text:
        return ""
    return f"{role}: {text}\n"


@dataclass
class LlamaCppAdapter:
    """Adapter for the llama.cpp ``/completion`` endpoint.

    The server takes a single prompt string, so the conversation is flattened
    into ``Role: text`` lines and the model is expected to continue with an
    ``Assistant:`` line.
    """

    config: Configuration
    name: str = "llamacpp"

    @property
    def settings(self) -> LlamaCppCfg:
        return self.config.llamacpp

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
            {"Content-Type": "application/json"},
            payload,
            transport=transport,
            request_log=request_log,
        )
        return self.parse_response(body)

    def flatten(self, prompt: str, history: Sequence[str]) -> str:
        lines: List[str] = [f"{self.config.system_prompt()}\n"]
        for role, text in self.config.shots():
            lines.append(_line(_ROLE_LABELS[role], text))
        for entry in history:
            lines.append(_line("Command", entry))
        lines.append(_line("User", prompt))
        return "".join(lines)

    def build_request(self, prompt: str, history: Sequence[str]) -> Payload:
        payload: Payload = {"prompt": self.flatten(prompt, history)}
        payload.update(self._runtime_params())
        payload["stop"] = []
        return payload

    def parse_response(self, body: str) -> str:
        data = load_json(body, "llama.cpp")
        content = data.get("content") if isinstance(data, dict) else None
        if content is None:
            raise AdapterBackendError(f"llama.cpp invocation error: {body}")
        if not isinstance(content, str):
            raise AdapterResponseError("llama.cpp response content is not text.")

        # Only the first generated line is the answer; the model tends to continue the dialogue.
        first_line = content.split("\n", 1)[0]
        if not first_line.startswith(ASSISTANT_MARKER):
            raise AdapterResponseError("llama.cpp did not provide a suitable response.")
        return first_line[len(ASSISTANT_MARKER):]

    # ------------------------------------------------------------------
    def _runtime_params(self) -> Dict[str, object]:
        params: Dict[str, object] = {}
        for key in _GENERATION_PARAMS:
            if self.config.is_set("llamacpp", key):
                params[key] = getattr(self.settings, key)
        return params


__all__ = ["ASSISTANT_MARKER", "LlamaCppAdapter"]
