"""OpenAI chat completions adapter, also used for OpenAI-compatible hosts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from aicli.domain.config import Configuration, OpenAICfg

from .base import (
    AdapterBackendError,
    AdapterResponseError,
    Payload,
    RequestLogger,
    Transport,
    build_messages,
    error_message,
    load_json,
    shot_messages,
)
from .http_utils import exchange

# Generation parameters forwarded only when configured.
_GENERATION_PARAMS = (
    "temperature",
    "top_p",
    "max_tokens",
    "seed",
    "frequency_penalty",
    "presence_penalty",
)


@dataclass
class OpenAIAdapter:
    """Adapter that sends chat interactions to a chat completions endpoint.

    ``section`` selects the configuration block, so the same adapter serves
    ``[openai]`` and the OpenAI-compatible ``[groq]`` settings.
    """

    config: Configuration
    name: str = "openai"
    section: str = "openai"
    label: str = "OpenAI"

    @property
    def settings(self) -> OpenAICfg:
        return self.config.section(self.section)

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
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.key}",
        }

    def build_request(self, prompt: str, history: Sequence[str]) -> Payload:
        messages = build_messages(
            system=self.config.system_prompt(),
            shots=shot_messages(self.config),
            history=history,
            prompt=prompt,
        )
        payload: Payload = {"model": self.settings.model}
        payload.update(self._runtime_params())
        payload["messages"] = messages
        return payload

    def parse_response(self, body: str) -> str:
        data = load_json(body, self.label)
        choices = data.get("choices") if isinstance(data, dict) else None
        if choices is None:
            raise AdapterBackendError(error_message(data, body))
        try:
            content = choices[0]["message"]["content"]
        except (IndexError, KeyError, TypeError) as exc:
            raise AdapterResponseError(f"{self.label} response did not include message content.") from exc
        if not isinstance(content, str):
            raise AdapterResponseError(f"{self.label} response content is not text.")
        return content

    # ------------------------------------------------------------------
    def _runtime_params(self) -> Dict[str, object]:
        params: Dict[str, object] = {}
        for key in _GENERATION_PARAMS:
            if self.config.is_set(self.section, key):
                params[key] = getattr(self.settings, key)
        return params


def groq_adapter(config: Configuration) -> OpenAIAdapter:
    return OpenAIAdapter(config, name="groq", section="groq", label="Groq")


__all__ = ["OpenAIAdapter", "groq_adapter"]
