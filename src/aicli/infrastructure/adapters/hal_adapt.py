"""Offline adapter that always declines, for testing without network access."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from aicli.domain.config import Configuration

from .base import Payload, RequestLogger, Transport

HAL_RESPONSE = "# I'm sorry, Dave. I'm afraid I can't do that."


@dataclass(frozen=True)
class HalAdapter:
    """Adapter that returns a fixed response whatever it is asked."""

    config: Configuration | None = None
    name: str = "hal"

    def send(
        self,
        *,
        prompt: str,
        history: Sequence[str],
        transport: Transport,
        request_log: RequestLogger | None = None,
    ) -> str:
        return HAL_RESPONSE

    def build_request(self, prompt: str, history: Sequence[str]) -> Payload:
        return {}

    def parse_response(self, body: str) -> str:
        return HAL_RESPONSE


__all__ = ["HAL_RESPONSE", "HalAdapter"]
