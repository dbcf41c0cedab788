"""Adapter registry for backend selection."""

from __future__ import annotations

from typing import Callable, Dict

from aicli.domain.config import ConfigError, Configuration

from .anthropic_adapt import AnthropicAdapter
from .base import BackendAdapter
from .hal_adapt import HalAdapter
from .llamacpp_adapt import LlamaCppAdapter
from .openai_adapt import OpenAIAdapter, groq_adapter

REGISTRY: Dict[str, Callable[[Configuration], BackendAdapter]] = {
    "openai": lambda cfg: OpenAIAdapter(cfg),
    "groq": groq_adapter,
    "anthropic": lambda cfg: AnthropicAdapter(cfg),
    "llamacpp": lambda cfg: LlamaCppAdapter(cfg),
    "hal": lambda cfg: HalAdapter(cfg),
}


def create_adapter(config: Configuration) -> BackendAdapter:
    """Instantiate the adapter named by ``general.api``."""

    api = config.general.api
    if not api:
        raise ConfigError("Missing api value in [general] configuration section.")
    try:
        factory = REGISTRY[api]
    except KeyError as exc:
        raise ConfigError(f"Unsupported API: [{api}].") from exc
    return factory(config)


__all__ = ["REGISTRY", "create_adapter"]
