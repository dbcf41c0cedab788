"""Adapter interfaces and runtime registry."""

from __future__ import annotations

from .anthropic_adapt import AnthropicAdapter
from .base import (
    AdapterBackendError,
    AdapterError,
    AdapterResponseError,
    AdapterUnavailable,
    BackendAdapter,
    Message,
    Role,
    Transport,
    build_messages,
    make_message,
    shot_messages,
)
from .hal_adapt import HAL_RESPONSE, HalAdapter
from .http_utils import RequestsTransport, exchange
from .llamacpp_adapt import LlamaCppAdapter
from .openai_adapt import OpenAIAdapter, groq_adapter
from .registry import REGISTRY, create_adapter

__all__ = [
    "AdapterError",
    "AdapterUnavailable",
    "AdapterResponseError",
    "AdapterBackendError",
    "BackendAdapter",
    "Transport",
    "Message",
    "Role",
    "build_messages",
    "make_message",
    "shot_messages",
    "RequestsTransport",
    "exchange",
    "HAL_RESPONSE",
    "HalAdapter",
    "OpenAIAdapter",
    "groq_adapter",
    "AnthropicAdapter",
    "LlamaCppAdapter",
    "REGISTRY",
    "create_adapter",
]
