"""Public entry points for configuration handling."""

from __future__ import annotations

from aicli.domain.config import (
    NPROMPTS,
    AnthropicCfg,
    BindingCfg,
    ConfigError,
    Configuration,
    GeneralCfg,
    LlamaCppCfg,
    OpenAICfg,
    PromptCfg,
    PromptProfile,
)
from aicli.infrastructure.config.loader import (
    default_sources,
    load_configuration,
    read_file_config,
    resolve_config,
)
from aicli.infrastructure.config.validators import validate_configuration

__all__ = [
    "NPROMPTS",
    "ConfigError",
    "Configuration",
    "GeneralCfg",
    "OpenAICfg",
    "AnthropicCfg",
    "LlamaCppCfg",
    "BindingCfg",
    "PromptCfg",
    "PromptProfile",
    "default_sources",
    "resolve_config",
    "read_file_config",
    "load_configuration",
    "validate_configuration",
]
