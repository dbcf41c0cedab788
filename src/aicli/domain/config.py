"""Domain models representing the resolved configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional, Tuple

# Number of supported n-shot prompts
NPROMPTS = 3

Shot = Tuple[str, str]
SlotValues = Tuple[Optional[str], ...]


class ConfigError(Exception):
    """Raised when configuration sources fail parsing or validation."""

    def __init__(self, message: str, *, markup: bool = False) -> None:
        super().__init__(message)
        self.markup = markup


@dataclass(frozen=True, kw_only=True)
class GeneralCfg:
    api: str | None = None
    logfile: str | None = None
    timestamp: bool | None = None
    verbose: bool | None = None
    response_prefix: str | None = None
    comment: str | None = None


@dataclass(frozen=True, kw_only=True)
class OpenAICfg:
    """Settings shared by OpenAI-compatible chat completion backends."""

    endpoint: str | None = None
    key: str | None = None
    model: str | None = None
    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None
    seed: int | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None


@dataclass(frozen=True, kw_only=True)
class AnthropicCfg:
    endpoint: str | None = None
    key: str | None = None
    model: str | None = None
    version: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    top_k: int | None = None
    top_p: float | None = None


@dataclass(frozen=True, kw_only=True)
class LlamaCppCfg:
    """llama.cpp server parameters, in the order the server documents them."""

    endpoint: str | None = None
    temperature: float | None = None
    top_k: int | None = None
    top_p: float | None = None
    n_predict: int | None = None
    n_keep: int | None = None
    tfs_z: float | None = None
    typical_p: float | None = None
    repeat_penalty: float | None = None
    repeat_last_n: int | None = None
    penalize_nl: bool | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    mirostat: int | None = None
    mirostat_tau: float | None = None
    mirostat_eta: float | None = None
    seed: int | None = None


@dataclass(frozen=True, kw_only=True)
class BindingCfg:
    vi: str | None = None
    emacs: str | None = None


@dataclass(frozen=True, kw_only=True)
class PromptCfg:
    system: str | None = None
    context: int | None = None


@dataclass(frozen=True, kw_only=True)
class PromptProfile:
    """Prompt settings that apply only to one program."""

    program: str
    user: SlotValues = (None,) * NPROMPTS
    assistant: SlotValues = (None,) * NPROMPTS
    system: str | None = None
    context: int | None = None
    comment: str | None = None

    def shots(self) -> List[Shot]:
        """Return the example turns in slot order, skipping empty slots."""
        turns: List[Shot] = []
        for user, assistant in zip(self.user, self.assistant):
            if user:
                turns.append(("user", user))
            if assistant:
                turns.append(("assistant", assistant))
        return turns


SECTION_TYPES = {
    "general": GeneralCfg,
    "openai": OpenAICfg,
    "groq": OpenAICfg,
    "anthropic": AnthropicCfg,
    "llamacpp": LlamaCppCfg,
    "binding": BindingCfg,
    "prompt": PromptCfg,
}


@dataclass(frozen=True, kw_only=True)
class Configuration:
    """Settings merged from every configuration source.

    ``explicitly_set`` records each ``(section, key)`` pair a source assigned,
    so a configured zero or ``false`` can be told apart from an absent value.
    """

    program_name: str
    general: GeneralCfg = field(default_factory=GeneralCfg)
    openai: OpenAICfg = field(default_factory=OpenAICfg)
    groq: OpenAICfg = field(default_factory=OpenAICfg)
    anthropic: AnthropicCfg = field(default_factory=AnthropicCfg)
    llamacpp: LlamaCppCfg = field(default_factory=LlamaCppCfg)
    binding: BindingCfg = field(default_factory=BindingCfg)
    prompt: PromptCfg = field(default_factory=PromptCfg)
    profile: PromptProfile | None = None
    explicitly_set: FrozenSet[Tuple[str, str]] = frozenset()

    def section(self, name: str) -> Any:
        if name not in SECTION_TYPES:
            raise KeyError(name)
        return getattr(self, name)

    def is_set(self, section: str, key: str) -> bool:
        return (section, key) in self.explicitly_set

    def system_template(self) -> str | None:
        if self.profile is not None and self.profile.system is not None:
            return self.profile.system
        return self.prompt.system

    def system_prompt(self) -> str:
        """Return the system prompt with the program name substituted."""
        template = self.system_template()
        if template is None:
            raise ConfigError("No system prompt configured in the [prompt] section.")
        return template.replace("%s", self.program_name, 1)

    def context_depth(self) -> int:
        if self.profile is not None and self.profile.context is not None:
            return self.profile.context
        return self.prompt.context or 0

    def comment_prefix(self) -> str | None:
        if self.profile is not None and self.profile.comment is not None:
            return self.profile.comment
        return self.general.comment

    def shots(self) -> List[Shot]:
        if self.profile is None:
            return []
        return self.profile.shots()


__all__ = [
    "NPROMPTS",
    "ConfigError",
    "GeneralCfg",
    "OpenAICfg",
    "AnthropicCfg",
    "LlamaCppCfg",
    "BindingCfg",
    "PromptCfg",
    "PromptProfile",
    "Configuration",
    "SECTION_TYPES",
]
