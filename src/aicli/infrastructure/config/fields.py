"""Declarative table of global configuration fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Tuple

from aicli.utils import strtobool, strtocard, strtofloat, strtoint

Converter = Callable[[str], Any]

ENV_PREFIX = "AI_CLI_"


def _cardinal(text: str) -> int:
    value = strtocard(text)
    if value < 0:
        raise ValueError(f"'{text}' is not a non-negative integer")
    return value


@dataclass(frozen=True)
class FieldSpec:
    """A settable ``[section] key`` pair and the conversion applied to its value."""

    section: str
    key: str
    convert: Converter

    @property
    def env_name(self) -> str:
        return f"{ENV_PREFIX}{self.section}_{self.key}"

    def parse(self, text: str) -> Any:
        return self.convert(text)


def _section(name: str, entries: Iterable[Tuple[str, Converter]]) -> list[FieldSpec]:
    return [FieldSpec(name, key, convert) for key, convert in entries]


_OPENAI_COMPATIBLE = (
    ("endpoint", str),
    ("key", str),
    ("model", str),
    ("temperature", strtofloat),
    ("top_p", strtofloat),
    ("max_tokens", strtoint),
    ("seed", strtoint),
    ("frequency_penalty", strtofloat),
    ("presence_penalty", strtofloat),
)

_SPECS: list[FieldSpec] = [
    *_section(
        "general",
        (
            ("verbose", strtobool),
            ("logfile", str),
            ("timestamp", strtobool),
            ("api", str),
            ("response_prefix", str),
            ("comment", str),
        ),
    ),
    *_section("openai", _OPENAI_COMPATIBLE),
    *_section("groq", _OPENAI_COMPATIBLE),
    *_section(
        "anthropic",
        (
            ("endpoint", str),
            ("key", str),
            ("model", str),
            ("version", str),
            ("max_tokens", strtoint),
            ("temperature", strtofloat),
            ("top_k", strtoint),
            ("top_p", strtofloat),
        ),
    ),
    *_section("binding", (("vi", str), ("emacs", str))),
    *_section("prompt", (("context", _cardinal), ("system", str))),
    *_section(
        "llamacpp",
        (
            ("endpoint", str),
            ("temperature", strtofloat),
            ("top_k", strtoint),
            ("top_p", strtofloat),
            ("n_predict", strtoint),
            ("n_keep", strtoint),
            ("tfs_z", strtofloat),
            ("typical_p", strtofloat),
            ("repeat_penalty", strtofloat),
            ("repeat_last_n", strtoint),
            ("penalize_nl", strtobool),
            ("presence_penalty", strtofloat),
            ("frequency_penalty", strtofloat),
            ("mirostat", strtoint),
            ("mirostat_tau", strtofloat),
            ("mirostat_eta", strtofloat),
            ("seed", strtoint),
        ),
    ),
]

FIELDS: Dict[Tuple[str, str], FieldSpec] = {(spec.section, spec.key): spec for spec in _SPECS}


def lookup(section: str, key: str) -> FieldSpec | None:
    return FIELDS.get((section, key))


__all__ = ["ENV_PREFIX", "FieldSpec", "FIELDS", "lookup"]
