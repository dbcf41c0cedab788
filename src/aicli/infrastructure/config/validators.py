"""Validation helpers for the resolved configuration."""

from __future__ import annotations

from dataclasses import asdict
from functools import lru_cache
from typing import Any, Dict, Mapping

from jsonschema import Draft202012Validator, ValidationError

from aicli.domain.config import SECTION_TYPES, ConfigError, Configuration

from .schema import definition_ref, load_schema

PLACEHOLDER = "%s"


@lru_cache(maxsize=None)
def build_validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema())


def format_error(source: object, field: str, message: str) -> str:
    location = f"[cyan]{source}[/cyan]"
    target = f" → [magenta]{field}[/magenta]" if field else ""
    return f"[bold red]Config error[/bold red]: {location}{target} {message}"


def validate_with_schema(
    validator: Draft202012Validator,
    instance: Mapping[str, object],
    ref: str,
    source: object,
) -> None:
    try:
        validator.evolve(schema={"$ref": ref}).validate(instance)
    except ValidationError as exc:
        field = ".".join(str(part) for part in exc.path)
        field_display = field or "<root>"
        raise ConfigError(format_error(source, field_display, exc.message), markup=True) from exc


def configuration_payload(config: Configuration) -> Dict[str, Any]:
    """Return the explicitly set values of *config*, grouped by section."""

    payload: Dict[str, Any] = {}
    for section in SECTION_TYPES:
        values = asdict(config.section(section))
        payload[section] = {
            key: value for key, value in values.items() if config.is_set(section, key)
        }
    if config.profile is not None and config.profile.system is not None:
        payload["prompt"]["system"] = config.profile.system
    return payload


def validate_configuration(config: Configuration, source: object = "<configuration>") -> None:
    """Check that *config* carries everything the selected backend requires."""

    validator = build_validator()
    validate_with_schema(validator, configuration_payload(config), definition_ref("configuration"), source)

    # Program-specific prompts name their program literally; the placeholder is optional there.
    if config.prompt.system is not None and config.prompt.system.count(PLACEHOLDER) != 1:
        raise ConfigError(
            format_error(
                source,
                "prompt.system",
                f"System prompt must contain exactly one '{PLACEHOLDER}' placeholder for the program name.",
            ),
            markup=True,
        )
    profile = config.profile
    if profile is not None and profile.system is not None and profile.system.count(PLACEHOLDER) > 1:
        raise ConfigError(
            format_error(
                source,
                f"prompt-{profile.program}.system",
                f"System prompt may contain at most one '{PLACEHOLDER}' placeholder.",
            ),
            markup=True,
        )


__all__ = [
    "PLACEHOLDER",
    "build_validator",
    "format_error",
    "validate_with_schema",
    "configuration_payload",
    "validate_configuration",
]
