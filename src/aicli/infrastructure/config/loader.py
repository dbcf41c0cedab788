"""Configuration resolution from INI files and environment variables.

Sources are visited in a fixed order and later sources override earlier ones
field by field:

1. the INI files returned by :func:`default_sources`, in listed order;
2. ``AI_CLI_<section>_<key>`` variables for every global field;
3. ``AI_CLI_prompt_<program>_<name>`` variables for the running program.

Program-specific prompt settings live in ``[prompt-<program>]`` sections. A
section or variable naming another program has no effect on the result, which
lets one shared file carry the settings of many programs.
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from rich.console import Console

from aicli.domain.config import (
    NPROMPTS,
    SECTION_TYPES,
    ConfigError,
    Configuration,
    PromptProfile,
)
from aicli.utils import json_escape, short_program_name, strtocard

from .fields import ENV_PREFIX, FIELDS, FieldSpec, lookup
from .validators import validate_configuration

__all__ = [
    "HIDDEN_CONFIG_NAME",
    "default_sources",
    "load_configuration",
    "prompt_id",
    "prompt_number",
    "read_file_config",
    "resolve_config",
]

HIDDEN_CONFIG_NAME = ".aicliconfig"

# [prompt-gdb]
# user-1 = Disable breakpoint number 4
# assistant-1 = delete 4
PROMPT_SECTION_PREFIX = "prompt-"

# AI_CLI_prompt_gdb_user_1=Disable breakpoint number 4
# AI_CLI_prompt_gdb_assistant_1=delete 4
ENV_PROMPT_PREFIX = f"{ENV_PREFIX}prompt_"

_PROFILE_SCALARS = ("system", "context", "comment")
_ROLES = ("user", "assistant")

# configparser treats its default section specially; use a name no file can contain.
_NO_DEFAULT_SECTION = "\x00"


def default_sources(home: str | None = None) -> List[Path]:
    """Return the configuration files consulted, lowest precedence first."""

    sources = [
        Path("/usr/share/ai-cli/config"),
        Path("/usr/local/share/ai-cli/config"),
        Path("ai-cli-config"),
    ]
    if home:
        sources.append(Path(home) / "share" / "ai-cli" / "config")
        sources.append(Path(home) / HIDDEN_CONFIG_NAME)
    sources.append(Path(HIDDEN_CONFIG_NAME))
    return sources


def prompt_number(name: str, prefix: str) -> int:
    """Return the 0-based shot slot encoded in *name* after *prefix*, or -1."""

    value = strtocard(name[len(prefix):])
    if value <= 0 or value > NPROMPTS:
        return -1
    return value - 1


def prompt_id(variable: str) -> Optional[str]:
    """Return the program identifier of a prompt environment variable.

    ``AI_CLI_prompt_sqlite3_system`` yields ``sqlite3``; a variable without an
    identifier yields ``None``.
    """

    rest = variable[len(ENV_PROMPT_PREFIX):]
    identifier, separator, _ = rest.partition("_")
    if not separator or not identifier:
        return None
    return identifier


class _Resolution:
    """Mutable state accumulated while sources are visited."""

    def __init__(self, program_name: str, console: Console) -> None:
        self.program_name = program_name
        self.console = console
        self.values: Dict[str, Dict[str, Any]] = {section: {} for section in SECTION_TYPES}
        self.explicitly_set: Set[Tuple[str, str]] = set()
        self.profile: Dict[str, Any] = {}
        self.user: List[Optional[str]] = [None] * NPROMPTS
        self.assistant: List[Optional[str]] = [None] * NPROMPTS

    @property
    def verbose(self) -> bool:
        return bool(self.values["general"].get("verbose"))

    def trace(self, message: str) -> None:
        if self.verbose:
            self.console.print(message, markup=False, highlight=False)

    # ------------------------------------------------------------------
    def assign(self, spec: FieldSpec, text: str, source: str) -> None:
        try:
            value = spec.parse(text)
        except ValueError as exc:
            raise ConfigError(
                f"{source}: invalid value '{text}' for [{spec.section}] {spec.key}: {exc}"
            ) from exc
        self.values[spec.section][spec.key] = value
        self.explicitly_set.add((spec.section, spec.key))

    def assign_profile(self, name: str, text: str, separator: str, source: str, apply: bool) -> None:
        """Store a program-specific entry such as ``system`` or ``user-2``.

        Entries for other programs are checked but not stored (``apply`` false).
        """

        if name in _PROFILE_SCALARS:
            value: Any = text
            if name == "context":
                value = strtocard(text)
                if value < 0:
                    raise ConfigError(f"{source}: invalid context depth '{text}'")
            if apply:
                self.profile[name] = value
            return

        for role in _ROLES:
            prefix = f"{role}{separator}"
            if not name.startswith(prefix):
                continue
            slot = prompt_number(name, prefix)
            if slot == -1:
                raise ConfigError(
                    f"{source}: invalid prompt number in '{name}'; expected {prefix}1 to {prefix}{NPROMPTS}"
                )
            if apply:
                getattr(self, role)[slot] = text
            return

        raise ConfigError(f"{source}: unknown program prompt setting '{name}'")

    # ------------------------------------------------------------------
    def freeze(self) -> Configuration:
        sections = {
            name: cls(**self.values[name]) for name, cls in SECTION_TYPES.items()
        }
        profile = None
        if self.profile or any(self.user) or any(self.assistant):
            profile = PromptProfile(
                program=self.program_name,
                user=tuple(self.user),
                assistant=tuple(self.assistant),
                **self.profile,
            )
        return Configuration(
            program_name=self.program_name,
            profile=profile,
            explicitly_set=frozenset(self.explicitly_set),
            **sections,
        )


def _read_ini(path: Path) -> Optional[List[Tuple[str, str, str]]]:
    """Return the (section, key, value) entries of *path*, or None if it cannot be opened."""

    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        default_section=_NO_DEFAULT_SECTION,
    )
    parser.optionxform = str  # type: ignore[assignment, method-assign]
    try:
        handle = path.open(encoding="utf-8")
    except OSError:
        return None
    with handle:
        try:
            parser.read_file(handle, source=str(path))
        except configparser.MissingSectionHeaderError as exc:
            raise ConfigError(f"{path}:{exc.lineno}:1: Initialization file error: entry outside a section") from exc
        except configparser.ParsingError as exc:
            lineno = exc.errors[0][0] if exc.errors else 0
            raise ConfigError(f"{path}:{lineno}:1: Initialization file error") from exc
        except configparser.Error as exc:
            lineno = getattr(exc, "lineno", 0)
            raise ConfigError(f"{path}:{lineno}:1: Initialization file error: {exc.message}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigError(f"{path}: Initialization file is not valid UTF-8") from exc

    entries: List[Tuple[str, str, str]] = []
    for section in parser.sections():
        for key, value in parser[section].items():
            entries.append((section, key, value))
    return entries


def _apply_file(state: _Resolution, path: Path) -> None:
    state.trace(f"Config reading {path}")
    entries = _read_ini(path)
    if entries is None:
        return

    for section, key, value in entries:
        state.trace(f"Config [{section}]: {key}={json_escape(value)}")
        source = f"{path}: [{section}] {key}"

        spec = lookup(section, key)
        if spec is not None:
            state.assign(spec, value, source)
            continue

        if not section.startswith(PROMPT_SECTION_PREFIX):
            raise ConfigError(f"{source}: unknown configuration section or key")

        program = section[len(PROMPT_SECTION_PREFIX):]
        state.assign_profile(key, value, "-", source, apply=program == state.program_name)


def _apply_env_fields(state: _Resolution, environ: Mapping[str, str]) -> None:
    for spec in FIELDS.values():
        text = environ.get(spec.env_name)
        if text is not None:
            state.trace(f"Config environment {spec.env_name}={json_escape(text)}")
            state.assign(spec, text, f"environment variable {spec.env_name}")


def _apply_env_prompts(state: _Resolution, environ: Mapping[str, str]) -> None:
    global_names = {spec.env_name for spec in FIELDS.values()}
    for variable, value in environ.items():
        if not variable.startswith(ENV_PROMPT_PREFIX) or variable in global_names:
            continue
        source = f"environment variable {variable}"
        program = prompt_id(variable)
        if program is None:
            raise ConfigError(f"Missing program identifier in prompt {source}")
        if program != state.program_name:
            continue
        name = variable[len(ENV_PROMPT_PREFIX) + len(program) + 1:]
        state.trace(f"Config environment {variable}={json_escape(value)}")
        state.assign_profile(name, value, "_", source, apply=True)


def resolve_config(
    *,
    program_name: str | None = None,
    sources: Iterable[Path] | None = None,
    environ: Mapping[str, str] | None = None,
    console: Console | None = None,
) -> Configuration:
    """Merge every configuration source into a frozen :class:`Configuration`."""

    environ = os.environ if environ is None else environ
    state = _Resolution(program_name or short_program_name(), console or Console(stderr=True))
    if sources is None:
        sources = default_sources(environ.get("HOME"))

    for path in sources:
        _apply_file(state, Path(path))
    _apply_env_fields(state, environ)
    _apply_env_prompts(state, environ)
    return state.freeze()


def read_file_config(
    path: Path,
    *,
    program_name: str | None = None,
    environ: Mapping[str, str] | None = None,
    console: Console | None = None,
) -> Configuration:
    """Resolve the configuration from a single file plus the environment."""

    return resolve_config(
        program_name=program_name,
        sources=[path],
        environ=environ,
        console=console,
    )


def load_configuration(
    *,
    program_name: str | None = None,
    sources: Iterable[Path] | None = None,
    environ: Mapping[str, str] | None = None,
    console: Console | None = None,
) -> Configuration:
    """Resolve and validate the configuration used to bind a backend."""

    source_list = list(sources) if sources is not None else None
    config = resolve_config(
        program_name=program_name,
        sources=source_list,
        environ=environ,
        console=console,
    )
    where = ", ".join(str(path) for path in source_list) if source_list else "<default sources>"
    validate_configuration(config, where)
    return config

