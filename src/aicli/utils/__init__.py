"""General utility helpers for aicli."""

from __future__ import annotations

import json
import math
import os
import re
import sys

_SECRET_TOKEN = re.compile(r"\b[A-Za-z0-9]{12,}\b")
_API_KEY = re.compile(r"\b(sk|gsk)-[A-Za-z0-9_-]{8,}")
_JWT_PATTERN = re.compile(r"\b[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\b")


def redact_possible_secrets(text: str) -> str:
    """Redact likely secrets from *text* using heuristic pattern matching."""

    if not text:
        return text

    redacted = _JWT_PATTERN.sub("***REDACTED***", text)
    redacted = _API_KEY.sub("***REDACTED***", redacted)
    redacted = _SECRET_TOKEN.sub("***REDACTED***", redacted)
    return redacted


def strtobool(text: str) -> bool:
    """Return True only when *text* is exactly ``true``."""

    return text == "true"


def strtocard(text: str) -> int:
    """Return the cardinal number in *text* or -1 when it is not one."""

    if not text or not text.isascii() or not text.isdigit():
        return -1
    return int(text, 10)


def strtoint(text: str) -> int:
    if "_" in text:
        raise ValueError(f"invalid integer '{text}'")
    return int(text.strip(), 10)


def strtofloat(text: str) -> float:
    """Return the finite number in *text*; ``nan``, ``inf`` and digit separators are rejected."""

    if "_" in text:
        raise ValueError(f"invalid number '{text}'")
    value = float(text.strip())
    if not math.isfinite(value):
        raise ValueError(f"'{text}' is not a finite number")
    return value


def json_escape(text: str) -> str:
    """Return *text* as a quoted JSON string literal."""

    return json.dumps(text, ensure_ascii=False)


def short_program_name(argv0: str | None = None) -> str:
    """Return the short name of the running program.

    Login shells are started as ``-bash``; the leading hyphen is dropped so
    the name matches the ``[prompt-bash]`` configuration section.
    """

    if argv0 is None:
        argv0 = sys.argv[0] if sys.argv and sys.argv[0] else "python"
    name = os.path.basename(argv0)
    if name.startswith("-"):
        name = name[1:]
    return name


__all__ = [
    "redact_possible_secrets",
    "strtobool",
    "strtocard",
    "strtoint",
    "strtofloat",
    "json_escape",
    "short_program_name",
]
