"""Bundled JSON Schema describing a usable configuration."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

SCHEMA_FILE = Path(__file__).resolve().parent / "schemas" / "config-schema.json"


@lru_cache(maxsize=None)
def load_schema() -> Mapping[str, Any]:
    """Parse :data:`SCHEMA_FILE` once per process; callers must not mutate the result."""

    return yaml.safe_load(SCHEMA_FILE.read_text(encoding="utf-8"))


def definition_ref(name: str) -> str:
    """Return the ``$ref`` pointing at the ``$defs`` entry *name*."""

    if name not in load_schema().get("$defs", {}):
        raise KeyError(f"schema has no definition named {name!r}")
    return f"#/$defs/{name}"


__all__ = ["SCHEMA_FILE", "definition_ref", "load_schema"]
