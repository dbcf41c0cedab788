"""Tests for loading the bundled configuration schema."""

from __future__ import annotations

import pytest

from aicli.infrastructure.config.schema import SCHEMA_FILE, definition_ref, load_schema
from aicli.infrastructure.config.validators import build_validator


def test_schema_is_parsed_once() -> None:
    assert SCHEMA_FILE.is_file()
    assert load_schema() is load_schema()
    assert build_validator() is build_validator()


def test_definition_ref_names_existing_definitions() -> None:
    assert definition_ref("configuration") == "#/$defs/configuration"
    assert set(load_schema()["$defs"]) >= {"openaiCompatible", "anthropic", "llamacpp"}


def test_definition_ref_rejects_unknown_definition() -> None:
    with pytest.raises(KeyError):
        definition_ref("nosuchdefinition")
