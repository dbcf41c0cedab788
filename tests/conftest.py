"""Shared fixtures for aicli tests."""

from __future__ import annotations

import io
import json
import os
import textwrap
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Tuple

import pytest
from rich.console import Console

from aicli.config_loader import Configuration, read_file_config

BASE_CONFIG = """
[general]
api = openai

[openai]
endpoint = https://openai.example/v1/chat/completions
key = sk-test-0123456789
model = gpt-test

[prompt]
context = 0
system = You are an assistant for the %s command-line interface.
"""


class FakeTransport:
    """Transport that records requests and replays canned response bodies."""

    def __init__(self, *responses: str) -> None:
        self.responses = list(responses)
        self.requests: List[Tuple[str, Dict[str, str], str]] = []

    def send(self, url: str, headers: Mapping[str, str], body: str) -> str:
        self.requests.append((url, dict(headers), body))
        return self.responses.pop(0)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1][2])


@pytest.fixture(autouse=True)
def _clear_ai_cli_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("AI_CLI_"):
            monkeypatch.delenv(name)


@pytest.fixture
def fake_transport() -> Callable[..., FakeTransport]:
    return FakeTransport


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    counter = {"n": 0}

    def _write(text: str, name: str | None = None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"config-{counter['n']}")
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config(write_config: Callable[..., Path]) -> Callable[..., Configuration]:
    """Resolve a configuration from INI text appended to a working base file."""

    def _make(extra: str = "", *, program: str = "bash", environ: Mapping[str, str] | None = None) -> Configuration:
        path = write_config(BASE_CONFIG + textwrap.dedent(extra))
        return read_file_config(path, program_name=program, environ=environ or {})

    return _make


@pytest.fixture
def base_config() -> str:
    return BASE_CONFIG
