"""Smoke tests for the Anthropic Messages adapter using a fake transport."""

from __future__ import annotations

import json

import pytest

from aicli.infrastructure.adapters import AnthropicAdapter
from aicli.infrastructure.adapters.anthropic_adapt import ACKNOWLEDGEMENT, CONTEXT_EXPLANATION, context_messages
from aicli.infrastructure.adapters.base import AdapterBackendError

ANTHROPIC_SETTINGS = """
[general]
api = anthropic
[anthropic]
endpoint = https://anthropic.example/v1/messages
key = anthropic-secret
model = claude-test
version = 2023-06-01
max_tokens = 64
"""


def test_request_shape(make_config, fake_transport) -> None:
    transport = fake_transport(json.dumps({"content": [{"type": "text", "text": "ls -la"}]}))
    adapter = AnthropicAdapter(make_config(ANTHROPIC_SETTINGS + "top_k = 5\n"))

    assert adapter.send(prompt="list all files", history=[], transport=transport) == "ls -la"

    url, headers, _ = transport.requests[0]
    assert url == "https://anthropic.example/v1/messages"
    assert headers["x-api-key"] == "anthropic-secret"
    assert headers["anthropic-version"] == "2023-06-01"
    assert transport.last_payload == {
        "model": "claude-test",
        "max_tokens": 64,
        "system": "You are an assistant for the bash command-line interface.",
        "top_k": 5,
        "messages": [{"role": "user", "content": "list all files"}],
    }


def test_context_alternates_roles(make_config) -> None:
    config = make_config(
        ANTHROPIC_SETTINGS
        + "[prompt-bash]\n"
        + "user-1 = List files in current directory\n"
        + "assistant-1 = ls\n"
    )
    history = ["cd src", "git status", "make"]

    messages = AnthropicAdapter(config).build_request("count lines", history)["messages"]

    roles = [message["role"] for message in messages]
    assert roles[0] == "user"
    assert roles[-1] == "user"
    assert all(first != second for first, second in zip(roles, roles[1:]))
    assert messages[-1]["content"] == "count lines"
    assert messages[2] == {"role": "user", "content": CONTEXT_EXPLANATION}
    acknowledgements = [m for m in messages if m == {"role": "assistant", "content": ACKNOWLEDGEMENT}]
    assert len(acknowledgements) == len(history) + 1


def test_no_context_messages_without_history() -> None:
    assert context_messages([]) == []


def test_content_text_is_returned(make_config) -> None:
    adapter = AnthropicAdapter(make_config(ANTHROPIC_SETTINGS))

    assert adapter.parse_response('{"content": [{"type": "text", "text": "git log"}]}') == "git log"


def test_error_message_is_reported(make_config) -> None:
    adapter = AnthropicAdapter(make_config(ANTHROPIC_SETTINGS))
    body = json.dumps({"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}})

    with pytest.raises(AdapterBackendError) as excinfo:
        adapter.parse_response(body)
    assert str(excinfo.value) == "invalid x-api-key"
