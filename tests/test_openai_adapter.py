"""Smoke tests for the chat completions adapter using a fake transport."""

from __future__ import annotations

import json

import pytest

from aicli.infrastructure.adapters import OpenAIAdapter, groq_adapter
from aicli.infrastructure.adapters.base import AdapterBackendError, AdapterResponseError

REPLY = json.dumps({"choices": [{"message": {"role": "assistant", "content": "ls -la"}}]})


def test_request_without_shots_or_context(make_config, fake_transport) -> None:
    transport = fake_transport(REPLY)
    adapter = OpenAIAdapter(make_config())

    text = adapter.send(prompt="list all files", history=[], transport=transport)

    assert text == "ls -la"
    url, headers, _ = transport.requests[0]
    assert url == "https://openai.example/v1/chat/completions"
    assert headers["Authorization"] == "Bearer sk-test-0123456789"
    assert headers["Content-Type"] == "application/json"
    assert transport.last_payload == {
        "model": "gpt-test",
        "messages": [
            {"role": "system", "content": "You are an assistant for the bash command-line interface."},
            {"role": "user", "content": "list all files"},
        ],
    }


def test_request_with_shots_and_history(make_config) -> None:
    config = make_config(
        """
        [prompt-bash]
        user-1 = List files in current directory
        assistant-1 = ls
        user-3 = xyzzy
        """
    )

    payload = OpenAIAdapter(config).build_request("count lines", ["cd src", "git status"])

    assert [(m["role"], m["content"]) for m in payload["messages"][1:]] == [
        ("user", "List files in current directory"),
        ("assistant", "ls"),
        ("user", "xyzzy"),
        ("user", "cd src"),
        ("user", "git status"),
        ("user", "count lines"),
    ]


def test_only_configured_parameters_are_sent(make_config) -> None:
    config = make_config("[openai]\ntemperature = 0\nseed = 42\n")

    payload = OpenAIAdapter(config).build_request("x", [])

    assert payload["temperature"] == 0.0
    assert payload["seed"] == 42
    for key in ("top_p", "max_tokens", "frequency_penalty", "presence_penalty"):
        assert key not in payload
    assert list(payload)[0] == "model"
    assert list(payload)[-1] == "messages"


def test_backend_error_message_is_reported(make_config, fake_transport) -> None:
    transport = fake_transport(json.dumps({"error": {"message": "bad key", "type": "invalid_request_error"}}))

    with pytest.raises(AdapterBackendError) as excinfo:
        OpenAIAdapter(make_config()).send(prompt="x", history=[], transport=transport)
    assert str(excinfo.value) == "bad key"


def test_unrecognised_body_is_echoed(make_config) -> None:
    body = '{"status": "overloaded"}'

    with pytest.raises(AdapterBackendError) as excinfo:
        OpenAIAdapter(make_config()).parse_response(body)
    assert str(excinfo.value) == body


def test_invalid_json_reports_line(make_config) -> None:
    with pytest.raises(AdapterResponseError) as excinfo:
        OpenAIAdapter(make_config()).parse_response('{"choices": [\n\n oops')
    assert "OpenAI JSON error: on line 3" in str(excinfo.value)


def test_empty_choices_are_rejected(make_config) -> None:
    with pytest.raises(AdapterResponseError):
        OpenAIAdapter(make_config()).parse_response('{"choices": []}')


def test_groq_uses_its_own_endpoint_and_label(make_config, fake_transport) -> None:
    config = make_config(
        """
        [general]
        api = groq
        [groq]
        endpoint = https://groq.example/v1/chat/completions
        key = gsk-abc
        model = llama-test
        """
    )
    transport = fake_transport(REPLY)
    adapter = groq_adapter(config)

    assert adapter.send(prompt="x", history=[], transport=transport) == "ls -la"
    assert transport.requests[0][0] == "https://groq.example/v1/chat/completions"
    assert transport.requests[0][1]["Authorization"] == "Bearer gsk-abc"
    with pytest.raises(AdapterResponseError) as excinfo:
        adapter.parse_response("not json")
    assert str(excinfo.value).startswith("Groq JSON error")
