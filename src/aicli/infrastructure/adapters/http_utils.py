"""Shared HTTP helpers for adapter implementations."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping

import requests

from .base import AdapterError, AdapterUnavailable, RequestLogger, Transport


@dataclass
class RequestsTransport:
    """Transport that posts request bodies with :mod:`requests`.

    The body is returned whatever the HTTP status, since backends describe
    their errors in the response payload.
    """

    timeout_s: float | None = None

    def send(self, url: str, headers: Mapping[str, str], body: str) -> str:
        try:
            response = requests.post(
                url,
                data=body.encode("utf-8"),
                headers=dict(headers),
                timeout=self.timeout_s,
            )
        except requests.exceptions.RequestException as exc:
            raise AdapterUnavailable(str(exc)) from exc
        response.encoding = response.encoding or "utf-8"
        return response.text


def exchange(
    url: str,
    headers: Mapping[str, str],
    payload: Dict[str, Any],
    *,
    transport: Transport,
    request_log: RequestLogger | None = None,
) -> str:
    """Serialise *payload*, send it and return the raw response body."""

    try:
        body = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise AdapterError(f"request body is not valid JSON: {exc}") from exc
    if request_log is not None:
        request_log.write(body)
    text = transport.send(url, headers, body)
    if request_log is not None:
        request_log.write(text)
    return text


__all__ = ["RequestsTransport", "exchange"]
