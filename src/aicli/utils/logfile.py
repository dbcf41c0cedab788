"""Append-only log of backend requests and responses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

TimestampStr = str


def current_timestamp_str() -> TimestampStr:
    """Return the current time as ISO-8601 with microseconds in the local timezone."""

    return datetime.now(timezone.utc).astimezone().isoformat(timespec="microseconds")


@dataclass
class RequestLog:
    """Write request and response bodies verbatim to *path*."""

    path: Path
    timestamp: bool = False

    def write(self, message: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            if self.timestamp:
                handle.write(f"{current_timestamp_str()}\n")
            handle.write(message)
            if not message.endswith("\n"):
                handle.write("\n")


__all__ = ["current_timestamp_str", "RequestLog"]
