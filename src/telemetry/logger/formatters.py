"""
Log formatters.

Each built-in driver renders records with one of these:
  - compact: "{timestamp:%H:%M:%S} [{level_name:>7}] {message} {tags}"   (console)
  - line:    "{timestamp:RFC3339} {level} {message} {tags}"              (file)
  - json:    one JSON object per record                                  (json, elasticsearch)
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Mapping

from telemetry.logger.records import LogRecord


class LogFormatter(ABC):
    """Base formatter. Transforms LogRecord → string."""

    @abstractmethod
    def format(self, record: LogRecord) -> str: ...


class CompactFormatter(LogFormatter):
    """
    Compact single-line format for terminal display.
    Example: 14:32:05 [   INFO] cache warmed env=prod region=us txn=3f9a…
    """

    def format(self, record: LogRecord) -> str:
        ts = record.timestamp.strftime("%H:%M:%S")
        parts = [f"{ts} [{record.level_name:>7}] {record.message}"]
        if record.tags:
            parts.append(_format_tags(record.tags))
        if record.transaction_id:
            parts.append(f"txn={record.transaction_id}")
        return " ".join(parts)


class LineFormatter(LogFormatter):
    """
    Plain-text line for the file driver.
    Example: 2026-02-12T14:32:05Z 1 cache warmed map[env:prod]
    """

    def format(self, record: LogRecord) -> str:
        ts = rfc3339(record)
        tags = " ".join(f"{k}:{v}" for k, v in sorted(record.tags.items()))
        line = f"{ts} {int(record.level)} {record.message} map[{tags}]"
        if record.transaction_id:
            line = f"{line} {record.transaction_id}"
        return line


class JsonFormatter(LogFormatter):
    """Structured JSON for machine parsing. One JSON object per line."""

    def to_document(self, record: LogRecord) -> dict[str, Any]:
        obj: dict[str, Any] = {
            "timestamp": rfc3339(record),
            "level": int(record.level),
            "level_name": record.level_name,
            "message": record.message,
            "tags": dict(record.tags),
        }
        if record.transaction_id:
            obj["transaction_id"] = record.transaction_id
        return obj

    def format(self, record: LogRecord) -> str:
        return json.dumps(self.to_document(record), default=str)


def rfc3339(record: LogRecord) -> str:
    """Second-resolution RFC 3339 timestamp, 'Z' suffix for UTC."""
    ts = record.timestamp.isoformat(timespec="seconds")
    return ts.replace("+00:00", "Z")


def _format_tags(tags: Mapping[str, str]) -> str:
    return " ".join(f"{k}={v}" for k, v in sorted(tags.items()))
