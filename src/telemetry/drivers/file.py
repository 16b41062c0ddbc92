"""
File drivers.

Both append to a single file opened at construction time:
  - file: one plain-text line per record (LineFormatter)
  - json: one JSON object per line (JsonFormatter)

Options are the target path, either as a bare string or as {"path": ...}.
Every record is written and flushed before log() returns.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from telemetry.drivers.base import Driver
from telemetry.errors import DriverDeliveryError
from telemetry.logger.formatters import JsonFormatter, LineFormatter, LogFormatter
from telemetry.logger.records import LogRecord


def path_from_options(options: Any) -> Path:
    if isinstance(options, (str, Path)):
        path = str(options)
    elif isinstance(options, dict):
        path = options.get("path", "")
    else:
        raise ValueError(
            f"file driver options must be a path or {{'path': ...}}, got {type(options).__name__}"
        )
    if not path:
        raise ValueError("file driver requires a path")
    return Path(path)


class FileDriver(Driver):
    """Appends formatted records to a file. Parent directories are created."""

    def __init__(self, path: str | Path, formatter: LogFormatter | None = None):
        self.path = Path(path)
        self.formatter = formatter or self._default_formatter()
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "a", encoding="utf-8")

    def _default_formatter(self) -> LogFormatter:
        """Subclass-specific default."""
        return LineFormatter()

    @classmethod
    def from_options(cls, options: Any) -> "FileDriver":
        return cls(path_from_options(options))

    @property
    def closed(self) -> bool:
        return self._file is None

    def log(self, record: LogRecord) -> None:
        formatted = self.formatter.format(record)
        with self._lock:
            if self._file is None:
                raise DriverDeliveryError(f"{self.name} is closed: {self.path}")
            try:
                self._file.write(formatted + "\n")
                self._file.flush()
            except OSError as exc:
                raise DriverDeliveryError(f"failed to write {self.path}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            if self._file is None:
                return
            try:
                self._file.close()
            except OSError as exc:
                raise DriverDeliveryError(f"failed to close {self.path}: {exc}") from exc
            finally:
                self._file = None


class JsonDriver(FileDriver):
    """Line-delimited JSON: one object per record."""

    def _default_formatter(self) -> LogFormatter:
        return JsonFormatter()
