"""
Console driver.

Writes one compact line per record. ERROR goes to stderr, everything else
to stdout, unless a fixed stream is configured.
"""

from __future__ import annotations

import sys
import threading
from typing import Any

from telemetry.drivers.base import Driver
from telemetry.errors import DriverDeliveryError
from telemetry.logger.formatters import CompactFormatter, LogFormatter
from telemetry.logger.records import LogLevel, LogRecord


class ConsoleDriver(Driver):

    COLORS = {
        LogLevel.DEBUG: "\033[36m",      # cyan
        LogLevel.INFO: "\033[37m",       # white/default
        LogLevel.WARNING: "\033[33m",    # yellow
        LogLevel.ERROR: "\033[31m",      # red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        color: bool = False,
        stream: str | None = None,
        formatter: LogFormatter | None = None,
    ):
        if stream not in (None, "stdout", "stderr"):
            raise ValueError(f"console stream must be 'stdout' or 'stderr', got {stream!r}")
        self.color = color
        self.stream = stream
        self.formatter = formatter or CompactFormatter()
        self._lock = threading.Lock()

    @classmethod
    def from_options(cls, options: Any) -> "ConsoleDriver":
        """Options are ignored unless they are a mapping with `color`/`stream`."""
        if isinstance(options, dict):
            return cls(color=bool(options.get("color", False)), stream=options.get("stream"))
        return cls()

    def _target(self, record: LogRecord):
        # Resolved per call so pytest's capsys and redirected streams work.
        if self.stream == "stderr":
            return sys.stderr
        if self.stream == "stdout":
            return sys.stdout
        return sys.stderr if record.level >= LogLevel.ERROR else sys.stdout

    def log(self, record: LogRecord) -> None:
        formatted = self.formatter.format(record)
        if self.color:
            formatted = f"{self.COLORS[record.level]}{formatted}{self.RESET}"
        try:
            with self._lock:
                print(formatted, file=self._target(record), flush=True)
        except OSError as exc:
            raise DriverDeliveryError(f"console write failed: {exc}") from exc
