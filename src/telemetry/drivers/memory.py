"""
In-memory driver.

Ring buffer of the last N records. Does not grow unbounded. Used by tests
and for reading back recent records in-process.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Any

from telemetry.drivers.base import Driver
from telemetry.logger.records import LogLevel, LogRecord


class MemoryDriver(Driver):

    def __init__(self, capacity: int = 10000):
        if capacity < 1:
            raise ValueError(f"memory driver capacity must be positive, got {capacity}")
        self._buffer: deque[LogRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self.closed = False

    @classmethod
    def from_options(cls, options: Any) -> "MemoryDriver":
        if isinstance(options, dict) and "capacity" in options:
            return cls(capacity=int(options["capacity"]))
        return cls()

    @property
    def capacity(self) -> int:
        return self._buffer.maxlen

    def log(self, record: LogRecord) -> None:
        with self._lock:
            self._buffer.append(record)

    @property
    def records(self) -> list[LogRecord]:
        with self._lock:
            return list(self._buffer)

    def get_recent(self, n: int = 100, level: int | str | None = None) -> list[LogRecord]:
        """Last `n` records, optionally only those at or above `level`."""
        records = self.records
        if level is not None:
            threshold = LogLevel.from_value(level)
            records = [r for r in records if r.level >= threshold]
        return records[-n:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._buffer)

    def close(self) -> None:
        self.closed = True
