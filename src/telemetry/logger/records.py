"""
Log records and level definitions.

Levels carry the integer values used on the wire: configuration files
(`log_level: 1`) and the JSON/Elasticsearch drivers both use them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Optional


class LogLevel(IntEnum):
    """Ordered severity levels. Total order drives filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.strip().upper()
        if name_upper == "WARN":
            name_upper = "WARNING"
        try:
            return cls[name_upper]
        except KeyError:
            raise ValueError(
                f"Unknown log level '{name}'. "
                f"Valid levels: {', '.join(m.name for m in cls)}"
            ) from None

    @classmethod
    def from_value(cls, value: "int | str | LogLevel") -> "LogLevel":
        """Resolve level from int, name, or an existing member."""
        if isinstance(value, cls):
            return value
        # bool is an int subclass; True/False are never levels
        if isinstance(value, bool):
            raise TypeError("Expected int or str for level, got bool")
        if isinstance(value, str):
            return cls.from_name(value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(
                    f"invalid log level: {value} "
                    f"(must be between {min(cls).value} and {max(cls).value})"
                ) from None
        raise TypeError(f"Expected int or str for level, got {type(value).__name__}")


def _freeze(tags: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(tags or {}))


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable log record. Built by Logger.log(), handed to the driver.

    `tags` is a read-only view over a private copy, so neither the caller
    nor the driver can change a record after it was created.
    """
    timestamp: datetime
    level: LogLevel
    message: str
    tags: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    transaction_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _freeze(self.tags))

    @property
    def level_name(self) -> str:
        return self.level.name

    @classmethod
    def create(
        cls,
        level: int,
        message: str,
        tags: Mapping[str, str] | None = None,
        transaction_id: str | None = None,
    ) -> "LogRecord":
        """Factory method with auto-timestamp (UTC) and level resolution."""
        return cls(
            timestamp=datetime.now(timezone.utc),
            level=LogLevel.from_value(level),
            message=message,
            tags=tags or {},
            transaction_id=transaction_id,
        )
