"""
Exception taxonomy.

Every failure is raised to the immediate caller. Nothing here is retried,
suppressed, or logged by the core.
"""

from __future__ import annotations


class TelemetryError(Exception):
    """Base class for all telemetry errors."""


class DuplicateDriverError(TelemetryError):
    """A driver name was registered twice. The registry is left unchanged."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"driver already registered: {name}")


class UnknownDriverError(TelemetryError):
    """Configuration names a driver that was never registered."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = list(available or [])
        super().__init__(
            f"unknown driver: {name!r}. "
            f"Available: {', '.join(self.available) if self.available else 'none'}"
        )


class LoggerConstructionError(TelemetryError):
    """No Logger was produced. The underlying cause is chained as __cause__."""


class DriverDeliveryError(TelemetryError):
    """A driver failed to deliver a record or to release its resources."""


class UnknownTransactionError(TelemetryError):
    """end_transaction() got an id that is not active (never started, or already ended)."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"transaction {transaction_id} does not exist")


class ConfigError(TelemetryError):
    """Configuration could not be read, decoded, or validated."""
