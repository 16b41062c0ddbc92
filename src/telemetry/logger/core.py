"""
Logger: level filtering, tag enrichment, transaction tracking, dispatch.

One Logger owns exactly one driver for its lifetime, a private copy of its
configuration, and a table of active transactions. A single lock per
instance guards the configuration and the table. In the default
SERIALIZED dispatch mode the lock also brackets the driver call, so a slow
driver serializes all logging on that instance. SNAPSHOT mode builds the
record under the lock and calls the driver outside it.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Optional

from telemetry.errors import LoggerConstructionError, UnknownTransactionError
from telemetry.logger.records import LogLevel, LogRecord
from telemetry.logger.transactions import Transaction, generate_transaction_id, utc_now

if TYPE_CHECKING:
    from telemetry.config import TelemetryConfig
    from telemetry.drivers.base import Driver
    from telemetry.drivers.registry import DriverRegistry


class DispatchMode(str, Enum):
    SERIALIZED = "serialized"  # lock held across driver.log()
    SNAPSHOT = "snapshot"      # record built under lock, driver called outside it


class Logger:
    """
    Structured logger bound to a single driver.

    Usage:
        log = new_logger(TelemetryConfig.from_yaml("telemetry.yaml"))
        txn = log.start_transaction()
        log.info("Order accepted", tags={"order": "A-17"}, transaction_id=txn)
        log.end_transaction(txn)
        log.close()
    """

    # Re-export levels for convenience: Logger.DEBUG, etc.
    DEBUG = LogLevel.DEBUG
    INFO = LogLevel.INFO
    WARNING = LogLevel.WARNING
    ERROR = LogLevel.ERROR

    def __init__(self, driver: Driver, config: TelemetryConfig) -> None:
        self._driver = driver
        self._config = config.model_copy(deep=True)
        self._dispatch = DispatchMode(self._config.dispatch)
        self._transactions: dict[str, Transaction] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: TelemetryConfig,
        registry: DriverRegistry | None = None,
    ) -> "Logger":
        """
        Resolve a driver through `registry` and wrap it.

        When no registry is given, a fresh one holding the built-in drivers
        is used.

        Raises:
            LoggerConstructionError: the driver is unknown or its constructor
                failed. The original exception is chained as __cause__.
        """
        if registry is None:
            from telemetry.drivers.defaults import builtin_registry
            registry = builtin_registry()

        try:
            driver = registry.resolve(config)
        except Exception as exc:
            raise LoggerConstructionError(f"failed to create logger: {exc}") from exc
        return cls(driver, config)

    # ── Accessors ─────────────────────────────────────────────────

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def dispatch(self) -> DispatchMode:
        return self._dispatch

    @property
    def config(self) -> TelemetryConfig:
        """Deep copy of the current configuration."""
        with self._lock:
            return self._config.model_copy(deep=True)

    @property
    def minimum_level(self) -> LogLevel:
        with self._lock:
            return self._config.minimum_level

    @property
    def default_tags(self) -> dict[str, str]:
        with self._lock:
            return dict(self._config.default_tags)

    # ── Core Logging ──────────────────────────────────────────────

    def log(
        self,
        level: int | str,
        message: str,
        tags: Mapping[str, str] | None = None,
        transaction_id: Optional[str] = None,
    ) -> Any:
        """
        Filter, enrich and deliver one record.

        Records below the minimum level are dropped silently and the driver
        is not called. Otherwise the driver's log() is called exactly once
        and its return value is passed back unchanged. Driver exceptions are
        not caught.
        """
        level = LogLevel.from_value(level)

        if self._dispatch is DispatchMode.SERIALIZED:
            with self._lock:
                record = self._build_record(level, message, tags, transaction_id)
                if record is None:
                    return None
                return self._driver.log(record)

        with self._lock:
            record = self._build_record(level, message, tags, transaction_id)
        if record is None:
            return None
        return self._driver.log(record)

    def _build_record(
        self,
        level: LogLevel,
        message: str,
        tags: Mapping[str, str] | None,
        transaction_id: Optional[str],
    ) -> LogRecord | None:
        """Must hold self._lock. Returns None for below-threshold records."""
        if level < self._config.minimum_level:
            return None

        merged = dict(self._config.default_tags)
        if tags:
            merged.update(tags)

        return LogRecord(
            timestamp=datetime.now(timezone.utc),
            level=level,
            message=message,
            tags=merged,
            transaction_id=transaction_id,
        )

    # ── Convenience Methods ───────────────────────────────────────

    def debug(self, message: str, tags: Mapping[str, str] | None = None,
              transaction_id: Optional[str] = None) -> Any:
        return self.log(LogLevel.DEBUG, message, tags, transaction_id)

    def info(self, message: str, tags: Mapping[str, str] | None = None,
             transaction_id: Optional[str] = None) -> Any:
        return self.log(LogLevel.INFO, message, tags, transaction_id)

    def warning(self, message: str, tags: Mapping[str, str] | None = None,
                transaction_id: Optional[str] = None) -> Any:
        return self.log(LogLevel.WARNING, message, tags, transaction_id)

    def error(self, message: str, tags: Mapping[str, str] | None = None,
              transaction_id: Optional[str] = None) -> Any:
        return self.log(LogLevel.ERROR, message, tags, transaction_id)

    # ── Transactions ──────────────────────────────────────────────

    def start_transaction(self) -> str:
        """
        Register a new active transaction and return its id.

        Ids are 128-bit random hex strings. If the random source fails the
        id falls back to a nanosecond timestamp, which is only best-effort
        unique. Never raises.
        """
        transaction_id = generate_transaction_id()
        with self._lock:
            self._transactions[transaction_id] = Transaction(
                id=transaction_id, started_at=utc_now()
            )
        return transaction_id

    def end_transaction(self, transaction_id: str) -> Transaction:
        """
        End an active transaction and drop it from the table.

        Returns the finished record (with ended_at set). Nothing is sent to
        the driver. Calling this twice for the same id raises on the second
        call, since ended ids are forgotten.

        Raises:
            UnknownTransactionError: the id is not active.
        """
        with self._lock:
            transaction = self._transactions.pop(transaction_id, None)
            if transaction is None:
                raise UnknownTransactionError(transaction_id)
            transaction.ended_at = utc_now()
        return transaction

    @contextmanager
    def transaction(self) -> Iterator[str]:
        """
        Start a transaction for the duration of a with-block.

        The block may end the transaction itself; exit then leaves it alone
        instead of raising UnknownTransactionError over the block's own error.
        """
        transaction_id = self.start_transaction()
        try:
            yield transaction_id
        finally:
            with self._lock:
                transaction = self._transactions.pop(transaction_id, None)
                if transaction is not None:
                    transaction.ended_at = utc_now()

    @property
    def active_transactions(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._transactions))

    def get_transaction(self, transaction_id: str) -> Transaction | None:
        """Copy of an active transaction, or None."""
        with self._lock:
            transaction = self._transactions.get(transaction_id)
            return replace(transaction) if transaction is not None else None

    # ── Runtime Configuration ─────────────────────────────────────

    def set_minimum_level(self, level: int | str) -> None:
        resolved = LogLevel.from_value(level)
        with self._lock:
            self._config.minimum_level = resolved

    def add_default_tag(self, key: str, value: str) -> None:
        if not key:
            raise ValueError("default tag has empty key")
        if not value:
            raise ValueError("default tag has empty value")
        with self._lock:
            self._config.default_tags[key] = value

    def remove_default_tag(self, key: str) -> None:
        """Remove a default tag. Missing keys are ignored."""
        with self._lock:
            self._config.default_tags.pop(key, None)

    # ── Status ────────────────────────────────────────────────────

    def status(self) -> dict:
        """Current logger state for display."""
        with self._lock:
            return {
                "driver": self._config.driver_name,
                "driver_type": type(self._driver).__name__,
                "minimum_level": int(self._config.minimum_level),
                "minimum_level_name": self._config.minimum_level.name,
                "default_tags": dict(sorted(self._config.default_tags.items())),
                "dispatch": self._dispatch.value,
                "active_transactions": len(self._transactions),
            }

    # ── Cleanup ───────────────────────────────────────────────────

    def close(self) -> Any:
        """Close the driver and return whatever its close() returns."""
        return self._driver.close()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def new_logger(
    config: TelemetryConfig,
    registry: DriverRegistry | None = None,
) -> Logger:
    """Build a Logger from a validated configuration. See Logger.from_config."""
    return Logger.from_config(config, registry)
