"""
Telemetry: structured logging with pluggable drivers.

    from telemetry import load_config, new_logger

    log = new_logger(load_config("telemetry.yaml"))
    with log.transaction() as txn:
        log.info("Payment captured", tags={"order": "A-17"}, transaction_id=txn)
    log.close()
"""

from telemetry.errors import (
    TelemetryError,
    DuplicateDriverError,
    UnknownDriverError,
    LoggerConstructionError,
    DriverDeliveryError,
    UnknownTransactionError,
    ConfigError,
)
from telemetry.logger import DispatchMode, Logger, LogLevel, LogRecord, Transaction, new_logger
from telemetry.config import TelemetryConfig, load_config
from telemetry.drivers import Driver, DriverRegistry, builtin_registry, register_builtin_drivers

__version__ = "0.1.0"

__all__ = [
    "TelemetryError",
    "DuplicateDriverError",
    "UnknownDriverError",
    "LoggerConstructionError",
    "DriverDeliveryError",
    "UnknownTransactionError",
    "ConfigError",
    "DispatchMode",
    "Logger",
    "LogLevel",
    "LogRecord",
    "Transaction",
    "new_logger",
    "TelemetryConfig",
    "load_config",
    "Driver",
    "DriverRegistry",
    "builtin_registry",
    "register_builtin_drivers",
]
