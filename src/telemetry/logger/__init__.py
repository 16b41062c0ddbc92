"""
Telemetry Logger engine.

Level filtering, tag enrichment and transaction correlation in front of a
single pluggable driver.
"""

from telemetry.logger.core import DispatchMode, Logger, new_logger
from telemetry.logger.records import LogRecord, LogLevel
from telemetry.logger.transactions import Transaction, generate_transaction_id
from telemetry.logger.formatters import LogFormatter, CompactFormatter, LineFormatter, JsonFormatter

__all__ = [
    "DispatchMode",
    "Logger",
    "new_logger",
    "LogRecord",
    "LogLevel",
    "Transaction",
    "generate_transaction_id",
    "LogFormatter",
    "CompactFormatter",
    "LineFormatter",
    "JsonFormatter",
]
