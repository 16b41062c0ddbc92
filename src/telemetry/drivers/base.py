"""
Driver capability.

A driver is the sink a Logger delivers records to. The core calls exactly
two methods on it and does not interpret their results or exceptions.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from telemetry.logger.records import LogRecord


class Driver(ABC):
    """Base driver. Receives fully built, level-filtered records."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def log(self, record: LogRecord) -> Any:
        """Deliver one record. May block on I/O."""
        ...

    def close(self) -> Any:
        """Release resources. Override if the driver holds any."""
        return None


# Registered under a driver name; receives the config's opaque driver options.
DriverConstructor = Callable[[Any], Driver]
