"""
Drivers: the sinks a Logger delivers records to, and the registry that
builds them by name.
"""

from telemetry.drivers.base import Driver, DriverConstructor
from telemetry.drivers.registry import DriverRegistry
from telemetry.drivers.console import ConsoleDriver
from telemetry.drivers.file import FileDriver, JsonDriver
from telemetry.drivers.elasticsearch import ElasticsearchDriver
from telemetry.drivers.memory import MemoryDriver
from telemetry.drivers.defaults import BUILTIN_DRIVERS, builtin_registry, register_builtin_drivers

__all__ = [
    "Driver",
    "DriverConstructor",
    "DriverRegistry",
    "ConsoleDriver",
    "FileDriver",
    "JsonDriver",
    "ElasticsearchDriver",
    "MemoryDriver",
    "BUILTIN_DRIVERS",
    "builtin_registry",
    "register_builtin_drivers",
]
