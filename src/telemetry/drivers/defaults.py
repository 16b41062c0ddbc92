"""
Built-in driver registration.

Usage:
    from telemetry.drivers.defaults import builtin_registry
    registry = builtin_registry()

or, to add the built-ins to a registry that already holds custom drivers:
    register_builtin_drivers(registry)
"""

from telemetry.drivers.base import DriverConstructor
from telemetry.drivers.console import ConsoleDriver
from telemetry.drivers.elasticsearch import ElasticsearchDriver
from telemetry.drivers.file import FileDriver, JsonDriver
from telemetry.drivers.memory import MemoryDriver
from telemetry.drivers.registry import DriverRegistry


BUILTIN_DRIVERS: dict[str, DriverConstructor] = {
    "console": ConsoleDriver.from_options,
    "file": FileDriver.from_options,
    "json": JsonDriver.from_options,
    "elasticsearch": ElasticsearchDriver.from_options,
    "memory": MemoryDriver.from_options,
}


def register_builtin_drivers(registry: DriverRegistry) -> int:
    """
    Register all built-in drivers.

    Raises DuplicateDriverError if one of the built-in names is already
    taken in `registry`. Returns count of drivers registered.
    """
    for name, constructor in BUILTIN_DRIVERS.items():
        registry.register(name, constructor)
    return len(BUILTIN_DRIVERS)


def builtin_registry() -> DriverRegistry:
    """A new registry holding only the built-in drivers."""
    registry = DriverRegistry()
    register_builtin_drivers(registry)
    return registry
