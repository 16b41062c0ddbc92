"""
Driver Registry.

Resolves the driver name in a TelemetryConfig to a live Driver.
"name" → constructor(options) → Driver.

Usage:
    registry = DriverRegistry()
    registry.register("console", ConsoleDriver.from_options)
    driver = registry.resolve(config)

A registry is an ordinary object: build one at startup, register drivers,
and pass it to whatever constructs Loggers. Tests build their own.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from telemetry.drivers.base import Driver, DriverConstructor
from telemetry.errors import DuplicateDriverError, UnknownDriverError

if TYPE_CHECKING:
    from telemetry.config import TelemetryConfig


class DriverRegistry:
    """Name → driver constructor table. Names are unique."""

    def __init__(self) -> None:
        self._constructors: dict[str, DriverConstructor] = {}
        self._lock = threading.Lock()

    # ── Registration ──────────────────────────────────────────────

    def register(self, name: str, constructor: DriverConstructor) -> None:
        """
        Register a driver constructor under a unique name.

        Raises:
            DuplicateDriverError: name is already taken. The existing
                entry is kept.
            ValueError: name is empty.
        """
        if not name:
            raise ValueError("driver name must not be empty")
        with self._lock:
            if name in self._constructors:
                raise DuplicateDriverError(name)
            self._constructors[name] = constructor

    # ── Resolution ────────────────────────────────────────────────

    def resolve(self, config: TelemetryConfig) -> Driver:
        """
        Build the driver named by `config.driver_name`.

        The constructor receives `config.driver_options` as-is. Whatever it
        raises (bad options, unreachable resource) propagates unchanged.

        Raises:
            UnknownDriverError: the name was never registered. No
                constructor is called.
        """
        with self._lock:
            constructor = self._constructors.get(config.driver_name)
            available = sorted(self._constructors)

        if constructor is None:
            raise UnknownDriverError(config.driver_name, available)

        return constructor(config.driver_options)

    def has(self, name: str) -> bool:
        """Check if a driver is registered."""
        with self._lock:
            return name in self._constructors

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._constructors)

    # ── Introspection ─────────────────────────────────────────────

    def list_registered(self) -> list[str]:
        """Registered driver names, sorted. Diagnostic use."""
        with self._lock:
            return sorted(self._constructors)

    def describe(self) -> dict[str, str]:
        """Full listing: {name: constructor qualified name}."""
        with self._lock:
            items = sorted(self._constructors.items())
        return {
            name: f"{getattr(ctor, '__module__', '?')}.{getattr(ctor, '__qualname__', repr(ctor))}"
            for name, ctor in items
        }
