"""
Telemetry CLI.

Entry point: `telemetry <command>`

Commands:
    drivers          List registered drivers
    check CONFIG     Load and validate a config file, print a summary
    demo CONFIG      Build a Logger from CONFIG and emit a short transaction

Returns exit code (0 = success, 1 = error).
"""

from __future__ import annotations

import argparse
import json
import sys

from telemetry.config import TelemetryConfig, load_config
from telemetry.drivers.defaults import builtin_registry
from telemetry.drivers.registry import DriverRegistry
from telemetry.errors import TelemetryError
from telemetry.logger.core import Logger


class TelemetryRunner:
    """
    Runs the CLI commands against one driver registry.

    Usage:
        runner = TelemetryRunner()
        runner.demo(load_config("telemetry.yaml"))
    """

    def __init__(self, registry: DriverRegistry | None = None):
        # Empty registries are falsy; only None selects the built-ins.
        self._registry = registry if registry is not None else builtin_registry()

    @property
    def registry(self) -> DriverRegistry:
        return self._registry

    def drivers(self) -> list[str]:
        return self._registry.list_registered()

    def demo(self, config: TelemetryConfig) -> str:
        """
        Emit debug and info records inside a transaction and a warning
        outside it. Returns the transaction id.
        """
        with Logger.from_config(config, self._registry) as log:
            txn = log.start_transaction()
            tags = {"component": "telemetry.cli"}
            log.debug("Demo transaction started", tags=tags, transaction_id=txn)
            log.info("Demo record inside transaction", tags=tags, transaction_id=txn)
            log.warning("Demo record outside transaction", tags=tags)
            log.end_transaction(txn)
        return txn


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="telemetry",
        description="Structured logging with pluggable drivers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  telemetry drivers                  # List built-in drivers
  telemetry check config.json        # Validate a config file
  telemetry demo config.yaml         # Emit a sample transaction
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("drivers", help="List registered drivers")

    check = sub.add_parser("check", help="Validate a config file")
    check.add_argument("config", help="Path to a YAML or JSON config file")

    demo = sub.add_parser("demo", help="Emit a sample transaction through the configured driver")
    demo.add_argument("config", help="Path to a YAML or JSON config file")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None, registry: DriverRegistry | None = None) -> int:
    args = parse_args(argv)
    runner = TelemetryRunner(registry)

    if args.command == "drivers":
        print("Registered drivers:")
        for name in runner.drivers():
            print(f"  {name}")
        return 0

    try:
        config = load_config(args.config)
    except TelemetryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command == "check":
        print(json.dumps(config.to_dict(), indent=2, default=str))
        return 0

    try:
        txn = runner.demo(config)
    except TelemetryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Transaction {txn} completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
