"""
Pydantic configuration schema for the telemetry Logger.

A configuration names the driver, carries the driver's own options as an
opaque value, and sets the minimum level and default tags:

    driver: json
    driver_config: logs/app.jsonl
    log_level: 1            # or: info
    default_tags:
      environment: prod
    dispatch: serialized    # optional; 'snapshot' calls the driver outside the lock

YAML is a superset of JSON, so the same loader reads `config.json` files.

Usage:
    config = load_config("telemetry.yaml")
    logger = new_logger(config)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from telemetry.errors import ConfigError
from telemetry.logger.core import DispatchMode
from telemetry.logger.records import LogLevel


class TelemetryConfig(BaseModel):
    """
    Validated Logger configuration.

    Field names are Pythonic; the file keys (`driver`, `driver_config`,
    `log_level`) are accepted as aliases and used by to_dict().
    """

    model_config = ConfigDict(populate_by_name=True)

    driver_name: str = Field("", alias="driver")
    driver_options: Any = Field(None, alias="driver_config")
    minimum_level: LogLevel = Field(LogLevel.DEBUG, alias="log_level")
    default_tags: dict[str, str] = Field(default_factory=dict)
    dispatch: DispatchMode = DispatchMode.SERIALIZED

    @field_validator("minimum_level", mode="before")
    @classmethod
    def resolve_level(cls, value: Any) -> LogLevel:
        """Accept 0-3 or a level name."""
        try:
            return LogLevel.from_value(value)
        except TypeError as exc:
            # pydantic only reports ValueError as a validation error
            raise ValueError(f"invalid log level: {exc}") from exc

    @model_validator(mode="after")
    def validate_required(self) -> "TelemetryConfig":
        """Collect every problem into a single message."""
        errors: list[str] = []

        if not self.driver_name:
            errors.append("no driver specified")

        # Options are opaque; they only have to be present.
        if self.driver_options is None:
            errors.append("empty config")

        for key, value in self.default_tags.items():
            if key == "":
                errors.append("default tag has empty key")
            if value == "":
                errors.append("default tag has empty value")

        if errors:
            raise ValueError(f"config validation failed: {'; '.join(errors)}")
        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> "TelemetryConfig":
        """Load and validate from a YAML (or JSON) file."""
        path = Path(path)
        raw = path.read_text(encoding="utf-8")
        return cls.model_validate(yaml.safe_load(raw))

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "TelemetryConfig":
        """Load and validate from a YAML (or JSON) string."""
        return cls.model_validate(yaml.safe_load(yaml_string))

    @classmethod
    def from_dict(cls, data: dict) -> "TelemetryConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        """Export with file keys, ready to be written back as YAML/JSON."""
        return self.model_dump(by_alias=True, mode="json")


def load_config(path: str | Path) -> TelemetryConfig:
    """
    Read, decode and validate a configuration file.

    Raises:
        ConfigError: the file is missing/unreadable, is not valid YAML/JSON,
            or fails validation. The original exception is chained.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed to open config file: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to decode config file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(
            f"failed to decode config file: expected a mapping, got {type(data).__name__}"
        )

    try:
        return TelemetryConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {_describe(exc)}") from exc


def _describe(exc: ValidationError) -> str:
    """Flatten pydantic errors into one line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


__all__ = ["TelemetryConfig", "DispatchMode", "load_config"]
