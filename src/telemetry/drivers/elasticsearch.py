"""
Elasticsearch driver.

Indexes each record as its own document: POST {host}/{index}/_doc.
No bulk API, no retries; one HTTP request per log() call.

Options:
    {"host": "http://localhost:9200", "index": "app-logs",
     "username": "elastic", "password": "...", "timeout": 5.0}
"""

from __future__ import annotations

from typing import Any

import httpx

from telemetry.drivers.base import Driver
from telemetry.errors import DriverDeliveryError
from telemetry.logger.formatters import JsonFormatter
from telemetry.logger.records import LogRecord


class ElasticsearchDriver(Driver):

    def __init__(
        self,
        host: str,
        index: str,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        if not host or not index:
            raise ValueError("elasticsearch host and index required")
        self.index = index
        self.url = f"{host.rstrip('/')}/{index}/_doc"
        self._formatter = JsonFormatter()
        auth = (username, password) if username and password else None
        self._client = httpx.Client(timeout=timeout, auth=auth, transport=transport)

    @classmethod
    def from_options(cls, options: Any) -> "ElasticsearchDriver":
        if not isinstance(options, dict):
            raise ValueError(
                f"elasticsearch options must be a mapping, got {type(options).__name__}"
            )
        return cls(
            host=options.get("host", ""),
            index=options.get("index", ""),
            username=options.get("username"),
            password=options.get("password"),
            timeout=float(options.get("timeout", 5.0)),
        )

    def log(self, record: LogRecord) -> None:
        document = self._formatter.to_document(record)
        try:
            response = self._client.post(self.url, json=document)
        except httpx.HTTPError as exc:
            raise DriverDeliveryError(f"elasticsearch request failed: {exc}") from exc

        if response.status_code >= 300:
            raise DriverDeliveryError(
                f"elasticsearch gave non-2xx status: {response.status_code}"
            )

    def close(self) -> None:
        self._client.close()
