"""
Tests for the built-in drivers.

Covers:
- Console (stdout/stderr routing, color)
- File and JSON (line layout, append, close, option parsing)
- Elasticsearch (document body, auth, non-2xx, transport errors)
- Memory (ring buffer, level filter)
- Drivers resolved through a Logger end to end
"""

import base64
import json
import threading
from datetime import datetime, timezone

import httpx
import pytest

from telemetry.config import TelemetryConfig
from telemetry.drivers.console import ConsoleDriver
from telemetry.drivers.defaults import builtin_registry
from telemetry.drivers.elasticsearch import ElasticsearchDriver
from telemetry.drivers.file import FileDriver, JsonDriver, path_from_options
from telemetry.drivers.memory import MemoryDriver
from telemetry.errors import DriverDeliveryError, LoggerConstructionError
from telemetry.logger.core import new_logger
from telemetry.logger.records import LogLevel, LogRecord


def record(level=LogLevel.INFO, message="hello", tags=None, transaction_id=None) -> LogRecord:
    return LogRecord(
        timestamp=datetime(2026, 3, 1, 9, 15, 0, tzinfo=timezone.utc),
        level=level,
        message=message,
        tags=tags or {},
        transaction_id=transaction_id,
    )


# ═══════════════════════════════════════════════════════════════════
#  Console
# ═══════════════════════════════════════════════════════════════════

class TestConsoleDriver:
    def test_info_to_stdout(self, capsys):
        ConsoleDriver().log(record(message="hello terminal"))
        captured = capsys.readouterr()
        assert "hello terminal" in captured.out
        assert captured.err == ""

    def test_error_to_stderr(self, capsys):
        ConsoleDriver().log(record(level=LogLevel.ERROR, message="bad thing"))
        captured = capsys.readouterr()
        assert "bad thing" in captured.err

    def test_fixed_stream(self, capsys):
        ConsoleDriver(stream="stderr").log(record(message="forced"))
        assert "forced" in capsys.readouterr().err

    def test_color_codes_applied(self, capsys):
        ConsoleDriver(color=True).log(record(level=LogLevel.WARNING, message="caution"))
        out = capsys.readouterr().out
        assert "\033[33m" in out
        assert "\033[0m" in out

    def test_from_options(self):
        assert ConsoleDriver.from_options("").color is False
        driver = ConsoleDriver.from_options({"color": True, "stream": "stdout"})
        assert driver.color is True
        assert driver.stream == "stdout"

    def test_bad_stream(self):
        with pytest.raises(ValueError):
            ConsoleDriver(stream="printer")


# ═══════════════════════════════════════════════════════════════════
#  File / JSON
# ═══════════════════════════════════════════════════════════════════

class TestFileDriver:
    def test_writes_line(self, tmp_path):
        path = tmp_path / "log.txt"
        driver = FileDriver(path)
        driver.log(record(tags={"CPU": "50%"}))
        driver.close()
        assert path.read_text() == "2026-03-01T09:15:00Z 1 hello map[CPU:50%]\n"

    def test_appends(self, tmp_path):
        path = tmp_path / "log.txt"
        path.write_text("existing\n")
        driver = FileDriver(path)
        driver.log(record(message="new"))
        driver.close()
        lines = path.read_text().splitlines()
        assert lines[0] == "existing"
        assert lines[1].endswith("new map[]")

    def test_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "log.txt"
        FileDriver(path).close()
        assert path.exists()

    def test_flushes_each_record(self, tmp_path):
        path = tmp_path / "log.txt"
        driver = FileDriver(path)
        driver.log(record(message="visible"))
        assert "visible" in path.read_text()
        driver.close()

    def test_close_is_idempotent(self, tmp_path):
        driver = FileDriver(tmp_path / "log.txt")
        driver.close()
        driver.close()
        assert driver.closed

    def test_log_after_close_fails(self, tmp_path):
        driver = FileDriver(tmp_path / "log.txt")
        driver.close()
        with pytest.raises(DriverDeliveryError, match="closed"):
            driver.log(record())

    def test_path_from_options(self, tmp_path):
        assert path_from_options("a/b.log").name == "b.log"
        assert path_from_options({"path": "c.log"}).name == "c.log"
        with pytest.raises(ValueError):
            path_from_options("")
        with pytest.raises(ValueError):
            path_from_options(42)

    def test_unopenable_path(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(OSError):
            FileDriver(blocker / "log.txt")


class TestJsonDriver:
    def test_one_object_per_line(self, tmp_path):
        path = tmp_path / "log.jsonl"
        driver = JsonDriver.from_options(str(path))
        driver.log(record(message="first", transaction_id="t1"))
        driver.log(record(level=LogLevel.ERROR, message="second", tags={"k": "v"}))
        driver.close()

        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert [obj["message"] for obj in lines] == ["first", "second"]
        assert lines[0]["transaction_id"] == "t1"
        assert lines[1]["level"] == 3
        assert lines[1]["level_name"] == "ERROR"
        assert lines[1]["tags"] == {"k": "v"}


# ═══════════════════════════════════════════════════════════════════
#  Elasticsearch
# ═══════════════════════════════════════════════════════════════════

class TestElasticsearchDriver:
    def _driver(self, handler, **kwargs) -> ElasticsearchDriver:
        return ElasticsearchDriver(
            host="http://es.local:9200/",
            index="app-logs",
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    def test_posts_document(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"result": "created"})

        driver = self._driver(handler)
        driver.log(record(tags={"env": "prod"}, transaction_id="t1"))
        driver.close()

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://es.local:9200/app-logs/_doc"
        body = json.loads(request.content)
        assert body["message"] == "hello"
        assert body["level"] == 1
        assert body["tags"] == {"env": "prod"}
        assert body["transaction_id"] == "t1"
        assert body["timestamp"] == "2026-03-01T09:15:00Z"
        assert "authorization" not in request.headers

    def test_basic_auth(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200)

        driver = self._driver(handler, username="elastic", password="secret")
        driver.log(record())
        expected = base64.b64encode(b"elastic:secret").decode()
        assert seen[0].headers["authorization"] == f"Basic {expected}"

    def test_non_2xx_raises(self):
        driver = self._driver(lambda request: httpx.Response(503))
        with pytest.raises(DriverDeliveryError, match="non-2xx status: 503"):
            driver.log(record())

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        driver = self._driver(handler)
        with pytest.raises(DriverDeliveryError, match="request failed") as exc_info:
            driver.log(record())
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_from_options_requires_host_and_index(self):
        with pytest.raises(ValueError, match="host and index required"):
            ElasticsearchDriver.from_options({"host": "http://es:9200"})
        with pytest.raises(ValueError, match="must be a mapping"):
            ElasticsearchDriver.from_options("http://es:9200")

    def test_from_options(self):
        driver = ElasticsearchDriver.from_options({"host": "http://es:9200", "index": "logs"})
        assert driver.url == "http://es:9200/logs/_doc"
        driver.close()


# ═══════════════════════════════════════════════════════════════════
#  Memory
# ═══════════════════════════════════════════════════════════════════

class TestMemoryDriver:
    def test_ring_buffer(self):
        driver = MemoryDriver(capacity=5)
        for i in range(10):
            driver.log(record(message=f"msg {i}"))
        assert driver.count == 5
        recent = driver.get_recent(n=3)
        assert [r.message for r in recent] == ["msg 7", "msg 8", "msg 9"]

    def test_count_under_concurrent_writes(self):
        driver = MemoryDriver(capacity=1000)

        def writer():
            for i in range(100):
                driver.log(record(message=f"msg {i}"))

        threads = [threading.Thread(target=writer) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert driver.count == 500
        assert len(driver.records) == driver.count

    def test_filter_by_level(self):
        driver = MemoryDriver()
        driver.log(record(level=LogLevel.DEBUG, message="d"))
        driver.log(record(level=LogLevel.WARNING, message="w"))
        driver.log(record(level=LogLevel.ERROR, message="e"))
        assert [r.message for r in driver.get_recent(level="warning")] == ["w", "e"]

    def test_clear_and_close(self):
        driver = MemoryDriver()
        driver.log(record())
        driver.clear()
        assert driver.count == 0
        driver.close()
        assert driver.closed

    def test_from_options(self):
        assert MemoryDriver.from_options({"capacity": 3}).capacity == 3
        assert MemoryDriver.from_options("").capacity == 10000

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            MemoryDriver(capacity=0)


# ═══════════════════════════════════════════════════════════════════
#  Through a Logger
# ═══════════════════════════════════════════════════════════════════

class TestDriversThroughLogger:
    def test_json_driver_end_to_end(self, tmp_path):
        path = tmp_path / "log.json"
        config = TelemetryConfig.from_dict({
            "driver": "json",
            "driver_config": str(path),
            "log_level": "info",
            "default_tags": {"environment": "test"},
        })
        with new_logger(config, builtin_registry()) as log:
            with log.transaction() as txn:
                log.debug("dropped", transaction_id=txn)
                log.info("kept", {"CPU": "69%"}, transaction_id=txn)

        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert len(lines) == 1
        assert lines[0]["message"] == "kept"
        assert lines[0]["tags"] == {"environment": "test", "CPU": "69%"}
        assert lines[0]["transaction_id"] == txn

    def test_bad_options_fail_construction(self):
        config = TelemetryConfig.from_dict({"driver": "elasticsearch", "driver_config": {}})
        with pytest.raises(LoggerConstructionError) as exc_info:
            new_logger(config, builtin_registry())
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_delivery_error_reaches_caller(self, tmp_path):
        config = TelemetryConfig.from_dict({"driver": "file", "driver_config": str(tmp_path / "x.log")})
        log = new_logger(config, builtin_registry())
        log.close()
        with pytest.raises(DriverDeliveryError):
            log.info("after close")
