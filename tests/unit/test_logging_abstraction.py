"""Unit tests for log formatting and configuration."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from netsdr_client.correlation import correlation_context
from netsdr_client.logging_abstraction import (
    PACKAGE_LOGGER,
    HumanReadableFormatter,
    JSONFormatter,
    configure_logging,
    record_context,
)


def _record(msg: str = "Sent %d bytes", *args: object, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("netsdr_client.test", logging.INFO, __file__, 10, msg, args or (5,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


class TestRecordContext:
    def test_only_extra_fields_returned(self) -> None:
        assert record_context(_record(host="127.0.0.1", port=50000)) == {"host": "127.0.0.1", "port": 50000}

    def test_plain_record_has_no_context(self) -> None:
        assert record_context(_record()) == {}


class TestJSONFormatter:
    def test_fields(self) -> None:
        payload = json.loads(JSONFormatter().format(_record(bytes=5)))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "netsdr_client.test"
        assert payload["message"] == "Sent 5 bytes"
        assert payload["context"] == {"bytes": 5}
        assert payload["correlation_id"] is None

    def test_correlation_id_included(self) -> None:
        with correlation_context("0190abcd-0000-7000-8000-000000000000"):
            payload = json.loads(JSONFormatter().format(_record()))
        assert payload["correlation_id"] == "0190abcd-0000-7000-8000-000000000000"

    def test_exception_included(self) -> None:
        try:
            raise ValueError("bad frame")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad frame" in payload["exception"]

    def test_non_serializable_context(self) -> None:
        payload = json.loads(JSONFormatter().format(_record(path=Path("/tmp/x"))))
        assert payload["context"]["path"] == "/tmp/x"


class TestHumanReadableFormatter:
    def test_without_correlation_id(self) -> None:
        line = HumanReadableFormatter().format(_record())
        assert "INFO" in line
        assert "[--------] > Sent 5 bytes" in line

    def test_with_correlation_id_and_context(self) -> None:
        with correlation_context("0190abcd-0000-7000-8000-000000000000"):
            line = HumanReadableFormatter().format(_record(host="h", port=1))
        assert "[0190abcd] > Sent 5 bytes | host=h | port=1" in line


class TestConfigureLogging:
    def test_unknown_format_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown log format"):
            _ = configure_logging(log_format="xml")

    def test_human_handler_installed(self) -> None:
        package_logger = configure_logging(log_format="human", human_output="stdout", level=logging.DEBUG)

        assert package_logger.name == PACKAGE_LOGGER
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0].formatter, HumanReadableFormatter)

    def test_reconfigure_replaces_handlers(self) -> None:
        _ = configure_logging(log_format="both")
        package_logger = configure_logging(log_format="json")

        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0].formatter, JSONFormatter)

    def test_files_written(self, tmp_path: Path) -> None:
        json_file = tmp_path / "logs" / "netsdr.jsonl"
        human_file = tmp_path / "logs" / "netsdr.log"
        package_logger = configure_logging(log_format="both", json_file=json_file, human_output=str(human_file))

        logging.getLogger("netsdr_client.session").info("Connected", extra={"elapsed_ms": 1.5})
        for handler in package_logger.handlers:
            handler.flush()

        entry = json.loads(json_file.read_text().splitlines()[0])
        assert entry["message"] == "Connected"
        assert entry["context"] == {"elapsed_ms": 1.5}
        assert "Connected | elapsed_ms=1.5" in human_file.read_text()
