"""Tests for structured logging."""

import json
import logging

import pytest

from cdnpurge.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogContext,
    request_id_var,
    site_id_var,
)


def _record(message: str = "purging keys") -> logging.LogRecord:
    return logging.LogRecord("cdnpurge.purge", logging.INFO, __file__, 10, message, None, None)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_fields(self) -> None:
        """Level, logger and message are emitted."""
        data = json.loads(JsonFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "cdnpurge.purge"
        assert data["message"] == "purging keys"
        assert "request_id" not in data

    def test_correlation_context(self) -> None:
        """request_id and site_id from LogContext are included."""
        with LogContext(request_id="req-1", site_id="acme--shop"):
            data = json.loads(JsonFormatter().format(_record()))

        assert data["request_id"] == "req-1"
        assert data["site_id"] == "acme--shop"

    def test_extra_fields(self) -> None:
        """Extra record attributes are serialized."""
        record = _record()
        record.provider = "fastly"
        data = json.loads(JsonFormatter().format(record))

        assert data["provider"] == "fastly"


class TestConsoleFormatter:
    """Tests for ConsoleFormatter."""

    def test_plain_output(self) -> None:
        """Message and request prefix without colors."""
        with LogContext(request_id="abcdef123456"):
            line = ConsoleFormatter(use_colors=False).format(_record())

        assert line.endswith("cdnpurge.purge: purging keys [req=abcdef12]")

    def test_site_tag(self) -> None:
        """site_id is shown next to the request id."""
        with LogContext(request_id="abc", site_id="acme--shop"):
            line = ConsoleFormatter(use_colors=False).format(_record())

        assert line.endswith("[req=abc site=acme--shop]")


class TestLogContext:
    """Tests for LogContext."""

    def test_resets_on_exit(self) -> None:
        """Context variables are restored after the block."""
        with LogContext(request_id="outer"):
            with LogContext(request_id="inner", site_id="s"):
                assert request_id_var.get() == "inner"
            assert request_id_var.get() == "outer"
            assert site_id_var.get() == ""

        assert request_id_var.get() == ""

    def test_unknown_field_rejected(self) -> None:
        """Only known correlation fields can be bound."""
        with pytest.raises(TypeError, match="tenant"):
            LogContext(tenant="t1")
