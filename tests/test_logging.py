"""
Unit tests for the logging formatters and the request-ID filter.
"""

import json
import logging

from fundmanager.core.logging import ConsoleFormatter, JSONFormatter, RequestIDFilter
from fundmanager.middleware import _request_id_var


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fundmanager.services.gateway",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestIDFilter:
    def test_stamps_current_request_id(self):
        token = _request_id_var.set("req-123")
        try:
            record = _record()
            assert RequestIDFilter().filter(record) is True
        finally:
            _request_id_var.reset(token)
        assert record.request_id == "req-123"

    def test_none_outside_a_request(self):
        record = _record()
        RequestIDFilter().filter(record)
        assert record.request_id is None

    def test_keeps_explicit_request_id(self):
        record = _record(request_id="given")
        RequestIDFilter().filter(record)
        assert record.request_id == "given"


class TestJSONFormatter:
    def test_core_fields(self):
        entry = json.loads(JSONFormatter().format(_record("Backend call failed")))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "fundmanager.services.gateway"
        assert entry["message"] == "Backend call failed"

    def test_extra_fields_included(self):
        record = _record(operation="add", status_code=500, request_id="r-1")
        entry = json.loads(JSONFormatter().format(record))
        assert entry["operation"] == "add"
        assert entry["status_code"] == 500
        assert entry["request_id"] == "r-1"

    def test_absent_extras_omitted(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert "operation" not in entry
        assert "request_id" not in entry


class TestConsoleFormatter:
    def test_includes_short_request_id(self):
        line = ConsoleFormatter().format(_record(request_id="abcdef123456"))
        assert "[abcdef12]" in line
        assert "hello" in line
