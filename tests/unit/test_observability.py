"""Tests for notiondb.observability: structured logging and metrics hooks."""

from __future__ import annotations

import io
import json
import logging
import sys

from notiondb.observability import (
    MetricsHook,
    NoopMetricsHook,
    StructuredFormatter,
    get_logger,
)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="notiondb.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_base_keys(self):
        entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "notiondb.test"
        assert entry["message"] == "hello"
        assert "ts" in entry

    def test_extra_fields_are_merged(self):
        record = _record(extra_fields={"method": "GET", "retry_after": 2})
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["method"] == "GET"
        assert entry["retry_after"] == 2

    def test_non_dict_extra_fields_ignored(self):
        entry = json.loads(StructuredFormatter().format(_record(extra_fields="oops")))
        assert "oops" not in entry.values()

    def test_exception_is_rendered(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(StructuredFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]

    def test_unserialisable_values_use_str(self):
        entry = json.loads(StructuredFormatter().format(_record(extra_fields={"obj": object()})))
        assert entry["obj"].startswith("<object object")


class TestGetLogger:
    def test_handler_attached_once(self):
        stream = io.StringIO()
        logger = get_logger("notiondb.test.once", stream=stream)
        again = get_logger("notiondb.test.once", stream=stream)
        assert logger is again
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_writes_json_lines(self):
        stream = io.StringIO()
        logger = get_logger("notiondb.test.lines", level="INFO", stream=stream)
        logger.info("sent", extra={"extra_fields": {"path": "/databases"}})
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "sent"
        assert entry["path"] == "/databases"

    def test_level_filters(self):
        stream = io.StringIO()
        logger = get_logger("notiondb.test.level", level=logging.ERROR, stream=stream)
        logger.warning("ignored")
        assert stream.getvalue() == ""


class TestMetricsHook:
    def test_noop_satisfies_protocol(self):
        hook = NoopMetricsHook()
        assert isinstance(hook, MetricsHook)
        hook.increment("x", tags={"a": "b"})
        hook.timing("y", 1.5)

    def test_custom_hook_satisfies_protocol(self):
        class Recorder:
            def __init__(self):
                self.calls = []

            def increment(self, name, value=1, tags=None):
                self.calls.append(name)

            def timing(self, name, ms, tags=None):
                self.calls.append(name)

        assert isinstance(Recorder(), MetricsHook)

    def test_object_missing_methods_is_not_a_hook(self):
        assert not isinstance(object(), MetricsHook)
