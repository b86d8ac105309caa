"""Tests for logging configuration."""

import json
import logging

from member_stats.core.logging import JSONFormatter, TextFormatter, configure_logging


def make_record(msg="hello", **extra):
    record = logging.LogRecord("member_stats.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_core_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "member_stats.test"
        assert data["message"] == "hello"
        assert "timestamp" in data

    def test_extra_fields_are_included(self):
        data = json.loads(JSONFormatter().format(make_record(request_id="abc")))

        assert data["request_id"] == "abc"


class TestConfigureLogging:

    def test_json_format(self):
        configure_logging(level="debug", format_type="json")
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_text_format_is_default(self):
        configure_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)
