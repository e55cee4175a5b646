"""Tests for structured logging."""

import json
import logging
import sys

from harmonydb.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


def _record(message: str = "Merged releases", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="harmonydb.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=exc_info,
    )


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self):
        result = set_correlation_id("merge-123")
        assert result == "merge-123"
        assert get_correlation_id() == "merge-123"

    def test_set_correlation_id_generates_uuid_when_none(self):
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_stamps_record(self):
        set_correlation_id("filter-456")
        record = _record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "filter-456"


class TestFormatters:
    """Test JSON and compact formatters."""

    def test_json_formatter_fields(self):
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = _record()
        record.correlation_id = "json-789"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "Merged releases"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "harmonydb.test"
        assert payload["correlation_id"] == "json-789"

    def test_json_formatter_includes_exception(self):
        formatter = CustomJsonFormatter("%(message)s")
        try:
            raise ValueError("bad medium position")
        except ValueError:
            record = _record(exc_info=sys.exc_info())

        payload = json.loads(formatter.format(record))

        assert "bad medium position" in payload["exc_info"]

    def test_compact_formatter_shows_chain_root_cause_first(self):
        try:
            try:
                raise KeyError("medium 12")
            except KeyError as e:
                raise RuntimeError("merge planning failed") from e
        except RuntimeError:
            exc_info = sys.exc_info()

        text = CompactExceptionFormatter().formatException(exc_info)

        lines = [line for line in text.splitlines() if line.startswith("╰─►")]
        assert lines == [
            "╰─► KeyError: 'medium 12'",
            "╰─► RuntimeError: merge planning failed",
        ]


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self):
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("test").getEffectiveLevel() <= logging.DEBUG

    def test_configure_logging_info_level(self):
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        assert logging.getLogger("test").getEffectiveLevel() == logging.INFO

    def test_configure_logging_json_format(self):
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")
        root_logger = logging.getLogger()

        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CustomJsonFormatter)

    def test_configure_logging_text_format(self):
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        root_logger = logging.getLogger()

        assert isinstance(root_logger.handlers[0].formatter, CompactExceptionFormatter)

    def test_repeated_configuration_does_not_stack_handlers(self):
        configure_logging(log_level="INFO")
        configure_logging(log_level="INFO")
        assert len(logging.getLogger().handlers) == 1
