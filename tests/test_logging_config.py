"""Tests for logging configuration, formatters and the component adapter."""

import io
import json
import logging

import pytest

from community_os.logging import ComponentLoggerAdapter, get_logger
from community_os.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from community_os.logging.context import clear_log_context, log_context


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def logger():
    """Create a test logger with no handlers attached."""
    test_logger = logging.getLogger("test_community_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_mandatory_fields(logger):
    """Test JSONFormatter renders timestamp, level, logger and message."""
    record = logger.makeRecord("search", logging.INFO, "x.py", 1, "Search started", (), None)

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["level"] == "INFO"
    assert log_obj["logger"] == "search"
    assert log_obj["message"] == "Search started"
    assert log_obj["timestamp"].endswith("Z")
    assert len(log_obj["timestamp"]) == 24


def test_json_formatter_with_extra_fields(logger):
    """Test JSONFormatter includes extras and stringifies unknown types."""
    record = logger.makeRecord(
        "search",
        logging.INFO,
        "x.py",
        1,
        "Search completed",
        (),
        None,
        extra={
            "event": "search.request.completed",
            "returned_count": 3,
            "exclude_unavailable": True,
            "ids": {1, 2},
        },
    )

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "search.request.completed"
    assert log_obj["returned_count"] == 3
    assert log_obj["exclude_unavailable"] is True
    assert isinstance(log_obj["ids"], str)
    assert "name" not in log_obj
    assert "msg" not in log_obj


def test_contextual_filter_adds_service_and_context(logger):
    """Test ContextualFilter stamps service metadata and active context."""
    context_filter = ContextualFilter(service="community-os", environment="test")

    with log_context(request_id="abc123", profile_id=7):
        record = logger.makeRecord("matching", logging.INFO, "x.py", 1, "Spin", (), None)
        context_filter.filter(record)

    assert record.service == "community-os"
    assert record.environment == "test"
    assert record.request_id == "abc123"
    assert record.profile_id == 7


def test_contextual_filter_explicit_extra_wins(logger):
    """Test an explicit extra field is not overwritten by the context."""
    context_filter = ContextualFilter()

    with log_context(profile_id=7):
        record = logger.makeRecord(
            "matching", logging.INFO, "x.py", 1, "Spin", (), None, extra={"profile_id": 9}
        )
        context_filter.filter(record)

    assert record.profile_id == 9


def test_key_value_formatter_renders_pairs(logger):
    """Test KeyValueFormatter appends sorted key=value pairs."""
    formatter = KeyValueFormatter("[%(levelname)s] %(name)s: %(message)s")
    record = logger.makeRecord(
        "search",
        logging.WARNING,
        "x.py",
        1,
        "Explanation generation failed",
        (),
        None,
        extra={
            "event": "search.explanation.fallback",
            "reason": "rate limited",
            "score": 0.5,
            "cached": False,
            "model": None,
        },
    )

    output = formatter.format(record)

    assert output.startswith("[WARNING] search: Explanation generation failed ")
    assert "event=search.explanation.fallback" in output
    assert 'reason="rate limited"' in output
    assert "score=0.5000" in output
    assert "cached=false" in output
    assert "model=null" in output
    assert output.index("cached=") < output.index("event=")


def test_key_value_formatter_skips_service_fields(logger):
    """Test service and environment are not repeated on every line."""
    formatter = KeyValueFormatter("%(message)s")
    record = logger.makeRecord("search", logging.INFO, "x.py", 1, "hello", (), None)
    ContextualFilter(environment="test").filter(record)

    assert formatter.format(record) == "hello"


def test_component_adapter_merges_extras():
    """Test the adapter adds its component and lets call extras override it."""
    adapter = get_logger("community_os.test", component="search")

    assert isinstance(adapter, ComponentLoggerAdapter)

    _, kwargs = adapter.process("msg", {"extra": {"event": "search.request.started"}})
    assert kwargs["extra"] == {"component": "search", "event": "search.request.started"}

    _, kwargs = adapter.process("msg", {"extra": {"component": "override"}})
    assert kwargs["extra"]["component"] == "override"


def test_get_logger_without_component_returns_plain_logger():
    """Test get_logger without a component returns a stdlib logger."""
    assert isinstance(get_logger("community_os.test"), logging.Logger)


def test_configure_logging_invalid_level():
    """Test configure_logging rejects invalid log level."""
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="INVALID")


def test_configure_logging_invalid_format():
    """Test configure_logging rejects invalid format type."""
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_configure_logging_json_to_stream(restore_root_logger):
    """Test configure_logging installs a JSON handler writing to the given stream."""
    stream = io.StringIO()

    configure_logging(level="DEBUG", format_type="json", environment="test", stream=stream)

    root_logger = logging.getLogger()
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)
    assert root_logger.level == logging.DEBUG

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert lines[-1]["event"] == "logging.configured"
    assert lines[-1]["service"] == "community-os"
    assert lines[-1]["environment"] == "test"


def test_configure_logging_key_value_format(restore_root_logger):
    """Test configure_logging with key-value format."""
    configure_logging(level="info", format_type="key-value", stream=io.StringIO())

    root_logger = logging.getLogger()
    assert isinstance(root_logger.handlers[0].formatter, KeyValueFormatter)
    assert root_logger.level == logging.INFO
    assert logging.getLogger("urllib3").level == logging.WARNING
