"""Tests for sqltemplate.utils.logging module."""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

from sqltemplate.utils.logging import (
    CorrelationIDFilter,
    StructuredFormatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_with_context,
    set_correlation_id,
)
from sqltemplate.utils.serializers import from_json


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def restore_root_logger() -> Generator[logging.Logger, None, None]:
    """Undo configure_logging so later caplog-based tests still see records."""
    root = logging.getLogger("sqltemplate")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


def _record(message: str = "hello", **attrs: object) -> logging.LogRecord:
    record = logging.LogRecord("sqltemplate.test", logging.INFO, __file__, 10, message, (), None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


def test_get_logger_namespaces_names() -> None:
    assert get_logger().name == "sqltemplate"
    assert get_logger("template").name == "sqltemplate.template"
    assert get_logger("sqltemplate.config").name == "sqltemplate.config"


def test_get_logger_adds_single_correlation_filter() -> None:
    logger = get_logger("filters")
    get_logger("filters")

    assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1


def test_correlation_id_round_trip() -> None:
    assert get_correlation_id() is None
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"


def test_correlation_filter_tags_records() -> None:
    set_correlation_id("req-2")
    record = _record()

    assert CorrelationIDFilter().filter(record)
    assert record.correlation_id == "req-2"  # type: ignore[attr-defined]


def test_structured_formatter_emits_json() -> None:
    set_correlation_id("req-3")

    entry = from_json(StructuredFormatter().format(_record("query : SELECT 1", extra_fields={"rows": 2})))

    assert entry["message"] == "query : SELECT 1"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "sqltemplate.test"
    assert entry["correlation_id"] == "req-3"
    assert entry["rows"] == 2
    assert "exception" not in entry


def test_structured_formatter_includes_exception() -> None:
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord("sqltemplate.test", logging.WARNING, __file__, 1, "failed", (), sys.exc_info())

    entry = from_json(StructuredFormatter().format(record))

    assert "ValueError: bad" in entry["exception"]


def test_configure_logging(restore_root_logger: logging.Logger) -> None:
    handler = ListHandler()

    configure_logging(level="DEBUG", format_style="simple", extra_handlers=[handler])

    assert restore_root_logger.level == logging.DEBUG
    assert restore_root_logger.propagate is False
    assert len(restore_root_logger.handlers) == 2
    assert handler.records[-1].getMessage() == "sqltemplate logging configured"


def test_configure_logging_to_file(restore_root_logger: logging.Logger, tmp_path: Path) -> None:
    log_file = tmp_path / "sqltemplate.log"

    configure_logging(level="INFO", log_to_file=str(log_file))
    for handler in restore_root_logger.handlers:
        handler.flush()

    entry = from_json(log_file.read_text().splitlines()[-1])
    assert entry["message"] == "sqltemplate logging configured"
    assert entry["format_style"] == "structured"
    for handler in restore_root_logger.handlers:
        handler.close()


def test_log_with_context(restore_root_logger: logging.Logger) -> None:
    handler = ListHandler()
    restore_root_logger.addHandler(handler)
    restore_root_logger.setLevel(logging.DEBUG)

    log_with_context(get_logger("context"), logging.INFO, "released", connection="c1")

    assert handler.records[-1].extra_fields == {"connection": "c1"}  # type: ignore[attr-defined]


def test_log_with_context_respects_level(restore_root_logger: logging.Logger) -> None:
    handler = ListHandler()
    restore_root_logger.addHandler(handler)
    restore_root_logger.setLevel(logging.ERROR)

    log_with_context(get_logger("context"), logging.INFO, "dropped")

    assert handler.records == []


def test_log_with_context_formats_arguments(restore_root_logger: logging.Logger) -> None:
    handler = ListHandler()
    restore_root_logger.addHandler(handler)
    restore_root_logger.setLevel(logging.DEBUG)

    log_with_context(get_logger("template"), logging.DEBUG, "query : %s", "SELECT 1", sql="SELECT 1")

    record = handler.records[-1]
    assert record.getMessage() == "query : SELECT 1"
    assert record.funcName == "test_log_with_context_formats_arguments"
    assert from_json(StructuredFormatter().format(record))["sql"] == "SELECT 1"


def test_configure_logging_rejects_unknown_settings(restore_root_logger: logging.Logger) -> None:
    with pytest.raises(ValueError, match="log level"):
        configure_logging(level="LOUD")
    with pytest.raises(ValueError, match="format style"):
        configure_logging(format_style="xml")
