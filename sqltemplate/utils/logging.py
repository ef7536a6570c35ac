"""Logging for sqltemplate.

Loggers live under the ``sqltemplate`` namespace. Statement events are logged
through :func:`log_with_context`, which attaches the SQL, the parameter count
and, on failure, the error type as structured fields. :class:`StructuredFormatter`
renders those fields as one JSON object per line; the plain text format ignores them.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqltemplate.utils.serializers import to_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqltemplate"
SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
EXTRA_FIELDS_ATTR = "extra_fields"

correlation_id_var: ContextVar[str | None] = ContextVar("sqltemplate_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag every statement logged from the current context with ``correlation_id``.

    Pass ``None`` to clear it.
    """
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class CorrelationIDFilter(logging.Filter):
    """Copy the context's correlation ID onto each record."""

    def filter(self, record: LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """Render a record and its statement fields as a single JSON line."""

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id is not None:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, EXTRA_FIELDS_ATTR, None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return to_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``sqltemplate`` or a logger below it.

    Args:
        name: Child name such as ``"template"``; already-qualified names are used as-is.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(existing, CorrelationIDFilter) for existing in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def _build_formatter(format_style: str) -> logging.Formatter:
    if format_style == "structured":
        return StructuredFormatter()
    if format_style == "simple":
        return logging.Formatter(SIMPLE_FORMAT)
    msg = f"Unknown log format style {format_style!r}; expected 'structured' or 'simple'"
    raise ValueError(msg)


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
) -> None:
    """Route sqltemplate's statement logs to stdout and, optionally, a file.

    Replaces any handlers on the ``sqltemplate`` logger and stops propagation
    to the root logger. File output is always structured.

    Args:
        level: Level name, e.g. ``"DEBUG"`` to see every ``query : ...`` line.
        format_style: ``"structured"`` (JSON lines) or ``"simple"`` (text).
        log_to_file: Optional path of a file to append to.
        extra_handlers: Handlers to attach as they are.

    Raises:
        ValueError: If ``level`` or ``format_style`` is not recognized.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        msg = f"Unknown log level {level!r}"
        raise ValueError(msg)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    handlers[0].setFormatter(_build_formatter(format_style))
    if log_to_file:
        handlers.append(logging.FileHandler(log_to_file))
        handlers[-1].setFormatter(StructuredFormatter())
    handlers.extend(extra_handlers or ())

    root_logger = get_logger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers[:] = handlers
    root_logger.propagate = False

    log_with_context(
        root_logger,
        logging.INFO,
        "sqltemplate logging configured",
        level=level.upper(),
        format_style=format_style,
        handlers_count=len(handlers),
    )


def log_with_context(
    logger: logging.Logger, level: int, message: str, *args: Any, exc_info: Any = None, **extra_fields: Any
) -> None:
    """Log ``message % args`` with ``extra_fields`` attached for structured output.

    Nothing is formatted when ``level`` is disabled for ``logger``.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, *args, exc_info=exc_info, extra={EXTRA_FIELDS_ATTR: extra_fields}, stacklevel=2)
