"""Tests for sqltemplate.exceptions module."""

import pytest

from sqltemplate.exceptions import (
    AcquisitionError,
    CardinalityViolationError,
    ExecutionError,
    ExtraParameterError,
    MappingError,
    MissingParameterError,
    MultipleResultsFoundError,
    NotFoundError,
    ParameterError,
    RepositoryError,
    SQLTemplateError,
    UnsupportedParameterTypeError,
    wrap_exceptions,
)


def test_exception_hierarchy() -> None:
    """Test exception classes inherit correctly."""
    for error_type in (AcquisitionError, ExecutionError, MappingError, ParameterError, RepositoryError):
        assert issubclass(error_type, SQLTemplateError)

    assert issubclass(UnsupportedParameterTypeError, ParameterError)
    assert issubclass(MissingParameterError, ParameterError)
    assert issubclass(ExtraParameterError, ParameterError)
    assert issubclass(CardinalityViolationError, RepositoryError)
    assert issubclass(NotFoundError, CardinalityViolationError)
    assert issubclass(MultipleResultsFoundError, CardinalityViolationError)


def test_exception_instantiation() -> None:
    exc = AcquisitionError("Pool exhausted")
    assert str(exc) == "Pool exhausted"
    assert repr(exc) == "AcquisitionError - Pool exhausted"


def test_detail_keyword() -> None:
    exc = SQLTemplateError("first", "second", detail="the detail")
    assert exc.detail == "the detail"
    assert str(exc) == "first second the detail"


def test_sql_context_is_appended() -> None:
    exc = ExecutionError("syntax error", "SELEC 1")
    assert exc.sql == "SELEC 1"
    assert str(exc) == "syntax error\nSQL: SELEC 1"


def test_unsupported_parameter_type_fields() -> None:
    exc = UnsupportedParameterTypeError(3, complex)
    assert exc.index == 3
    assert exc.value_type is complex
    assert "'complex' at index 3" in str(exc)


def test_cardinality_row_count() -> None:
    exc = MultipleResultsFoundError("Expected exactly one row, found 4", row_count=4)
    assert exc.row_count == 4


def test_wrap_exceptions_wraps_foreign_errors() -> None:
    with pytest.raises(ExecutionError, match="Commit failed: locked") as exc_info, wrap_exceptions(
        ExecutionError, "Commit failed"
    ):
        raise RuntimeError("locked")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_wrap_exceptions_passes_own_errors_through() -> None:
    original = NotFoundError("No rows found", row_count=0)

    with pytest.raises(NotFoundError) as exc_info, wrap_exceptions(ExecutionError):
        raise original

    assert exc_info.value is original


def test_wrap_exceptions_default_type() -> None:
    with pytest.raises(RepositoryError, match="An error occurred during the operation"), wrap_exceptions():
        raise KeyError("x")
