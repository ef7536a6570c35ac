from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "AcquisitionError",
    "CardinalityViolationError",
    "ExecutionError",
    "ExtraParameterError",
    "ImproperConfigurationError",
    "MappingError",
    "MissingParameterError",
    "MultipleResultsFoundError",
    "NotFoundError",
    "ParameterError",
    "RepositoryError",
    "ResultSetError",
    "SQLTemplateError",
    "UnsupportedParameterTypeError",
    "wrap_exceptions",
)


class SQLTemplateError(Exception):
    """Base exception class from which all sqltemplate exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLTemplateError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SQLTemplateError):
    """Improper Configuration error.

    Raised when a connection source, statement config or row mapper is set up
    with values that cannot work.
    """


class AcquisitionError(SQLTemplateError):
    """A connection or statement could not be obtained."""


class ExecutionError(SQLTemplateError):
    """The underlying execute call failed."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MappingError(SQLTemplateError):
    """The row mapper raised while converting a row."""

    row_number: Optional[int]

    def __init__(self, message: str, row_number: Optional[int] = None) -> None:
        super().__init__(detail=message)
        self.row_number = row_number


class ResultSetError(SQLTemplateError):
    """A row was read outside a valid cursor position."""


# -- SQL Parameter Errors --
class ParameterError(SQLTemplateError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class UnsupportedParameterTypeError(ParameterError):
    """A bound value's runtime type has no binding rule."""

    index: int
    value_type: type

    def __init__(self, index: int, value_type: type, sql: Optional[str] = None) -> None:
        super().__init__(f"Unsupported parameter type {value_type.__name__!r} at index {index}", sql)
        self.index = index
        self.value_type = value_type


class MissingParameterError(ParameterError):
    """Raised when required parameters are missing."""


class ExtraParameterError(ParameterError):
    """Raised when extra parameters are provided."""


class RepositoryError(SQLTemplateError):
    """Base repository exception type."""


class CardinalityViolationError(RepositoryError):
    """A query expected to return exactly one row returned zero or several."""

    row_count: int

    def __init__(self, message: str, row_count: int) -> None:
        super().__init__(detail=message)
        self.row_count = row_count


class NotFoundError(CardinalityViolationError):
    """An identity does not exist."""


class MultipleResultsFoundError(CardinalityViolationError):
    """A single database result was required but more than one were found."""


@contextmanager
def wrap_exceptions(
    wrap_as: "type[SQLTemplateError]" = RepositoryError, message: str = "An error occurred during the operation."
) -> Generator[None, None, None]:
    """Re-raise foreign exceptions as ``wrap_as``.

    Exceptions that already belong to the sqltemplate hierarchy pass through untouched.
    """
    try:
        yield

    except SQLTemplateError:
        raise
    except Exception as exc:
        raise wrap_as(f"{message}: {exc}") from exc
