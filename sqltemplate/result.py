"""Explicit outcome of a single statement."""

from typing import Generic, Optional, TypeVar

from sqltemplate.exceptions import SQLTemplateError

__all__ = ("StatementResult",)

T = TypeVar("T")


class StatementResult(Generic[T]):
    """What one call produced, or why it produced nothing.

    ``execute`` and ``query`` on :class:`~sqltemplate.template.SQLTemplate`
    discard ``error`` when errors are suppressed; callers that need to know
    use ``execute_result``/``query_result`` and inspect it directly.
    """

    __slots__ = ("data", "error", "rows_affected", "sql")

    def __init__(
        self,
        sql: str,
        data: "Optional[list[T]]" = None,
        rows_affected: int = -1,
        error: "Optional[SQLTemplateError]" = None,
    ) -> None:
        self.sql = sql
        self.data: list[T] = data if data is not None else []
        self.rows_affected = rows_affected
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> "list[T]":
        """Return the mapped rows, raising the captured error if the call failed."""
        if self.error is not None:
            raise self.error
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        if self.error is not None:
            return f"StatementResult(sql={self.sql!r}, error={self.error!r})"
        return f"StatementResult(sql={self.sql!r}, rows={len(self.data)}, rows_affected={self.rows_affected})"
