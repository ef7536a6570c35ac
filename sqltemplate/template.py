"""Single-statement execution over a connection source."""

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

from sqltemplate.exceptions import MappingError, MultipleResultsFoundError, NotFoundError, SQLTemplateError
from sqltemplate.mapping import scalar_row_mapper
from sqltemplate.parameters import ParameterBinder
from sqltemplate.result import StatementResult
from sqltemplate.statement import PreparedStatement
from sqltemplate.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqltemplate.protocols import ConnectionSource, RowMapper
    from sqltemplate.statement import ResultSet, StatementConfig

__all__ = ("SQLTemplate",)

logger = get_logger("template")

T = TypeVar("T")

SINGLE_RESULT_SIZE = 1


class SQLTemplate:
    """Run one SQL statement per call against connections from ``config``.

    Every call acquires its own connection and cursor and releases both before
    returning, whatever happens in between. Failures on the way (acquiring,
    binding, executing, mapping) are logged as warnings and, with
    ``suppress_errors`` left on, swallowed: ``execute`` returns ``None`` and
    ``query`` returns an empty list. ``execute_result`` and ``query_result``
    hand back a :class:`~sqltemplate.result.StatementResult` carrying the error
    instead.

    Example:
        >>> template = SQLTemplate(SqliteConfig())
        >>> template.execute("CREATE TABLE users (id INTEGER, name TEXT, age INTEGER)")
        >>> template.execute("INSERT INTO users VALUES (?, ?, ?)", 1, "a", 30)
        >>> template.query("SELECT name FROM users WHERE age > ?", scalar_row_mapper, 20)
        ['a']
    """

    __slots__ = ("binder", "config", "statement_config", "suppress_errors")

    def __init__(
        self,
        config: "ConnectionSource",
        *,
        statement_config: "Optional[StatementConfig]" = None,
        binder: "Optional[ParameterBinder]" = None,
        suppress_errors: bool = True,
    ) -> None:
        """Initialize the template.

        Args:
            config: Connection source lending out one connection per call.
            statement_config: Overrides the connection source's statement config.
            binder: Parameter binder; the default handles the common Python scalar types.
            suppress_errors: Swallow execution-path failures instead of raising them.
        """
        self.config = config
        self.statement_config = statement_config or config.statement_config
        self.binder = binder or ParameterBinder()
        self.suppress_errors = suppress_errors

    def _run(
        self, sql: str, parameters: "tuple[Any, ...]", action: "Callable[[PreparedStatement], StatementResult[T]]"
    ) -> "StatementResult[T]":
        try:
            with self.config.provide_connection() as connection, PreparedStatement(
                connection, sql, self.statement_config
            ) as statement:
                log_with_context(logger, logging.DEBUG, "query : %s", sql, sql=sql, parameter_count=len(parameters))
                self.binder.bind_all(statement, parameters)
                return action(statement)
        except SQLTemplateError as exc:
            log_with_context(
                logger,
                logging.WARNING,
                "SQL exception alert: %s",
                exc.detail,
                exc_info=exc,
                sql=sql,
                parameter_count=len(parameters),
                error_type=type(exc).__name__,
            )
            return StatementResult(sql, error=exc)

    def _finish(self, result: "StatementResult[T]") -> "list[T]":
        if self.suppress_errors:
            return result.data
        return result.unwrap()

    @staticmethod
    def _map_rows(result_set: "ResultSet", row_mapper: "RowMapper[T]") -> "list[T]":
        rows: list[T] = []
        try:
            while result_set.next():
                try:
                    rows.append(row_mapper(result_set))
                except Exception as exc:
                    msg = f"Row mapper failed on row {result_set.row_number}: {exc}"
                    raise MappingError(msg, row_number=result_set.row_number) from exc
        finally:
            result_set.close()
        return rows

    def execute_result(self, sql: str, *parameters: Any) -> "StatementResult[Any]":
        """Run a mutating statement and report the affected row count or the failure."""

        def _update(statement: PreparedStatement) -> "StatementResult[Any]":
            return StatementResult(sql, rows_affected=statement.execute_update())

        return self._run(sql, parameters, _update)

    def execute(self, sql: str, *parameters: Any) -> None:
        """Run an INSERT, UPDATE, DELETE or DDL statement.

        Raises:
            SQLTemplateError: Only when ``suppress_errors`` is off.
        """
        self._finish(self.execute_result(sql, *parameters))

    def query_result(self, sql: str, row_mapper: "RowMapper[T]", *parameters: Any) -> "StatementResult[T]":
        """Run a reading statement and report the mapped rows or the failure."""

        def _select(statement: PreparedStatement) -> "StatementResult[T]":
            rows = self._map_rows(statement.execute_query(), row_mapper)
            return StatementResult(sql, data=rows, rows_affected=len(rows))

        return self._run(sql, parameters, _select)

    def query(self, sql: str, row_mapper: "RowMapper[T]", *parameters: Any) -> "list[T]":
        """Run a reading statement and map every row, in delivery order.

        Returns:
            The mapped rows; an empty list if the call failed and errors are suppressed.
        """
        return self._finish(self.query_result(sql, row_mapper, *parameters))

    def query_single(self, sql: str, row_mapper: "RowMapper[T]", *parameters: Any) -> T:
        """Run a reading statement that must return exactly one row.

        Raises:
            NotFoundError: If no row was returned, including when the query itself failed and was suppressed.
            MultipleResultsFoundError: If more than one row was returned.
        """
        results = self.query(sql, row_mapper, *parameters)
        self._validate_single_result(results)
        return results[0]

    def query_one_or_none(self, sql: str, row_mapper: "RowMapper[T]", *parameters: Any) -> Optional[T]:
        """Run a reading statement that returns at most one row."""
        results = self.query(sql, row_mapper, *parameters)
        if not results:
            return None
        self._validate_single_result(results)
        return results[0]

    def query_value(self, sql: str, *parameters: Any) -> Any:
        """Return the first column of the only row."""
        return self.query_single(sql, scalar_row_mapper, *parameters)

    @staticmethod
    def _validate_single_result(results: "list[Any]") -> None:
        size = len(results)
        if size == SINGLE_RESULT_SIZE:
            return
        log_with_context(logger, logging.WARNING, "Expected exactly one row, found %d", size, row_count=size)
        if size == 0:
            msg = "No rows found"
            raise NotFoundError(msg, row_count=size)
        msg = f"Expected exactly one row, found {size}"
        raise MultipleResultsFoundError(msg, row_count=size)
