"""Prepared statements and result sets over DB-API cursors.

A :class:`PreparedStatement` owns exactly one cursor for the span of one call.
Values are bound into a 1-based slot table by the typed ``set_*`` operations
and are handed to ``cursor.execute`` in slot order when the statement runs.
"""

import contextlib
import datetime
from collections.abc import Callable
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional, Union
from uuid import UUID

from sqltemplate.exceptions import (
    AcquisitionError,
    ExecutionError,
    MissingParameterError,
    ParameterError,
    ResultSetError,
    wrap_exceptions,
)
from sqltemplate.utils.logging import get_logger
from sqltemplate.utils.serializers import from_json, to_json
from sqltemplate.utils.type_guards import is_dict_row, is_indexable_row

if TYPE_CHECKING:
    from sqltemplate.protocols import DBAPIConnection, DBAPICursor

__all__ = ("INITIAL_PARAM_INDEX", "PreparedStatement", "ResultSet", "StatementConfig")

logger = get_logger("statement")

INITIAL_PARAM_INDEX = 1

Column = Union[int, str]


class StatementConfig:
    """Per-dialect settings applied to every statement a connection source prepares."""

    __slots__ = ("dialect", "type_coercion_map", "validate_parameter_count")

    def __init__(
        self,
        dialect: Optional[str] = None,
        type_coercion_map: "Optional[dict[type, Callable[[Any], Any]]]" = None,
        validate_parameter_count: bool = True,
    ) -> None:
        """Initialize statement config.

        Args:
            dialect: sqlglot dialect name used for placeholder validation.
            type_coercion_map: Driver-specific conversions applied to bound values, keyed by type.
            validate_parameter_count: Compare the number of values with the placeholders in the SQL.
        """
        self.dialect = dialect
        self.type_coercion_map = type_coercion_map or {}
        self.validate_parameter_count = validate_parameter_count

    def replace(self, **changes: Any) -> "StatementConfig":
        """Return a copy with the given attributes replaced."""
        current = {name: getattr(self, name) for name in self.__slots__}
        current.update(changes)
        return StatementConfig(**current)

    def coerce(self, value: Any) -> Any:
        """Apply the first matching driver coercion to ``value``."""
        for type_check, converter in self.type_coercion_map.items():
            if isinstance(value, type_check):
                return converter(value)
        return value

    def __repr__(self) -> str:
        return (
            f"StatementConfig(dialect={self.dialect!r}, "
            f"type_coercion_map={self.type_coercion_map!r}, "
            f"validate_parameter_count={self.validate_parameter_count!r})"
        )


class PreparedStatement:
    """One SQL statement bound to one cursor of one connection."""

    __slots__ = ("_bindings", "_cursor", "_result_set", "connection", "sql", "statement_config")

    def __init__(
        self, connection: "DBAPIConnection", sql: str, statement_config: "Optional[StatementConfig]" = None
    ) -> None:
        self.connection = connection
        self.sql = sql
        self.statement_config = statement_config or StatementConfig()
        self._cursor: Optional[DBAPICursor] = None
        self._result_set: Optional[ResultSet] = None
        self._bindings: dict[int, Any] = {}

    def __enter__(self) -> "PreparedStatement":
        with wrap_exceptions(AcquisitionError, "Could not prepare statement"):
            self._cursor = self.connection.cursor()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def cursor(self) -> "DBAPICursor":
        if self._cursor is None:
            msg = "Statement is not open"
            raise AcquisitionError(msg)
        return self._cursor

    @property
    def parameters(self) -> "tuple[Any, ...]":
        """Bound values in placeholder order.

        Raises:
            MissingParameterError: If an index between 1 and the highest bound index was skipped.
        """
        if not self._bindings:
            return ()
        highest = max(self._bindings)
        missing = [index for index in range(INITIAL_PARAM_INDEX, highest + 1) if index not in self._bindings]
        if missing:
            msg = f"No value bound for parameter index(es) {missing}"
            raise MissingParameterError(msg, self.sql)
        return tuple(self._bindings[index] for index in range(INITIAL_PARAM_INDEX, highest + 1))

    def _check_index(self, index: int) -> None:
        if index < INITIAL_PARAM_INDEX:
            msg = f"Parameter index must be >= {INITIAL_PARAM_INDEX}, got {index}"
            raise ParameterError(msg, self.sql)

    def _bind(self, index: int, value: Any) -> None:
        self._check_index(index)
        self._bindings[index] = self.statement_config.coerce(value)

    def set_null(self, index: int, value: None = None) -> None:
        self._check_index(index)
        self._bindings[index] = None

    def set_bool(self, index: int, value: bool) -> None:
        self._bind(index, value)

    def set_int(self, index: int, value: int) -> None:
        self._bind(index, value)

    def set_float(self, index: int, value: float) -> None:
        self._bind(index, value)

    def set_decimal(self, index: int, value: Decimal) -> None:
        self._bind(index, value)

    def set_str(self, index: int, value: str) -> None:
        self._bind(index, value)

    def set_bytes(self, index: int, value: "Union[bytes, bytearray, memoryview]") -> None:
        self._bind(index, bytes(value))

    def set_datetime(self, index: int, value: datetime.datetime) -> None:
        self._bind(index, value)

    def set_date(self, index: int, value: datetime.date) -> None:
        self._bind(index, value)

    def set_time(self, index: int, value: datetime.time) -> None:
        self._bind(index, value)

    def set_uuid(self, index: int, value: UUID) -> None:
        self._bind(index, value)

    def set_json(self, index: int, value: Any) -> None:
        """Bind a dict, list or tuple as JSON text."""
        self._check_index(index)
        self._bindings[index] = to_json(list(value) if isinstance(value, tuple) else value)

    def _execute(self, failure_message: str) -> None:
        parameters = self.parameters
        cursor = self.cursor
        try:
            cursor.execute(self.sql, parameters)
        except Exception as exc:
            msg = f"{failure_message}: {exc}"
            raise ExecutionError(msg, self.sql) from exc

    def execute_update(self) -> int:
        """Run a mutating statement and return the affected row count, or -1 if the driver does not report it."""
        self._execute("Statement execution failed")
        rowcount = getattr(self.cursor, "rowcount", -1)
        return -1 if rowcount is None else rowcount

    def execute_query(self) -> "ResultSet":
        """Run a reading statement and return a result set positioned before the first row."""
        self._execute("Query execution failed")
        self._result_set = ResultSet(self.cursor)
        return self._result_set

    def close(self) -> None:
        """Close any open result set, then the cursor. Safe to call more than once."""
        if self._result_set is not None:
            self._result_set.close()
            self._result_set = None
        cursor, self._cursor = self._cursor, None
        self._bindings.clear()
        if cursor is None:
            return
        with contextlib.suppress(Exception):
            cursor.close()
        logger.debug("statement closed")


class ResultSet:
    """A forward-only view over a cursor, positioned on one row at a time.

    Row mappers read the current row by 0-based position (``row[0]``) or by
    column name (``row["name"]``).
    """

    __slots__ = ("_closed", "_column_index", "_columns", "_current", "_cursor", "row_number")

    def __init__(self, cursor: "DBAPICursor") -> None:
        self._cursor = cursor
        self._current: Any = None
        self._closed = False
        self._columns: list[str] = [column[0] for column in (getattr(cursor, "description", None) or [])]
        self._column_index: dict[str, int] = {name: position for position, name in enumerate(self._columns)}
        self.row_number = 0

    @property
    def columns(self) -> "list[str]":
        return list(self._columns)

    @property
    def closed(self) -> bool:
        return self._closed

    def next(self) -> bool:
        """Advance to the next row. Returns ``False`` once the rows are exhausted."""
        if self._closed:
            msg = "Result set is closed"
            raise ResultSetError(msg)
        with wrap_exceptions(ExecutionError, "Fetching the next row failed"):
            row = self._cursor.fetchone()
        self._current = row
        if row is None:
            return False
        self.row_number += 1
        return True

    def close(self) -> None:
        """Stop iteration. The cursor itself belongs to the statement and is closed there."""
        self._closed = True
        self._current = None

    def _require_row(self) -> Any:
        if self._closed:
            msg = "Result set is closed"
            raise ResultSetError(msg)
        if self._current is None:
            msg = "Result set is not positioned on a row; call next() first"
            raise ResultSetError(msg)
        return self._current

    def __getitem__(self, column: Column) -> Any:
        row = self._require_row()
        if is_dict_row(row):
            if isinstance(column, int):
                return list(row.values())[column]
            return row[column]
        if is_indexable_row(row):
            if isinstance(column, str):
                if column not in self._column_index:
                    msg = f"Unknown column {column!r}; available: {self._columns}"
                    raise KeyError(msg)
                column = self._column_index[column]
            return row[column]
        msg = f"Unsupported row type: {type(row).__name__}"
        raise ResultSetError(msg)

    def __len__(self) -> int:
        return len(self._require_row())

    def get(self, column: Column, default: Any = None) -> Any:
        try:
            return self[column]
        except (KeyError, IndexError):
            return default

    def get_int(self, column: Column) -> Optional[int]:
        value = self[column]
        return None if value is None else int(value)

    def get_str(self, column: Column) -> Optional[str]:
        value = self[column]
        return None if value is None else str(value)

    def get_json(self, column: Column) -> Any:
        value = self[column]
        if value is None or not isinstance(value, (str, bytes)):
            return value
        return from_json(value)

    def as_dict(self) -> "dict[str, Any]":
        row = self._require_row()
        if is_dict_row(row):
            return dict(row)
        return dict(zip(self._columns, row))

    def as_tuple(self) -> "tuple[Any, ...]":
        row = self._require_row()
        if is_dict_row(row):
            return tuple(row.values())
        return tuple(row)
