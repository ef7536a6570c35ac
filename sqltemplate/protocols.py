"""Runtime-checkable protocols for the collaborators sqltemplate talks to.

The connection source and the DB-API objects it hands out are owned by the
caller; these protocols describe the slice of their surface the template uses.
"""

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Optional, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqltemplate.statement import ResultSet, StatementConfig

__all__ = (
    "ConnectionSource",
    "DBAPIConnection",
    "DBAPICursor",
    "IndexableRow",
    "RowMapper",
)

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class IndexableRow(Protocol):
    """Protocol for row types that support index access."""

    def __getitem__(self, index: int) -> Any:
        """Get item by index."""
        ...

    def __len__(self) -> int:
        """Get length of the row."""
        ...


@runtime_checkable
class DBAPICursor(Protocol):
    """The DB-API 2.0 cursor operations a prepared statement relies on."""

    description: "Optional[Sequence[Sequence[Any]]]"
    rowcount: int

    def execute(self, operation: str, parameters: Any = ...) -> Any: ...

    def fetchone(self) -> Any: ...

    def close(self) -> None: ...


@runtime_checkable
class DBAPIConnection(Protocol):
    """The DB-API 2.0 connection operations a connection source relies on."""

    def cursor(self) -> Any: ...

    def commit(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class ConnectionSource(Protocol):
    """Anything that can lend out a connection for the span of one call."""

    statement_config: "StatementConfig"

    def provide_connection(self) -> "AbstractContextManager[Any]":
        """Yield a connection and release it when the block exits."""
        ...


class RowMapper(Protocol[T_co]):
    """Convert the current row of a result set into a value.

    The result set is already positioned on the row. Implementations must not
    keep a reference to it once they return.
    """

    def __call__(self, row: "ResultSet") -> T_co: ...
