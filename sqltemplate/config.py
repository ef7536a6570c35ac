import contextlib
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from sqltemplate.exceptions import AcquisitionError, ExecutionError, wrap_exceptions
from sqltemplate.statement import StatementConfig
from sqltemplate.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator


__all__ = ("ConfigT", "ConnectionT", "DatabaseConfigProtocol", "SyncDatabaseConfig")

ConnectionT = TypeVar("ConnectionT")
ConfigT = TypeVar("ConfigT", bound="DatabaseConfigProtocol[Any]")

logger = get_logger("config")


class DatabaseConfigProtocol(ABC, Generic[ConnectionT]):
    """Protocol defining the interface for connection sources."""

    __slots__ = ("autocommit", "connection_config", "statement_config")
    connection_type: "ClassVar[type[Any]]" = object
    statement_config: "StatementConfig"

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return (
            self.connection_config == other.connection_config
            and self.autocommit == other.autocommit
            and self.statement_config.dialect == other.statement_config.dialect
        )

    def __repr__(self) -> str:
        parts = ", ".join(
            [
                f"connection_config={self.connection_config!r}",
                f"statement_config={self.statement_config!r}",
                f"autocommit={self.autocommit!r}",
            ]
        )
        return f"{type(self).__name__}({parts})"

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Create and return a new database connection."""
        raise NotImplementedError

    @abstractmethod
    def provide_connection(self, *args: Any, **kwargs: Any) -> "contextlib.AbstractContextManager[ConnectionT]":
        """Provide a database connection context manager."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release anything the source holds between calls."""
        raise NotImplementedError


class SyncDatabaseConfig(DatabaseConfigProtocol[ConnectionT]):
    """Generic sync connection source that opens a fresh connection per call."""

    __slots__ = ()

    def __init__(
        self,
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        autocommit: bool = True,
    ) -> None:
        self.connection_config: dict[str, Any] = dict(connection_config) if connection_config else {}
        self.statement_config = statement_config or StatementConfig()
        self.autocommit = autocommit

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[ConnectionT, None, None]":
        """Provide a connection that is committed on success and always closed.

        Yields:
            A connection created by :meth:`create_connection`.

        Raises:
            AcquisitionError: If the connection could not be created.
            ExecutionError: If the commit failed.
        """
        with wrap_exceptions(AcquisitionError, "Could not acquire connection"):
            connection = self.create_connection()
        try:
            yield connection
            if self.autocommit:
                with wrap_exceptions(ExecutionError, "Commit failed"):
                    connection.commit()  # type: ignore[attr-defined]
        finally:
            self._release_connection(connection)

    def _release_connection(self, connection: ConnectionT) -> None:
        with contextlib.suppress(Exception):
            connection.close()  # type: ignore[attr-defined]
        logger.debug("connection released")

    def close(self) -> None:
        return None
