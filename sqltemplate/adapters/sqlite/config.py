"""SQLite connection source."""

import datetime
import sqlite3
import threading
import uuid
from decimal import Decimal
from typing import Any, ClassVar, Optional, TypedDict, cast

from typing_extensions import NotRequired

from sqltemplate.config import SyncDatabaseConfig
from sqltemplate.statement import StatementConfig
from sqltemplate.utils.logging import get_logger

logger = get_logger("adapters.sqlite")

__all__ = ("SqliteConfig", "SqliteConnectionParams", "sqlite_statement_config")

MEMORY_DATABASE = ":memory:"

sqlite_statement_config = StatementConfig(
    dialect="sqlite",
    type_coercion_map={
        bool: int,
        datetime.datetime: lambda v: v.isoformat(),
        datetime.date: lambda v: v.isoformat(),
        datetime.time: lambda v: v.isoformat(),
        Decimal: str,
        uuid.UUID: str,
    },
)


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig(SyncDatabaseConfig[sqlite3.Connection]):
    """SQLite configuration that opens one connection per call.

    A missing or ``:memory:`` database is replaced by a named shared-cache
    memory database; an anchor connection keeps it alive between calls until
    :meth:`close` is called.
    """

    connection_type: "ClassVar[type[sqlite3.Connection]]" = sqlite3.Connection

    def __init__(
        self,
        *,
        connection_config: "Optional[SqliteConnectionParams]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        autocommit: bool = True,
    ) -> None:
        """Initialize SQLite configuration.

        Args:
            connection_config: Parameters passed to :func:`sqlite3.connect`
            statement_config: Default statement configuration
            autocommit: Commit after every successful call
        """
        params = cast("dict[str, Any]", dict(connection_config or {}))
        self.is_memory = params.get("database", MEMORY_DATABASE) == MEMORY_DATABASE
        if self.is_memory:
            params["database"] = f"file:memory_{uuid.uuid4().hex}?mode=memory&cache=shared"
            params["uri"] = True
        else:
            database_path = str(params["database"])
            if database_path.startswith("file:") and not params.get("uri"):
                logger.debug(
                    "Database URI detected (%s) but uri=True not set. Auto-enabling URI mode.", database_path
                )
                params["uri"] = True

        self._anchor: Optional[sqlite3.Connection] = None
        self._anchor_lock = threading.Lock()
        super().__init__(
            connection_config=params,
            statement_config=statement_config or sqlite_statement_config,
            autocommit=autocommit,
        )

    def _ensure_anchor(self) -> None:
        if not self.is_memory or self._anchor is not None:
            return
        with self._anchor_lock:
            if self._anchor is None:
                self._anchor = sqlite3.connect(**{**self.connection_config, "check_same_thread": False})

    def create_connection(self) -> sqlite3.Connection:
        """Open a new SQLite connection.

        Returns:
            sqlite3.Connection: A connection owned by the caller
        """
        self._ensure_anchor()
        return sqlite3.connect(**self.connection_config)

    def close(self) -> None:
        """Close the anchor connection, discarding an in-memory database."""
        with self._anchor_lock:
            anchor, self._anchor = self._anchor, None
        if anchor is not None:
            anchor.close()
