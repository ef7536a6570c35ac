from typing import TYPE_CHECKING, Any, Optional

from sqltemplate.config import SyncDatabaseConfig
from sqltemplate.exceptions import ImproperConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqltemplate.statement import StatementConfig

__all__ = ("DBAPIConfig",)


class DBAPIConfig(SyncDatabaseConfig[Any]):
    """A generic connection source for any DB-API 2.0 compliant ``connect`` callable.

    Example:
        >>> import psycopg
        >>> config = DBAPIConfig(psycopg.connect, connection_config={"conninfo": "dbname=app"})
    """

    def __init__(
        self,
        connect: "Callable[..., Any]",
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        statement_config: "Optional[StatementConfig]" = None,
        autocommit: bool = True,
    ) -> None:
        if not callable(connect):
            msg = f"`connect` must be callable, got {type(connect).__name__}"
            raise ImproperConfigurationError(msg)
        self.connect = connect
        super().__init__(
            connection_config=connection_config, statement_config=statement_config, autocommit=autocommit
        )

    def create_connection(self) -> Any:
        return self.connect(**self.connection_config)
