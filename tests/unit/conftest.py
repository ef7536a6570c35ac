"""In-memory stand-ins for a DB-API driver and connection source."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable, Optional

import pytest

from sqltemplate import SQLTemplate, StatementConfig, SyncDatabaseConfig


class MockCursor:
    """Cursor that records what it was asked to execute and replays canned rows."""

    def __init__(
        self,
        rows: Sequence[Any] = (),
        columns: Sequence[str] = (),
        rowcount: int = 1,
        execute_error: Optional[Exception] = None,
    ) -> None:
        self.rows = list(rows)
        self.description = [(name, None, None, None, None, None, None) for name in columns] or None
        self.rowcount = rowcount
        self.execute_error = execute_error
        self.executed: list[tuple[str, tuple[Any, ...]]] = []
        self.close_calls = 0
        self._pending: list[Any] = []

    def execute(self, operation: str, parameters: Any = ()) -> MockCursor:
        self.executed.append((operation, tuple(parameters)))
        if self.execute_error is not None:
            raise self.execute_error
        self._pending = list(self.rows)
        return self

    def fetchone(self) -> Any:
        if not self._pending:
            return None
        return self._pending.pop(0)

    def close(self) -> None:
        self.close_calls += 1


class MockConnection:
    """Connection that hands out a single prepared cursor."""

    def __init__(self, cursor: Optional[MockCursor] = None, cursor_error: Optional[Exception] = None) -> None:
        self.mock_cursor = cursor or MockCursor()
        self.cursor_error = cursor_error
        self.commit_calls = 0
        self.close_calls = 0

    def cursor(self) -> MockCursor:
        if self.cursor_error is not None:
            raise self.cursor_error
        return self.mock_cursor

    def commit(self) -> None:
        self.commit_calls += 1

    def close(self) -> None:
        self.close_calls += 1


class MockConfig(SyncDatabaseConfig[MockConnection]):
    """Connection source returning the same mock connection on every call."""

    def __init__(
        self,
        connection: Optional[MockConnection] = None,
        connect_error: Optional[Exception] = None,
        statement_config: Optional[StatementConfig] = None,
        autocommit: bool = True,
    ) -> None:
        super().__init__(statement_config=statement_config or StatementConfig(dialect="sqlite"), autocommit=autocommit)
        self.connection = connection or MockConnection()
        self.connect_error = connect_error
        self.acquired = 0

    def create_connection(self) -> MockConnection:
        if self.connect_error is not None:
            raise self.connect_error
        self.acquired += 1
        return self.connection


TemplateFactory = Callable[..., "tuple[SQLTemplate, MockConfig]"]


@pytest.fixture
def make_template() -> TemplateFactory:
    """Build a template over mock collaborators.

    Keyword arguments other than ``suppress_errors``, ``connect_error`` and
    ``cursor_error`` are passed to :class:`MockCursor`.
    """

    def _make(
        *,
        suppress_errors: bool = True,
        connect_error: Optional[Exception] = None,
        cursor_error: Optional[Exception] = None,
        **cursor_kwargs: Any,
    ) -> tuple[SQLTemplate, MockConfig]:
        connection = MockConnection(MockCursor(**cursor_kwargs), cursor_error=cursor_error)
        config = MockConfig(connection, connect_error=connect_error)
        return SQLTemplate(config, suppress_errors=suppress_errors), config

    return _make


@pytest.fixture
def user_rows() -> dict[str, Any]:
    return {"rows": [(1, "a"), (2, "b")], "columns": ("id", "name")}
