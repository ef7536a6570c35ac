from __future__ import annotations

from collections.abc import Generator

import pytest

from sqltemplate import SQLTemplate, SqliteConfig

CREATE_USERS = "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, age INTEGER)"


@pytest.fixture
def sqlite_config() -> Generator[SqliteConfig, None, None]:
    config = SqliteConfig()
    yield config
    config.close()


@pytest.fixture
def users_template(sqlite_config: SqliteConfig) -> SQLTemplate:
    """A template over an in-memory database holding three users."""
    template = SQLTemplate(sqlite_config, suppress_errors=False)
    template.execute(CREATE_USERS)
    for user in [(1, "a", 30), (2, "b", 18), (3, "c", 45)]:
        template.execute("INSERT INTO users (id, name, age) VALUES (?, ?, ?)", *user)
    return template
