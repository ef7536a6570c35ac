"""SQLite adapter for sqltemplate."""

from sqltemplate.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams, sqlite_statement_config

__all__ = ("SqliteConfig", "SqliteConnectionParams", "sqlite_statement_config")
