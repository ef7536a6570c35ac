"""Connection sources for concrete DB-API drivers."""

from sqltemplate.adapters.dbapi import DBAPIConfig
from sqltemplate.adapters.sqlite import SqliteConfig, SqliteConnectionParams, sqlite_statement_config

__all__ = ("DBAPIConfig", "SqliteConfig", "SqliteConnectionParams", "sqlite_statement_config")
