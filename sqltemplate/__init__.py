"""sqltemplate: run one SQL statement per call and map the rows you get back."""

from sqltemplate import adapters, exceptions, mapping, utils
from sqltemplate.__metadata__ import __version__
from sqltemplate.adapters import DBAPIConfig, SqliteConfig, SqliteConnectionParams
from sqltemplate.config import DatabaseConfigProtocol, SyncDatabaseConfig
from sqltemplate.exceptions import (
    AcquisitionError,
    CardinalityViolationError,
    ExecutionError,
    MappingError,
    MultipleResultsFoundError,
    NotFoundError,
    ParameterError,
    SQLTemplateError,
    UnsupportedParameterTypeError,
)
from sqltemplate.mapping import (
    column_row_mapper,
    dict_row_mapper,
    scalar_row_mapper,
    schema_row_mapper,
    tuple_row_mapper,
)
from sqltemplate.parameters import ParameterBinder
from sqltemplate.protocols import ConnectionSource, RowMapper
from sqltemplate.result import StatementResult
from sqltemplate.statement import PreparedStatement, ResultSet, StatementConfig
from sqltemplate.template import SQLTemplate

__all__ = (
    "AcquisitionError",
    "CardinalityViolationError",
    "ConnectionSource",
    "DBAPIConfig",
    "DatabaseConfigProtocol",
    "ExecutionError",
    "MappingError",
    "MultipleResultsFoundError",
    "NotFoundError",
    "ParameterBinder",
    "ParameterError",
    "PreparedStatement",
    "ResultSet",
    "RowMapper",
    "SQLTemplate",
    "SQLTemplateError",
    "SqliteConfig",
    "SqliteConnectionParams",
    "StatementConfig",
    "StatementResult",
    "SyncDatabaseConfig",
    "UnsupportedParameterTypeError",
    "__version__",
    "adapters",
    "column_row_mapper",
    "dict_row_mapper",
    "exceptions",
    "mapping",
    "scalar_row_mapper",
    "schema_row_mapper",
    "tuple_row_mapper",
    "utils",
)
