"""Ready-made row mappers.

Each mapper is a plain callable taking the positioned
:class:`~sqltemplate.statement.ResultSet` and returning one value.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, Union, cast

from msgspec import convert

from sqltemplate.exceptions import ImproperConfigurationError
from sqltemplate.utils.type_guards import is_dataclass, is_msgspec_struct

if TYPE_CHECKING:
    from sqltemplate.statement import ResultSet

__all__ = (
    "column_row_mapper",
    "dict_row_mapper",
    "scalar_row_mapper",
    "schema_row_mapper",
    "tuple_row_mapper",
)

ModelDTOT = TypeVar("ModelDTOT")


def dict_row_mapper(row: "ResultSet") -> "dict[str, Any]":
    return row.as_dict()


def tuple_row_mapper(row: "ResultSet") -> "tuple[Any, ...]":
    return row.as_tuple()


def scalar_row_mapper(row: "ResultSet") -> Any:
    """Return the first column of the row."""
    return row[0]


def column_row_mapper(column: Union[int, str]) -> "Callable[[ResultSet], Any]":
    """Build a mapper returning a single column by position or name."""

    def _map(row: "ResultSet") -> Any:
        return row[column]

    return _map


def schema_row_mapper(schema_type: "type[ModelDTOT]") -> "Callable[[ResultSet], ModelDTOT]":
    """Build a mapper converting each row into ``schema_type``.

    Dataclasses are built from the row's column/value pairs. msgspec structs go
    through :func:`msgspec.convert`, which also turns ISO strings back into
    ``datetime``/``date``/``UUID`` fields. Column names must match field names.

    Raises:
        ImproperConfigurationError: If ``schema_type`` is not a supported schema type.
    """
    if is_dataclass(schema_type):

        def _to_dataclass(row: "ResultSet") -> ModelDTOT:
            return schema_type(**row.as_dict())

        return _to_dataclass
    if is_msgspec_struct(schema_type):

        def _to_struct(row: "ResultSet") -> ModelDTOT:
            return cast("ModelDTOT", convert(row.as_dict(), type=schema_type))

        return _to_struct
    msg = "`schema_type` should be a valid Dataclass or Msgspec struct"
    raise ImproperConfigurationError(msg)
