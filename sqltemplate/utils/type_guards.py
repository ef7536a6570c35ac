"""Type guards used by row mapping and parameter binding."""

from collections.abc import Mapping
from typing import Any

from msgspec import Struct
from typing_extensions import TypeGuard

from sqltemplate.protocols import IndexableRow

__all__ = ("is_dataclass", "is_dict_row", "is_indexable_row", "is_msgspec_struct")


def is_dataclass(obj: Any) -> bool:
    """Check if an object is a dataclass type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, type) and hasattr(obj, "__dataclass_fields__")


def is_msgspec_struct(obj: Any) -> "TypeGuard[type[Struct]]":
    """Check if a value is a msgspec struct type.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, type) and issubclass(obj, Struct)


def is_dict_row(row: Any) -> "TypeGuard[Mapping[str, Any]]":
    return isinstance(row, Mapping)


def is_indexable_row(row: Any) -> "TypeGuard[IndexableRow]":
    return isinstance(row, IndexableRow) and not isinstance(row, (str, bytes, Mapping))
