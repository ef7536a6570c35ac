"""Positional parameter binding.

:class:`ParameterBinder` inspects the runtime type of every value and calls the
one ``set_*`` operation of :class:`~sqltemplate.statement.PreparedStatement`
registered for it. The Nth value is bound to placeholder N, counting from 1.
"""

import datetime
from collections.abc import Sequence
from decimal import Decimal
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError, TokenError

from sqltemplate.exceptions import (
    ExtraParameterError,
    MissingParameterError,
    ParameterError,
    UnsupportedParameterTypeError,
    wrap_exceptions,
)
from sqltemplate.statement import INITIAL_PARAM_INDEX
from sqltemplate.utils.logging import get_logger

if TYPE_CHECKING:
    from sqltemplate.statement import PreparedStatement

__all__ = ("DEFAULT_BIND_RULES", "ParameterBinder", "count_positional_placeholders", "validate_parameter_count")

logger = get_logger("parameters")

# Order matters: bool before int, datetime before date.
DEFAULT_BIND_RULES: "tuple[tuple[type, str], ...]" = (
    (type(None), "set_null"),
    (bool, "set_bool"),
    (int, "set_int"),
    (float, "set_float"),
    (Decimal, "set_decimal"),
    (str, "set_str"),
    (bytes, "set_bytes"),
    (bytearray, "set_bytes"),
    (memoryview, "set_bytes"),
    (datetime.datetime, "set_datetime"),
    (datetime.date, "set_date"),
    (datetime.time, "set_time"),
    (UUID, "set_uuid"),
    (dict, "set_json"),
    (list, "set_json"),
    (tuple, "set_json"),
)

_ANONYMOUS_PLACEHOLDERS = frozenset({"", "?", "%s"})


class ParameterBinder:
    """Dispatch values to the typed bind operations of a prepared statement."""

    __slots__ = ("_rules",)

    def __init__(self, rules: "Optional[Sequence[tuple[type, str]]]" = None) -> None:
        self._rules: list[tuple[type, str]] = list(rules if rules is not None else DEFAULT_BIND_RULES)

    @property
    def rules(self) -> "tuple[tuple[type, str], ...]":
        return tuple(self._rules)

    def register(self, python_type: type, bind_method: str) -> None:
        """Add a binding rule that is tried before the existing ones.

        Args:
            python_type: Values that are instances of this type use the rule.
            bind_method: Name of the ``PreparedStatement`` operation to call.
        """
        self._rules.insert(0, (python_type, bind_method))

    def resolve(self, value: Any) -> Optional[str]:
        """Return the bind operation for ``value``, or ``None`` if no rule matches."""
        for python_type, bind_method in self._rules:
            if isinstance(value, python_type):
                return bind_method
        return None

    def bind(self, statement: "PreparedStatement", index: int, value: Any) -> None:
        bind_method = self.resolve(value)
        if bind_method is None:
            raise UnsupportedParameterTypeError(index, type(value), statement.sql)
        with wrap_exceptions(ParameterError, f"Could not bind parameter {index}"):
            getattr(statement, bind_method)(index, value)

    def bind_all(self, statement: "PreparedStatement", parameters: "Sequence[Any]") -> None:
        """Bind ``parameters`` to positions 1..N of ``statement``."""
        if statement.statement_config.validate_parameter_count:
            validate_parameter_count(statement.sql, len(parameters), statement.statement_config.dialect)
        for index, value in enumerate(parameters, start=INITIAL_PARAM_INDEX):
            self.bind(statement, index, value)


@lru_cache(maxsize=512)
def count_positional_placeholders(sql: str, dialect: Optional[str] = None) -> Optional[int]:
    """Count anonymous positional placeholders in ``sql``.

    Returns:
        The number of placeholders, or ``None`` when sqlglot cannot parse the statement.
    """
    try:
        expressions = sqlglot.parse(sql, read=dialect)
    except (ParseError, TokenError):
        logger.debug("Skipping placeholder count for unparseable SQL: %s", sql)
        return None
    return sum(
        1
        for expression in expressions
        if expression is not None
        for placeholder in expression.find_all(exp.Placeholder)
        if placeholder.name in _ANONYMOUS_PLACEHOLDERS
    )


def validate_parameter_count(sql: str, supplied: int, dialect: Optional[str] = None) -> None:
    """Raise if the number of supplied values cannot fill the statement's placeholders.

    Statements sqlglot cannot parse, and statements where no anonymous
    placeholder is found, are not checked.
    """
    expected = count_positional_placeholders(sql, dialect)
    if not expected or expected == supplied:
        return
    msg = f"Statement expects {expected} parameter(s) but {supplied} were given"
    if supplied < expected:
        raise MissingParameterError(msg, sql)
    raise ExtraParameterError(msg, sql)
