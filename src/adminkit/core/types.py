"""
Canonical adminkit enumerations and normalization helpers.

Defines column types, store kinds, sort directions and default panel actions,
plus zero-IO helpers that turn free-form declarations into these enums.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values (metadata files, wire): lower_snake

2) Declarations beat inference:
   - A field's ``column_type`` override always wins.
   - Otherwise the type is inferred from the declared capability (enumeration
     values, mime types) and finally from the underlying property type.

Examples
--------
>>> from adminkit.core.types import ColumnType, column_type_from_value, infer_column_type
>>> column_type_from_value("ENUMERATION") is ColumnType.ENUMERATION
True
>>> infer_column_type("int") is ColumnType.INTEGER
True
>>> infer_column_type("SomethingElse") is ColumnType.NOT_AVAILABLE
True
"""

from __future__ import annotations

import datetime as _dt
import decimal
from enum import Enum
from typing import Any

__all__ = [
    "ColumnType",
    "StoreKind",
    "Direction",
    "DefaultAction",
    "NUMERIC_TYPES",
    "column_type_from_value",
    "store_kind_from_value",
    "direction_from_value",
    "default_action_from_value",
    "infer_column_type",
]


class ColumnType(Enum):
    """
    Storage-agnostic type of a field, driving form coercion and validation.

    Notes:
        - ``not_available`` fields are carried through as raw strings.
        - ``file`` values are file names (the upload itself is handled by the host).
    """

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    SHORT = "short"
    DOUBLE = "double"
    FLOAT = "float"
    DECIMAL = "decimal"
    CHAR = "char"
    BOOLEAN = "boolean"
    ENUMERATION = "enumeration"
    DATE = "date"
    DATETIME = "datetime"
    DURATION = "duration"
    FILE = "file"
    BINARY = "binary"
    NOT_AVAILABLE = "not_available"


class StoreKind(Enum):
    """Family of the backing store; descriptors are identical across both."""

    RELATIONAL = "relational"
    DOCUMENT = "document"


class Direction(Enum):
    """Sort direction of one Order entry."""

    ASC = "asc"
    DESC = "desc"


class DefaultAction(Enum):
    """Built-in panel operations a table may opt out of."""

    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"


NUMERIC_TYPES: frozenset[ColumnType] = frozenset(
    {
        ColumnType.INTEGER,
        ColumnType.LONG,
        ColumnType.SHORT,
        ColumnType.DOUBLE,
        ColumnType.FLOAT,
        ColumnType.DECIMAL,
    }
)

# Property type names (as emitted by metadata extractors) -> column type.
_INFERRED_TYPES: dict[str, ColumnType] = {
    "str": ColumnType.STRING,
    "string": ColumnType.STRING,
    "int": ColumnType.INTEGER,
    "integer": ColumnType.INTEGER,
    "long": ColumnType.LONG,
    "short": ColumnType.SHORT,
    "float": ColumnType.DOUBLE,
    "double": ColumnType.DOUBLE,
    "decimal": ColumnType.DECIMAL,
    "bool": ColumnType.BOOLEAN,
    "boolean": ColumnType.BOOLEAN,
    "date": ColumnType.DATE,
    "datetime": ColumnType.DATETIME,
    "timedelta": ColumnType.DURATION,
    "duration": ColumnType.DURATION,
    "bytes": ColumnType.BINARY,
    "bytearray": ColumnType.BINARY,
    "char": ColumnType.CHAR,
}

_PYTHON_TYPES: dict[type, ColumnType] = {
    str: ColumnType.STRING,
    bool: ColumnType.BOOLEAN,
    int: ColumnType.INTEGER,
    float: ColumnType.DOUBLE,
    decimal.Decimal: ColumnType.DECIMAL,
    _dt.datetime: ColumnType.DATETIME,
    _dt.date: ColumnType.DATE,
    _dt.timedelta: ColumnType.DURATION,
    bytes: ColumnType.BINARY,
}


def _enum_from_value(enum_cls: type[Enum], value: Any, what: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    token = str(value or "").strip().lower()
    try:
        return enum_cls(token)
    except ValueError as exc:
        allowed = sorted(m.value for m in enum_cls)
        raise ValueError(f"{what} must be one of {allowed} (got {value!r})") from exc


def column_type_from_value(value: str | ColumnType) -> ColumnType:
    """
    Normalize a declared column type (case-insensitive) to ColumnType.

    Raises:
        ValueError: If the token names no known column type.
    """
    return _enum_from_value(ColumnType, value, "column type")


def store_kind_from_value(value: str | StoreKind) -> StoreKind:
    return _enum_from_value(StoreKind, value, "store kind")


def direction_from_value(value: str | Direction) -> Direction:
    """
    Normalize a sort direction token ("ASC", "desc", ...) to Direction.

    Raises:
        ValueError: If the token is neither asc nor desc.
    """
    return _enum_from_value(Direction, value, "direction")


def default_action_from_value(value: str | DefaultAction) -> DefaultAction:
    return _enum_from_value(DefaultAction, value, "default action")


def infer_column_type(property_type: str | type | None) -> ColumnType:
    """
    Infer a column type from the underlying property's type.

    Args:
        property_type: A Python type, or its name as emitted by a metadata extractor
            (e.g. "int", "datetime", "Decimal").

    Returns:
        ColumnType: The inferred type; NOT_AVAILABLE when nothing matches.

    Notes:
        ``bool`` is checked before ``int`` and ``datetime`` before ``date`` because
        each is a subclass of the latter.
    """
    if property_type is None:
        return ColumnType.NOT_AVAILABLE
    if isinstance(property_type, type):
        for py_type, column_type in _PYTHON_TYPES.items():
            if issubclass(property_type, py_type):
                return column_type
        return ColumnType.NOT_AVAILABLE
    name = str(property_type).strip().rsplit(".", 1)[-1].lower()
    return _INFERRED_TYPES.get(name, ColumnType.NOT_AVAILABLE)
