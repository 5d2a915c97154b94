"""
Core exception types raised while resolving metadata into descriptors.

Provides typed exceptions for build-time failures. Every one of them is fatal:
the process must not begin serving traffic once one is raised.

- SchemaError is the common base (a ValueError).
- DuplicateTableKeyError / DuplicateFieldKeyError for key collisions.
- InvalidLimitError for inconsistent length/value bounds.
- InvalidRegexError for patterns that fail to compile.
- InvalidEnumerationError for enumeration capabilities without values.
- InvalidFieldOptionError for field options declared on an incompatible column type
  (auto-now dates on non-date fields, confirmation on non-text fields).
- PrimaryKeyNotFoundError when the primary key names no declared field.
- UnknownFieldReferenceError when searches, filters, default order or the display
  format reference an undeclared field.
- InvalidOrderDirectionError for Order directions other than ASC/DESC (request-scoped,
  not a SchemaError).

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Runtime (per-request) failures live in adminkit.runtime.errors.

Examples:
    >>> from adminkit.core.errors import DuplicateFieldKeyError, SchemaError
    >>> err = DuplicateFieldKeyError("users", "email")
    >>> isinstance(err, SchemaError), err.table_name, err.field_name
    (True, 'users', 'email')
"""

from __future__ import annotations

__all__ = [
    "SchemaError",
    "DuplicateTableKeyError",
    "DuplicateFieldKeyError",
    "InvalidLimitError",
    "InvalidRegexError",
    "InvalidEnumerationError",
    "InvalidFieldOptionError",
    "PrimaryKeyNotFoundError",
    "UnknownFieldReferenceError",
    "InvalidOrderDirectionError",
]


class SchemaError(ValueError):
    """Descriptor-level validation failure raised during startup resolution."""


class DuplicateTableKeyError(SchemaError):
    """Two distinct tables were declared under the same table name."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"table {table_name!r} is declared more than once")
        self.table_name = table_name


class DuplicateFieldKeyError(SchemaError):
    """A table declares the same field name twice."""

    def __init__(self, table_name: str, field_name: str) -> None:
        super().__init__(f"field {field_name!r} is declared more than once in table {table_name!r}")
        self.table_name = table_name
        self.field_name = field_name


class InvalidLimitError(SchemaError):
    """Limits are inconsistent (min above max, or a negative length)."""

    def __init__(self, table_name: str, field_name: str, detail: str) -> None:
        super().__init__(f"invalid limits for {table_name}.{field_name}: {detail}")
        self.table_name = table_name
        self.field_name = field_name


class InvalidRegexError(SchemaError):
    """The declared regex pattern does not compile."""

    def __init__(self, table_name: str, field_name: str, pattern: str, reason: str) -> None:
        super().__init__(
            f"regex pattern {pattern!r} for {table_name}.{field_name} does not compile: {reason}"
        )
        self.table_name = table_name
        self.field_name = field_name
        self.pattern = pattern


class InvalidEnumerationError(SchemaError):
    """An enumeration capability was declared with zero values."""

    def __init__(self, table_name: str, field_name: str) -> None:
        super().__init__(f"enumeration field {table_name}.{field_name} declares no values")
        self.table_name = table_name
        self.field_name = field_name


class InvalidFieldOptionError(SchemaError):
    """A field option does not apply to the field's column type."""

    def __init__(self, table_name: str, field_name: str, option: str, column_type: str) -> None:
        super().__init__(
            f"{option!r} cannot be used on {table_name}.{field_name} of type {column_type!r}"
        )
        self.table_name = table_name
        self.field_name = field_name
        self.option = option


class PrimaryKeyNotFoundError(SchemaError):
    """The primary key name does not match any declared field."""

    def __init__(self, table_name: str, primary_key_name: str) -> None:
        super().__init__(
            f"primary key {primary_key_name!r} of table {table_name!r} is not a declared field"
        )
        self.table_name = table_name
        self.primary_key_name = primary_key_name


class UnknownFieldReferenceError(SchemaError):
    """A table-level setting references a field the table does not declare."""

    def __init__(self, table_name: str, field_name: str, where: str) -> None:
        super().__init__(f"{where} of table {table_name!r} references unknown field {field_name!r}")
        self.table_name = table_name
        self.field_name = field_name
        self.where = where


class InvalidOrderDirectionError(ValueError):
    """An Order direction is neither ASC nor DESC (case-insensitive)."""

    def __init__(self, direction: object) -> None:
        super().__init__(f"order direction must be ASC or DESC (got {direction!r})")
        self.direction = direction
