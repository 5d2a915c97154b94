"""
Custom exceptions for the adminkit.runtime module.

Purpose
- Provide runtime error types that map cleanly to responsibilities in adminkit.runtime.
- Keep adminkit.core as the source of truth for build-time errors (see adminkit.core.errors).

Families
- FieldValidationError: per-field form violations. Recovered by the form binder into
  ErrorResponse entries; never escape a bind call.
- FormRejectedError: raised by the service when a form produced ErrorResponse entries.
- AccessError / ForbiddenError: caller lacks every role a table requires.
- MapperError / DuplicateMapperKeyError: fatal at startup.
- ActionError: base offered to custom action implementations; propagated unchanged.
- Registry/lookup errors: unknown tables, records, actions and order fields,
  duplicate action or preview keys, registration after seal.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .forms import ErrorResponse


class AdminError(Exception):
    """
    Base class for runtime errors in adminkit.runtime.

    Notes:
        Use this as a catch-all for runtime failures, distinct from adminkit.core errors.
    """


# -----------------------------------------------------------------------------
# Form validation
# -----------------------------------------------------------------------------


class FieldValidationError(AdminError):
    """
    One constraint violation of one field.

    Attributes:
        code (str): Stable message code; also the translator message key.
        field_name (str): Offending field.
        params (dict[str, Any]): Values interpolated into translated messages.
    """

    code: ClassVar[str] = "invalid value"

    def __init__(self, field_name: str, params: Mapping[str, Any] | None = None) -> None:
        super().__init__(f"{field_name}: {self.code}")
        self.field_name = field_name
        self.params = dict(params or {})


class MissingRequiredFieldError(FieldValidationError):
    """Non-nullable field submitted blank with no default."""

    code = "required"


class LengthOutOfRangeError(FieldValidationError):
    """Text shorter than min_length or longer than max_length."""

    code = "length out of range"


class PatternMismatchError(FieldValidationError):
    """Value does not fully match the declared regex pattern."""

    code = "pattern mismatch"


class DisallowedMimeTypeError(FieldValidationError):
    """File name maps to a mime type outside allowed_mime_types."""

    code = "disallowed mime type"


class InvalidEnumerationValueError(FieldValidationError):
    """Value is not one of the declared enumeration values."""

    code = "invalid enumeration value"


class InvalidValueError(FieldValidationError):
    """Value cannot be parsed as the field's column type."""

    code = "invalid value"


class ValueOutOfRangeError(FieldValidationError):
    """Numeric value below min_value or above max_value."""

    code = "value out of range"


class ConfirmationMismatchError(FieldValidationError):
    """The value and its confirmation entry differ."""

    code = "confirmation mismatch"


class FormRejectedError(AdminError):
    """
    A submitted form failed validation; nothing was mutated.

    Attributes:
        table_name (str): Target table.
        errors (list[ErrorResponse]): One entry per offending field, in field order.
    """

    def __init__(self, table_name: str, errors: Sequence[ErrorResponse]) -> None:
        fields = ", ".join(e.field for e in errors)
        super().__init__(f"form for {table_name!r} rejected; invalid fields: {fields}")
        self.table_name = table_name
        self.errors = list(errors)


# -----------------------------------------------------------------------------
# Access
# -----------------------------------------------------------------------------


class AccessError(AdminError):
    """Caller is not allowed to operate on a table."""


class ForbiddenError(AccessError):
    """Caller holds none of the table's access roles."""

    def __init__(self, table_name: str, required: frozenset[str]) -> None:
        super().__init__(f"access to {table_name!r} requires one of roles {sorted(required)}")
        self.table_name = table_name
        self.required = required


# -----------------------------------------------------------------------------
# Registries and dispatch
# -----------------------------------------------------------------------------


class MapperError(AdminError):
    """Value mapper registration failure (fatal at startup)."""


class DuplicateMapperKeyError(MapperError):
    def __init__(self, key: str) -> None:
        super().__init__(f"value mapper {key!r} is already registered")
        self.key = key


class ActionError(AdminError):
    """
    Base class custom actions may raise.

    Notes:
        The dispatcher never catches or retries; the error reaches the host unchanged.
    """


class DuplicateActionKeyError(AdminError):
    def __init__(self, key: str) -> None:
        super().__init__(f"action {key!r} is already registered")
        self.key = key


class DuplicatePreviewKeyError(AdminError):
    def __init__(self, key: str) -> None:
        super().__init__(f"preview {key!r} is already registered")
        self.key = key


class UnknownActionError(AdminError):
    def __init__(self, table_name: str, key: str) -> None:
        super().__init__(f"action {key!r} is not available on table {table_name!r}")
        self.table_name = table_name
        self.key = key


class UnknownTableError(AdminError, LookupError):
    def __init__(self, table_name: str) -> None:
        super().__init__(f"no table registered under {table_name!r}")
        self.table_name = table_name


class UnknownOrderFieldError(AdminError, ValueError):
    def __init__(self, table_name: str, field_name: str) -> None:
        super().__init__(f"cannot order table {table_name!r} by unknown field {field_name!r}")
        self.table_name = table_name
        self.field_name = field_name


class RegistrySealedError(AdminError):
    """Registration attempted after startup completed."""

    def __init__(self, registry: str) -> None:
        super().__init__(f"{registry} is sealed; register everything before serving traffic")
        self.registry = registry


class RecordNotFoundError(AdminError, LookupError):
    def __init__(self, table_name: str, record_id: Any) -> None:
        super().__init__(f"table {table_name!r} has no record {record_id!r}")
        self.table_name = table_name
        self.record_id = record_id
