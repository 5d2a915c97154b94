"""
Form binder: validate and type untyped request data against a TableDescriptor.

Purpose
- Turn a UserForm (field name -> optional raw string) into a typed value mapping
  ready for the value mapper registry, or into a list of ErrorResponse entries.

Per-field pipeline (non read-only fields, declaration order)
1) presence: blank input binds None (nullable) or the typed default; otherwise the
   field is missing and its remaining checks are skipped. A blank non-nullable
   boolean is an unchecked checkbox and binds False (its default only on create)
2) length bounds on the raw text
3) regex pattern (full match)
4) mime type of file fields, guessed from the submitted file name
5) enumeration membership
6) typed coercion per column type
7) numeric value bounds
8) confirmation: a confirmed field must equal its ``<field>_confirmation`` entry

Notes
- Violations are accumulated across fields and within a field; only a missing
  value or a failed coercion ends a field's checks early. Each offending field
  yields exactly one ErrorResponse.
- Read-only fields are never read from the form. On update they keep the existing
  row's value; on create they take the typed default (or None).
- Auto-now date fields are never read from the form either. They are stamped with
  the binder clock on create, and on update only when declared update_on_change.
- Messages are the violation codes ("required", "pattern mismatch", ...) unless a
  Translator is supplied.
"""

from __future__ import annotations

import logging
import mimetypes
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from adminkit.core.constants import CONFIRMATION_SUFFIX, UNKNOWN_MIME_TYPE
from adminkit.core.descriptors import FieldDescriptor, TableDescriptor
from adminkit.core.types import NUMERIC_TYPES, ColumnType

from .config import AdminSettings
from .errors import (
    ConfirmationMismatchError,
    DisallowedMimeTypeError,
    FieldValidationError,
    InvalidEnumerationValueError,
    InvalidValueError,
    LengthOutOfRangeError,
    MissingRequiredFieldError,
    PatternMismatchError,
    ValueOutOfRangeError,
)
from .translator import Translator
from .values import parse_value

__all__ = [
    "ErrorResponse",
    "BindResult",
    "FormBinder",
    "bind_form",
    "error_responses_to_map",
    "guess_mime_type",
]

logger = logging.getLogger(__name__)

UserForm = Mapping[str, "str | None"]


@dataclass(frozen=True)
class ErrorResponse:
    """Violations of one field, in check order."""

    field: str
    messages: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "messages": list(self.messages)}


@dataclass
class BindResult:
    """
    Outcome of binding one form.

    Attributes:
        values (dict[str, Any]): Typed values of every declared field that bound cleanly.
        errors (list[ErrorResponse]): One entry per offending field, in field order.
    """

    values: dict[str, Any] = field(default_factory=dict)
    errors: list[ErrorResponse] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def error_responses_to_map(errors: Sequence[ErrorResponse]) -> dict[str, list[str]]:
    """Field name -> messages, the shape templates usually consume."""
    return {e.field: list(e.messages) for e in errors}


def guess_mime_type(file_name: str) -> str:
    """Mime type of a file name by extension, "unknown" when it cannot be guessed."""
    mime, _ = mimetypes.guess_type(file_name, strict=False)
    return mime or UNKNOWN_MIME_TYPE


def _bounds(lo: Any, hi: Any) -> str:
    return f"{'' if lo is None else lo}..{'' if hi is None else hi}"


def _is_blank(raw: str | None) -> bool:
    return raw is None or not str(raw).strip()


def _confirmed(form: UserForm, f: FieldDescriptor) -> bool:
    return (form.get(f.field_name) or "") == (form.get(f.field_name + CONFIRMATION_SUFFIX) or "")


class FormBinder:
    """
    Binds forms for any table; holds only request-independent settings.

    Examples:
        >>> from adminkit.core.builder import build_table
        >>> users = build_table({
        ...     "table_name": "users", "primary_key": "id",
        ...     "fields": [{"field_name": "id", "property_type": "int", "read_only": True},
        ...                {"field_name": "email", "limits": {"regex_pattern": "^.+@.+$"}}],
        ... })
        >>> [e.to_dict() for e in FormBinder().bind({"email": "nope"}, users).errors]
        [{'field': 'email', 'messages': ['pattern mismatch']}]
    """

    def __init__(
        self,
        settings: AdminSettings | None = None,
        translator: Translator | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings or AdminSettings()
        self.translator = translator
        self.clock = clock

    def bind(
        self,
        form: UserForm,
        table: TableDescriptor,
        existing: Mapping[str, Any] | None = None,
    ) -> BindResult:
        """
        Validate and type a form.

        Args:
            form: Raw request values keyed by field name; undeclared keys are ignored.
            table: Target table.
            existing: Persisted row on update, None on create.

        Returns:
            BindResult: Typed values and accumulated errors.
        """
        result = BindResult()
        creating = existing is None
        for f in table.fields:
            if f.auto_now_date is not None:
                self._bind_auto_now(f, existing, result)
                continue
            if f.read_only:
                self._bind_read_only(f, existing, result)
                continue
            raw = form.get(f.field_name)
            if f.is_file and not creating and _is_blank(raw):
                # No new upload on update keeps the stored file.
                result.values[f.field_name] = existing.get(f.field_name)
                continue
            value, violations = self.check_field(f, raw, creating=creating)
            if f.confirmation and not _confirmed(form, f):
                violations.append(ConfirmationMismatchError(f.field_name))
            if violations:
                result.errors.append(
                    ErrorResponse(field=f.field_name, messages=[self._message(v) for v in violations])
                )
            else:
                result.values[f.field_name] = value

        if result.errors:
            logger.debug(
                "form for %s rejected: %s",
                table.table_name,
                ", ".join(e.field for e in result.errors),
            )
        return result

    def check_field(
        self, f: FieldDescriptor, raw: str | None, creating: bool = True
    ) -> tuple[Any, list[FieldValidationError]]:
        """
        Run every value check of one writable field.

        ``creating`` is False when binding an update; it only matters for blank booleans.

        Returns:
            tuple[Any, list[FieldValidationError]]: The typed value (None when any check
            failed) and the violations in check order.
        """
        name = f.field_name
        if _is_blank(raw):
            if f.column_type is ColumnType.BOOLEAN and not f.nullable:
                # Unchecked checkboxes are not submitted at all.
                if creating and f.default_value is not None:
                    return self._typed_default(f)
                return False, []
            if f.nullable:
                return None, []
            if f.required_on_create:
                return None, [MissingRequiredFieldError(name)]
            return self._typed_default(f)

        text = str(raw)
        violations: list[FieldValidationError] = []
        limits = f.limits

        if limits.min_length is not None or limits.max_length is not None:
            length = len(text)
            if (limits.min_length is not None and length < limits.min_length) or (
                limits.max_length is not None and length > limits.max_length
            ):
                violations.append(
                    LengthOutOfRangeError(
                        name,
                        {
                            "length": length,
                            "min_length": limits.min_length,
                            "max_length": limits.max_length,
                            "range": _bounds(limits.min_length, limits.max_length),
                        },
                    )
                )

        if limits.regex_pattern is not None and re.fullmatch(limits.regex_pattern, text) is None:
            violations.append(PatternMismatchError(name, {"pattern": limits.regex_pattern}))

        if f.is_file and f.allowed_mime_types:
            mime = guess_mime_type(text)
            if mime not in f.allowed_mime_types:
                violations.append(
                    DisallowedMimeTypeError(
                        name, {"mime_type": mime, "allowed": ", ".join(sorted(f.allowed_mime_types))}
                    )
                )

        if f.enumeration_values is not None and text not in f.enumeration_values:
            violations.append(
                InvalidEnumerationValueError(name, {"value": text, "allowed": ", ".join(f.enumeration_values)})
            )

        try:
            value = parse_value(f.column_type, text, self.settings)
        except ValueError:
            violations.append(InvalidValueError(name, {"value": text, "column_type": f.column_type.value}))
            return None, violations

        if f.column_type in NUMERIC_TYPES and (limits.min_value is not None or limits.max_value is not None):
            if (limits.min_value is not None and value < limits.min_value) or (
                limits.max_value is not None and value > limits.max_value
            ):
                violations.append(
                    ValueOutOfRangeError(
                        name,
                        {
                            "value": value,
                            "min_value": limits.min_value,
                            "max_value": limits.max_value,
                            "range": _bounds(limits.min_value, limits.max_value),
                        },
                    )
                )

        return (None, violations) if violations else (value, violations)

    def _typed_default(self, f: FieldDescriptor) -> tuple[Any, list[FieldValidationError]]:
        try:
            return parse_value(f.column_type, f.default_value or "", self.settings), []
        except ValueError:
            return None, [
                InvalidValueError(f.field_name, {"value": f.default_value, "column_type": f.column_type.value})
            ]

    def _bind_auto_now(self, f: FieldDescriptor, existing: Mapping[str, Any] | None, result: BindResult) -> None:
        update_on_change = f.auto_now_date is not None and f.auto_now_date.update_on_change
        if existing is not None and not update_on_change:
            result.values[f.field_name] = existing.get(f.field_name)
            return
        now = self.clock()
        result.values[f.field_name] = now.date() if f.column_type is ColumnType.DATE else now

    def _bind_read_only(self, f: FieldDescriptor, existing: Mapping[str, Any] | None, result: BindResult) -> None:
        if existing is not None:
            result.values[f.field_name] = existing.get(f.field_name)
            return
        if f.default_value is None:
            result.values[f.field_name] = None
            return
        value, violations = self._typed_default(f)
        if violations:
            result.errors.append(
                ErrorResponse(field=f.field_name, messages=[self._message(v) for v in violations])
            )
        else:
            result.values[f.field_name] = value

    def _message(self, violation: FieldValidationError) -> str:
        if self.translator is None:
            return violation.code
        return self.translator.field_error(violation)


def bind_form(
    form: UserForm,
    table: TableDescriptor,
    existing: Mapping[str, Any] | None = None,
    *,
    settings: AdminSettings | None = None,
    translator: Translator | None = None,
) -> BindResult:
    """Convenience wrapper around FormBinder.bind."""
    return FormBinder(settings=settings, translator=translator).bind(form, table, existing)
