"""
Descriptor builder: resolve raw metadata records into the frozen descriptor graph.

Responsibilities
- Apply naming defaults (verbose names, singular/plural names, column names, groups).
- Resolve each field's column type (explicit override > declared capability > inference).
- Enforce build-time invariants and raise the matching SchemaError subclass:
    * duplicate table keys / duplicate field keys
    * min > max limits, negative lengths
    * regex patterns that do not compile
    * enumeration capabilities without values
    * auto-now dates on non-date fields, confirmation on non-text fields
    * primary keys naming no declared field
    * searches, filters, default order or display format naming unknown fields

Notes
- build_descriptors is a pure function of its input; it never touches a registry.
  adminkit.runtime.registry.TableRegistry is the process-wide holder.
- Runs once at startup; any SchemaError must abort initialization.

Examples
--------
>>> from adminkit.core.builder import build_descriptors
>>> tables = build_descriptors(
...     [
...         {
...             "table_name": "category",
...             "primary_key": "id",
...             "fields": [
...                 {"field_name": "id", "property_type": "int", "read_only": True},
...                 {"field_name": "displayName", "property_type": "str"},
...             ],
...         }
...     ]
... )
>>> desc = tables["category"]
>>> desc.plural_name, desc.get_field("displayName").verbose_name
('categories', 'Display Name')
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .constants import UNGROUPED
from .descriptors import AutoNowDate, FieldDescriptor, Limits, Order, TableDescriptor, template_placeholders
from .errors import (
    DuplicateFieldKeyError,
    DuplicateTableKeyError,
    InvalidEnumerationError,
    InvalidFieldOptionError,
    InvalidLimitError,
    InvalidRegexError,
    PrimaryKeyNotFoundError,
    UnknownFieldReferenceError,
)
from .metadata import FieldMetadata, LimitsMetadata, TableMetadata, parse_tables
from .naming import humanize, pluralize
from .types import ColumnType, DefaultAction, infer_column_type

__all__ = [
    "resolve_column_type",
    "build_limits",
    "build_field",
    "build_table",
    "build_descriptors",
]

logger = logging.getLogger(__name__)

_AUTO_NOW_TYPES = frozenset({ColumnType.DATE, ColumnType.DATETIME})


def _dedupe_preserving_order(items: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return tuple(ordered)


def resolve_column_type(meta: FieldMetadata) -> ColumnType:
    """
    Resolve the column type of a field.

    Precedence:
        1) explicit ``column_type`` override;
        2) declared capability: enumeration values -> ENUMERATION, mime types -> FILE;
        3) inference from ``property_type``.
    """
    if meta.column_type is not None:
        return meta.column_type
    if meta.enumeration_values is not None:
        return ColumnType.ENUMERATION
    if meta.allowed_mime_types is not None:
        return ColumnType.FILE
    return infer_column_type(meta.property_type)


def build_limits(table_name: str, field_name: str, meta: LimitsMetadata | None) -> Limits:
    """
    Validate declared limits.

    Raises:
        InvalidLimitError: On negative lengths or a minimum above its maximum.
        InvalidRegexError: If regex_pattern does not compile.
    """
    if meta is None:
        return Limits()
    for name, value in (("min_length", meta.min_length), ("max_length", meta.max_length)):
        if value is not None and value < 0:
            raise InvalidLimitError(table_name, field_name, f"{name} must be >= 0, got {value}")
    if (
        meta.min_length is not None
        and meta.max_length is not None
        and meta.min_length > meta.max_length
    ):
        raise InvalidLimitError(
            table_name,
            field_name,
            f"min_length {meta.min_length} exceeds max_length {meta.max_length}",
        )
    if meta.min_value is not None and meta.max_value is not None and meta.min_value > meta.max_value:
        raise InvalidLimitError(
            table_name,
            field_name,
            f"min_value {meta.min_value} exceeds max_value {meta.max_value}",
        )
    if meta.regex_pattern is not None:
        try:
            re.compile(meta.regex_pattern)
        except re.error as exc:
            raise InvalidRegexError(table_name, field_name, meta.regex_pattern, str(exc)) from exc
    return Limits(
        min_length=meta.min_length,
        max_length=meta.max_length,
        regex_pattern=meta.regex_pattern,
        min_value=meta.min_value,
        max_value=meta.max_value,
    )


def build_field(table_name: str, meta: FieldMetadata) -> FieldDescriptor:
    """
    Resolve one field's metadata.

    Raises:
        InvalidEnumerationError: If an enumeration capability declares zero values.
        InvalidFieldOptionError: If auto_now_date is declared on a non-date field, or
            confirmation on a non-string field.
        InvalidLimitError, InvalidRegexError: See build_limits.
    """
    column_type = resolve_column_type(meta)
    enumeration_values: tuple[str, ...] | None = None
    if meta.enumeration_values is not None or column_type is ColumnType.ENUMERATION:
        enumeration_values = _dedupe_preserving_order(meta.enumeration_values or ())
        if not enumeration_values:
            raise InvalidEnumerationError(table_name, meta.field_name)
    if meta.auto_now_date is not None and column_type not in _AUTO_NOW_TYPES:
        raise InvalidFieldOptionError(table_name, meta.field_name, "auto_now_date", column_type.value)
    if meta.confirmation and column_type is not ColumnType.STRING:
        raise InvalidFieldOptionError(table_name, meta.field_name, "confirmation", column_type.value)
    mime_types = (
        frozenset(m.strip().lower() for m in meta.allowed_mime_types if m.strip())
        if meta.allowed_mime_types is not None
        else None
    )
    return FieldDescriptor(
        field_name=meta.field_name,
        table_name=table_name,
        verbose_name=meta.verbose_name or humanize(meta.field_name),
        column_name=meta.column_name or meta.field_name,
        column_type=column_type,
        default_value=meta.default_value,
        nullable=meta.nullable,
        read_only=meta.read_only,
        show_in_panel=meta.show_in_panel,
        limits=build_limits(table_name, meta.field_name, meta.limits),
        allowed_mime_types=mime_types,
        enumeration_values=enumeration_values,
        is_text_area=meta.is_text_area,
        value_mapper=meta.value_mapper,
        preview=meta.preview,
        confirmation=meta.confirmation,
        auto_now_date=(
            AutoNowDate(update_on_change=meta.auto_now_date.update_on_change)
            if meta.auto_now_date is not None
            else None
        ),
    )


def _check_references(table_name: str, known: set[str], names: Iterable[str], where: str) -> None:
    for name in names:
        if name not in known:
            raise UnknownFieldReferenceError(table_name, name, where)


def build_table(meta: TableMetadata | Mapping[str, Any]) -> TableDescriptor:
    """
    Resolve one table's metadata into a TableDescriptor.

    Args:
        meta: A TableMetadata record, or a mapping validated into one.

    Returns:
        TableDescriptor: Frozen descriptor with defaults applied.

    Raises:
        DuplicateFieldKeyError: If two fields share a name.
        PrimaryKeyNotFoundError: If primary_key names no declared field.
        UnknownFieldReferenceError: If searches, filters, default order or the display
            format name an undeclared field.
        SchemaError: Any field-level failure from build_field.
        pydantic.ValidationError: If a mapping has the wrong shape.
    """
    if not isinstance(meta, TableMetadata):
        meta = TableMetadata.model_validate(meta)
    table_name = meta.table_name

    fields: list[FieldDescriptor] = []
    seen: set[str] = set()
    for field_meta in meta.fields:
        if field_meta.field_name in seen:
            raise DuplicateFieldKeyError(table_name, field_meta.field_name)
        seen.add(field_meta.field_name)
        fields.append(build_field(table_name, field_meta))

    if meta.primary_key not in seen:
        raise PrimaryKeyNotFoundError(table_name, meta.primary_key)
    _check_references(table_name, seen, meta.searchable_fields, "searchable_fields")
    _check_references(table_name, seen, meta.filterable_fields, "filterable_fields")
    if meta.display_format is not None:
        _check_references(
            table_name, seen, template_placeholders(meta.display_format), "display_format"
        )
    default_order: Order | None = None
    if meta.default_order is not None:
        _check_references(table_name, seen, [meta.default_order.name], "default_order")
        default_order = Order(meta.default_order.name, meta.default_order.direction)

    default_actions = (
        frozenset(DefaultAction) if meta.default_actions is None else frozenset(meta.default_actions)
    )
    access_roles = frozenset(r.strip() for r in meta.access_roles or () if r.strip())

    desc = TableDescriptor(
        table_name=table_name,
        primary_key_name=meta.primary_key,
        singular_name=meta.singular_name or table_name,
        plural_name=meta.plural_name or pluralize(table_name),
        group_name=meta.group_name or UNGROUPED,
        database_key=meta.database_key,
        store=meta.store,
        fields=tuple(fields),
        searchable_fields=_dedupe_preserving_order(meta.searchable_fields),
        filterable_fields=_dedupe_preserving_order(meta.filterable_fields),
        access_roles=access_roles,
        display_format=meta.display_format,
        default_order=default_order,
        default_actions=default_actions,
        custom_actions=_dedupe_preserving_order(meta.custom_actions),
        show_in_panel=meta.show_in_panel,
        icon=meta.icon,
    )
    logger.debug(
        "resolved table %s (%d fields, store=%s, roles=%s)",
        table_name,
        len(fields),
        desc.store.value,
        sorted(access_roles) or "public",
    )
    return desc


def build_descriptors(
    records: Mapping[str, Any] | Sequence[TableMetadata | Mapping[str, Any]],
) -> dict[str, TableDescriptor]:
    """
    Resolve every table record into descriptors keyed by table_name.

    Args:
        records: TableMetadata records or mappings, or a mapping with a "tables" key.

    Returns:
        dict[str, TableDescriptor]: Descriptors in declaration order.

    Raises:
        DuplicateTableKeyError: If two records share a table_name.
        SchemaError: Any table- or field-level failure.
    """
    tables: dict[str, TableDescriptor] = {}
    for meta in parse_tables(records):
        if meta.table_name in tables:
            raise DuplicateTableKeyError(meta.table_name)
        tables[meta.table_name] = build_table(meta)
    logger.info("resolved %d table descriptor(s)", len(tables))
    return tables
