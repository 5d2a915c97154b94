"""
Frozen descriptors resolved from raw metadata.

Notes:
    - Descriptors are immutable (frozen dataclasses, tuples, frozensets) and are
      shared read-only across request handlers once built.
    - A TableDescriptor exclusively owns its ordered field tuple; a FieldDescriptor
      only carries its owning table's key (``table_name``) for lookups.
    - Instances are produced by adminkit.core.builder; constructing them by hand
      skips every build-time invariant.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import InvalidOrderDirectionError
from .types import ColumnType, DefaultAction, Direction, StoreKind, direction_from_value

__all__ = [
    "Limits",
    "AutoNowDate",
    "Order",
    "FieldDescriptor",
    "TableDescriptor",
    "template_placeholders",
    "populate_template",
]

_PLACEHOLDER_RE = re.compile(r"\{(.*?)}")


def template_placeholders(template: str) -> list[str]:
    """Return the names referenced as ``{name}`` in a display template, in order."""
    return _PLACEHOLDER_RE.findall(template)


def populate_template(template: str, values: Mapping[str, Any]) -> str:
    """
    Substitute ``{name}`` placeholders with values.

    Placeholders whose value is missing or None are left verbatim.

    Examples:
        >>> populate_template("{first} {last}", {"first": "Ada", "last": None})
        'Ada {last}'
    """

    def _sub(match: re.Match[str]) -> str:
        value = values.get(match.group(1))
        return match.group(0) if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_sub, template)


@dataclass(frozen=True)
class Limits:
    """Validated limits of a field; None means unbounded."""

    min_length: int | None = None
    max_length: int | None = None
    regex_pattern: str | None = None
    min_value: float | None = None
    max_value: float | None = None


@dataclass(frozen=True)
class AutoNowDate:
    """Stamp a date/datetime field with the current time on create (and on update when asked)."""

    update_on_change: bool = False


@dataclass(frozen=True)
class Order:
    """
    One key/direction pair of a composite sort specification.

    Attributes:
        name (str): Field name to sort by.
        direction (Direction): ASC or DESC.

    Examples:
        >>> str(Order.parse("age", "desc"))
        'age DESC'
    """

    name: str
    direction: Direction = Direction.ASC

    @classmethod
    def parse(cls, name: str, direction: str | Direction = "ASC") -> Order:
        """
        Build an Order from a case-insensitive direction token.

        Raises:
            InvalidOrderDirectionError: If direction is neither asc nor desc.
        """
        try:
            return cls(name=name, direction=direction_from_value(direction))
        except ValueError as exc:
            raise InvalidOrderDirectionError(direction) from exc

    @property
    def descending(self) -> bool:
        return self.direction is Direction.DESC

    def __str__(self) -> str:
        return f"{self.name} {self.direction.value.upper()}"


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Resolved, validated metadata of one field.

    Attributes:
        field_name (str): Unique within the owning table.
        table_name (str): Key of the owning table (non-owning back-reference).
        verbose_name (str): Display label.
        column_name (str): Storage column or document key.
        column_type (ColumnType): Resolved type (override > capability > inference).
        default_value (str | None): Default in string form.
        nullable (bool): Blank input binds to None.
        read_only (bool): Never bound from forms.
        show_in_panel (bool): Shown in listings.
        limits (Limits): Length, pattern and value bounds.
        allowed_mime_types (frozenset[str] | None): Accepted mime types (file fields).
        enumeration_values (tuple[str, ...] | None): Allowed values (enumeration fields).
        is_text_area (bool): Multi-line input hint.
        value_mapper (str | None): Registered mapper key.
        preview (str | None): Registered preview key.
        confirmation (bool): Submitted twice; both entries must match.
        auto_now_date (AutoNowDate | None): Stamped by the binder, never read from forms.
    """

    field_name: str
    table_name: str
    verbose_name: str
    column_name: str
    column_type: ColumnType
    default_value: str | None = None
    nullable: bool = False
    read_only: bool = False
    show_in_panel: bool = True
    limits: Limits = field(default_factory=Limits)
    allowed_mime_types: frozenset[str] | None = None
    enumeration_values: tuple[str, ...] | None = None
    is_text_area: bool = False
    value_mapper: str | None = None
    preview: str | None = None
    confirmation: bool = False
    auto_now_date: AutoNowDate | None = None

    @property
    def is_file(self) -> bool:
        return self.column_type is ColumnType.FILE

    @property
    def required_on_create(self) -> bool:
        """A non-nullable, writable field without default must be supplied on create."""
        return not self.nullable and not self.read_only and self.default_value is None


@dataclass(frozen=True)
class TableDescriptor:
    """
    Resolved, validated metadata of one table or collection.

    Attributes:
        table_name (str): Unique key across the registry.
        primary_key_name (str): Name of a declared field.
        singular_name (str): Display name of one record.
        plural_name (str): Display/route name of the collection.
        group_name (str | None): Panel group, None when ungrouped.
        database_key (str | None): Configured database holding the table.
        store (StoreKind): Relational table or document collection.
        fields (tuple[FieldDescriptor, ...]): Ordered fields with unique names.
        searchable_fields (tuple[str, ...]): Subset of field names.
        filterable_fields (tuple[str, ...]): Subset of field names.
        access_roles (frozenset[str]): Empty means public.
        display_format (str | None): ``{field}`` template for record labels.
        default_order (Order | None): Listing order fallback.
        default_actions (frozenset[DefaultAction]): Built-in operations offered.
        custom_actions (tuple[str, ...]): Custom action keys offered.
        show_in_panel (bool): Listed in the panel menu.
        icon (str | None): Optional icon reference.
    """

    table_name: str
    primary_key_name: str
    singular_name: str
    plural_name: str
    group_name: str | None
    database_key: str | None
    fields: tuple[FieldDescriptor, ...]
    store: StoreKind = StoreKind.RELATIONAL
    searchable_fields: tuple[str, ...] = ()
    filterable_fields: tuple[str, ...] = ()
    access_roles: frozenset[str] = frozenset()
    display_format: str | None = None
    default_order: Order | None = None
    default_actions: frozenset[DefaultAction] = frozenset(DefaultAction)
    custom_actions: tuple[str, ...] = ()
    show_in_panel: bool = True
    icon: str | None = None

    def get_field(self, field_name: str) -> FieldDescriptor:
        """
        Look up a field by name.

        Raises:
            KeyError: If the table declares no such field.
        """
        for f in self.fields:
            if f.field_name == field_name:
                return f
        raise KeyError(f"table {self.table_name!r} has no field {field_name!r}")

    def has_field(self, field_name: str) -> bool:
        return any(f.field_name == field_name for f in self.fields)

    @property
    def primary_key_field(self) -> FieldDescriptor:
        return self.get_field(self.primary_key_name)

    @property
    def panel_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.show_in_panel)

    @property
    def is_public(self) -> bool:
        return not self.access_roles

    def allows(self, action: DefaultAction) -> bool:
        return action in self.default_actions

    def display(self, row: Mapping[str, Any]) -> str:
        """
        Render a record label from the display format.

        Falls back to "<singular_name> <primary key value>" when no format is declared.
        """
        if self.display_format is None:
            return f"{self.singular_name} {row.get(self.primary_key_name)}"
        return populate_template(self.display_format, row)

