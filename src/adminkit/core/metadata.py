"""
Pydantic v2 models for raw per-table and per-field metadata records.

These records are the opaque input feed produced by a metadata extractor (model
annotations, declarative config files, ...). They are shape-checked here and
resolved into frozen descriptors by adminkit.core.builder, which owns every
cross-field invariant (uniqueness, limits, regex, enumerations, primary key).

Responsibilities
- Define LimitsMetadata, AutoNowDateMetadata, FieldMetadata, OrderMetadata and TableMetadata.
- Normalize enum-like strings (column types, store kinds, directions, default actions).
- Reject unknown keys (extra="forbid") so typos in metadata fail loudly.

Style
- Zero-IO (stdlib + pydantic only).
- Blank optional strings are treated as "not declared" (normalized to None).

Examples:
    >>> from adminkit.core.metadata import TableMetadata
    >>> meta = TableMetadata.model_validate(
    ...     {
    ...         "table_name": "users",
    ...         "primary_key": "id",
    ...         "fields": [{"field_name": "id", "property_type": "int", "read_only": True}],
    ...     }
    ... )
    >>> meta.fields[0].property_type
    'int'
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import (
    ColumnType,
    DefaultAction,
    Direction,
    StoreKind,
    column_type_from_value,
    default_action_from_value,
    direction_from_value,
    store_kind_from_value,
)

__all__ = [
    "LimitsMetadata",
    "AutoNowDateMetadata",
    "FieldMetadata",
    "OrderMetadata",
    "TableMetadata",
    "parse_tables",
]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class LimitsMetadata(BaseModel):
    """
    Declared limits of a field.

    Attributes:
        min_length (int | None): Minimum text length.
        max_length (int | None): Maximum text length.
        regex_pattern (str | None): Pattern the whole value must match.
        min_value (float | None): Lower bound for numeric fields.
        max_value (float | None): Upper bound for numeric fields.

    Notes:
        Consistency (min <= max, compilable pattern) is checked by the builder.
    """

    model_config = ConfigDict(extra="forbid")

    min_length: int | None = None
    max_length: int | None = None
    regex_pattern: str | None = None
    min_value: float | None = None
    max_value: float | None = None

    @field_validator("regex_pattern", mode="before")
    @classmethod
    def _normalize_pattern(cls, v: Any) -> Any:
        return _blank_to_none(v)


class AutoNowDateMetadata(BaseModel):
    """
    Date or datetime field stamped with the current time by the binder.

    Attributes:
        update_on_change (bool): Also stamp on every update, not only on create.
    """

    model_config = ConfigDict(extra="forbid")

    update_on_change: bool = False


class FieldMetadata(BaseModel):
    """
    Raw metadata of one field (column or document property).

    Attributes:
        field_name (str): Property name, unique within its table.
        verbose_name (str | None): Display label; humanized field_name when blank.
        column_name (str | None): Storage column/key; field_name when blank.
        property_type (str | None): Type of the underlying property, used for inference.
        column_type (ColumnType | None): Explicit override; always wins over inference.
        default_value (str | None): Default applied on create (string form).
        nullable (bool): Whether blank input binds to None.
        read_only (bool): Never taken from forms; copied from the persisted row.
        show_in_panel (bool): Whether listings show the field.
        limits (LimitsMetadata | None): Length/pattern/value limits.
        allowed_mime_types (list[str] | None): Accepted mime types for file fields.
        enumeration_values (list[str] | None): Declared enumeration capability.
        is_text_area (bool): Render as multi-line input.
        value_mapper (str | None): Key of a registered value mapper.
        preview (str | None): Key of a registered preview renderer.
        confirmation (bool): The value must be submitted twice and match.
        auto_now_date (AutoNowDateMetadata | None): Stamp with the current time; ``true``
            is shorthand for stamping on create only.
    """

    model_config = ConfigDict(extra="forbid")

    field_name: str = Field(..., min_length=1)
    verbose_name: str | None = None
    column_name: str | None = None
    property_type: str | None = None
    column_type: ColumnType | None = None
    default_value: str | None = None
    nullable: bool = False
    read_only: bool = False
    show_in_panel: bool = True
    limits: LimitsMetadata | None = None
    allowed_mime_types: list[str] | None = None
    enumeration_values: list[str] | None = None
    is_text_area: bool = False
    value_mapper: str | None = None
    preview: str | None = None
    confirmation: bool = False
    auto_now_date: AutoNowDateMetadata | None = None

    @field_validator("field_name", mode="before")
    @classmethod
    def _strip_field_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("verbose_name", "column_name", "value_mapper", "preview", mode="before")
    @classmethod
    def _normalize_optional(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("property_type", mode="before")
    @classmethod
    def _normalize_property_type(cls, v: Any) -> Any:
        if isinstance(v, type):
            return v.__name__
        return _blank_to_none(v)

    @field_validator("column_type", mode="before")
    @classmethod
    def _normalize_column_type(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if v is None:
            return None
        return column_type_from_value(v)

    @field_validator("auto_now_date", mode="before")
    @classmethod
    def _normalize_auto_now_date(cls, v: Any) -> Any:
        if v is True:
            return {}
        if v is False:
            return None
        return v

    @field_validator("default_value", mode="before")
    @classmethod
    def _stringify_default(cls, v: Any) -> Any:
        # TOML/JSON metadata may carry typed defaults; the binder parses strings.
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v


class OrderMetadata(BaseModel):
    """Declared default ordering of a table."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    direction: Direction = Direction.ASC

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, v: Any) -> Direction:
        return direction_from_value(v)


class TableMetadata(BaseModel):
    """
    Raw metadata of one table or collection.

    Attributes:
        table_name (str): Unique key of the table across the registry.
        primary_key (str): Name of the primary key field.
        singular_name (str | None): Display name of one record; table_name when blank.
        plural_name (str | None): Display/route name; pluralized table_name when blank.
        group_name (str | None): Panel group; ungrouped when blank.
        database_key (str | None): Which configured database holds the table.
        store (StoreKind): Relational table or document collection.
        fields (list[FieldMetadata]): Ordered field declarations.
        searchable_fields (list[str]): Fields matched by free-text search.
        filterable_fields (list[str]): Fields offered as listing filters.
        access_roles (list[str] | None): Roles allowed to operate; empty/None is public.
        display_format (str | None): Template such as "{first_name} {last_name}".
        default_order (OrderMetadata | None): Listing order when the request has none.
        default_actions (list[DefaultAction] | None): Built-in operations; None means all.
        custom_actions (list[str]): Keys of registered custom actions offered here.
        show_in_panel (bool): Whether the table appears in the panel menu.
        icon (str | None): Optional icon file reference.
    """

    model_config = ConfigDict(extra="forbid")

    table_name: str = Field(..., min_length=1)
    primary_key: str = Field(..., min_length=1)
    singular_name: str | None = None
    plural_name: str | None = None
    group_name: str | None = None
    database_key: str | None = None
    store: StoreKind = StoreKind.RELATIONAL
    fields: list[FieldMetadata] = Field(default_factory=list)
    searchable_fields: list[str] = Field(default_factory=list)
    filterable_fields: list[str] = Field(default_factory=list)
    access_roles: list[str] | None = None
    display_format: str | None = None
    default_order: OrderMetadata | None = None
    default_actions: list[DefaultAction] | None = None
    custom_actions: list[str] = Field(default_factory=list)
    show_in_panel: bool = True
    icon: str | None = None

    @field_validator("table_name", "primary_key", mode="before")
    @classmethod
    def _strip_keys(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator(
        "singular_name",
        "plural_name",
        "group_name",
        "database_key",
        "display_format",
        "icon",
        mode="before",
    )
    @classmethod
    def _normalize_optional(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("store", mode="before")
    @classmethod
    def _normalize_store(cls, v: Any) -> StoreKind:
        return store_kind_from_value(v)

    @field_validator("default_actions", mode="before")
    @classmethod
    def _normalize_default_actions(cls, v: Any) -> Any:
        if v is None:
            return None
        return [default_action_from_value(item) for item in v]


def parse_tables(payload: Mapping[str, Any] | Sequence[Any]) -> list[TableMetadata]:
    """
    Validate a loose payload into TableMetadata records.

    Args:
        payload: Either a sequence of table mappings/records, or a mapping with a
            "tables" key holding such a sequence.

    Returns:
        list[TableMetadata]: Records in declaration order.

    Raises:
        pydantic.ValidationError: If a record has the wrong shape.
        TypeError: If the payload is neither form.
    """
    if isinstance(payload, Mapping):
        items = payload.get("tables", [])
    elif isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
        items = payload
    else:
        raise TypeError(f"metadata payload must be a mapping or a sequence, got {type(payload)!r}")
    return [
        item if isinstance(item, TableMetadata) else TableMetadata.model_validate(item)
        for item in items
    ]
