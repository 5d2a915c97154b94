"""
Listing predicates and pagination.

Purpose
- Shape a listing request's query parameters into a store-agnostic Predicate
  (search term over searchable fields, typed equality and range filters over
  filterable fields) and a Pagination window.
- Evaluate both against an in-memory Polars frame, for embedded storage
  backends and tests. Real backends translate the Predicate themselves.

Parameters
- ``search``: free-text term, matched case-insensitively as a substring.
- ``filters.<field>``: equality on a filterable field.
- ``filters.<field>.start`` / ``filters.<field>.end``: inclusive bounds on a
  filterable numeric, date or datetime field.
- ``page``: 1-based page number.

Notes
- A filter value that cannot be parsed as its field's type is ignored (logged at
  debug level); it never fails the listing.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import polars as pl

from adminkit.core.constants import FILTERS_PREFIX, MAX_ITEMS_IN_PAGE
from adminkit.core.descriptors import FieldDescriptor, TableDescriptor
from adminkit.core.types import NUMERIC_TYPES, ColumnType

from .config import AdminSettings
from .values import parse_value

__all__ = [
    "Predicate",
    "Pagination",
    "build_predicate",
    "apply_predicate",
    "paginate_frame",
]

logger = logging.getLogger(__name__)

_RANGE_TYPES = NUMERIC_TYPES | {ColumnType.DATE, ColumnType.DATETIME}


@dataclass(frozen=True)
class Predicate:
    """
    Store-agnostic listing filter.

    Attributes:
        search (str | None): Search term; None when absent.
        search_fields (tuple[str, ...]): Fields the term is matched against.
        equals (dict[str, Any]): Field name -> typed value.
        ranges (dict[str, tuple[Any, Any]]): Field name -> (start, end); either bound may be None.
    """

    search: str | None = None
    search_fields: tuple[str, ...] = ()
    equals: dict[str, Any] = field(default_factory=dict)
    ranges: dict[str, tuple[Any, Any]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.search and self.search_fields) and not self.equals and not self.ranges


@dataclass(frozen=True)
class Pagination:
    """1-based page window."""

    page: int = 1
    per_page: int = MAX_ITEMS_IN_PAGE

    @classmethod
    def from_params(cls, params: Mapping[str, Any], settings: AdminSettings | None = None) -> Pagination:
        settings = settings or AdminSettings()
        try:
            page = int(params.get("page") or 1)
        except (TypeError, ValueError):
            page = 1
        return cls(page=max(page, 1), per_page=settings.max_items_in_page)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def page_count(self, total: int) -> int:
        return max(1, math.ceil(total / self.per_page))


def _typed(f: FieldDescriptor, raw: Any, settings: AdminSettings) -> Any:
    """Parse one filter parameter; None when blank or unparsable."""
    if raw is None or not str(raw).strip():
        return None
    try:
        value = parse_value(f.column_type, str(raw).strip(), settings)
    except ValueError:
        logger.debug("ignoring filter %s.%s=%r", f.table_name, f.field_name, raw)
        return None
    if f.enumeration_values is not None and value not in f.enumeration_values:
        logger.debug("ignoring filter %s.%s=%r (not an enumeration value)", f.table_name, f.field_name, raw)
        return None
    return value


def build_predicate(
    table: TableDescriptor,
    params: Mapping[str, Any],
    settings: AdminSettings | None = None,
) -> Predicate:
    """
    Build a Predicate from listing query parameters.

    Only the table's searchable/filterable fields are considered; any other
    ``filters.*`` parameter is ignored.

    Examples:
        >>> from adminkit.core.builder import build_table
        >>> t = build_table({"table_name": "user", "primary_key": "id",
        ...                  "fields": [{"field_name": "id", "property_type": "int"},
        ...                             {"field_name": "age", "property_type": "int"}],
        ...                  "filterable_fields": ["age"]})
        >>> build_predicate(t, {"filters.age": "30"}).equals
        {'age': 30}
    """
    settings = settings or AdminSettings()
    search = params.get("search")
    search = search.strip() if isinstance(search, str) and search.strip() else None

    equals: dict[str, Any] = {}
    ranges: dict[str, tuple[Any, Any]] = {}
    for name in table.filterable_fields:
        f = table.get_field(name)
        key = FILTERS_PREFIX + name
        if f.column_type in _RANGE_TYPES:
            start = _typed(f, params.get(key + ".start"), settings)
            end = _typed(f, params.get(key + ".end"), settings)
            if start is not None or end is not None:
                ranges[name] = (start, end)
        value = _typed(f, params.get(key), settings)
        if value is not None:
            equals[name] = value

    return Predicate(
        search=search,
        search_fields=table.searchable_fields,
        equals=equals,
        ranges=ranges,
    )


def apply_predicate(df: pl.DataFrame, predicate: Predicate) -> pl.DataFrame:
    """Filter a listing frame (columns named by field) with a Predicate."""
    if predicate.is_empty or df.is_empty():
        return df

    exprs: list[pl.Expr] = []
    if predicate.search and predicate.search_fields:
        term = predicate.search.lower()
        matches = [
            pl.col(name).cast(pl.Utf8).str.to_lowercase().str.contains(term, literal=True).fill_null(False)
            for name in predicate.search_fields
            if name in df.columns
        ]
        if matches:
            exprs.append(pl.any_horizontal(matches))
    for name, value in predicate.equals.items():
        exprs.append(pl.col(name) == pl.lit(value))
    for name, (start, end) in predicate.ranges.items():
        if start is not None:
            exprs.append(pl.col(name) >= pl.lit(start))
        if end is not None:
            exprs.append(pl.col(name) <= pl.lit(end))

    return df.filter(pl.all_horizontal(exprs)) if exprs else df


def paginate_frame(df: pl.DataFrame, pagination: Pagination) -> pl.DataFrame:
    return df.slice(pagination.offset, pagination.per_page)
