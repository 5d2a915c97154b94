"""
Ordering model: composite, stable multi-key sorts built from Order entries.

Purpose
- Resolve a request's order list against a table (default order fallback, unknown
  field rejection).
- Sort listing frames (Polars) or row lists by a sequence of Order entries: the
  first entry decides, ties fall through to the next entry, and rows equal on every
  key keep their input order.
- Row lists are ordered through a key frame holding only the sort columns plus each
  row's position; the rows handed back are the input rows, values untouched.

Notes
- render_orders is for logs and diagnostics only; nothing parses it back.
- Request parameters use the ``field`` / ``field:direction`` syntax (see
  parse_order_param), case-insensitive on the direction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import polars as pl

from adminkit.core.descriptors import Order, TableDescriptor

from .errors import UnknownOrderFieldError

__all__ = [
    "parse_order_param",
    "resolve_orders",
    "sort_frame",
    "sort_rows",
    "render_orders",
    "key_frame",
    "pick_rows",
    "ROW_INDEX",
]

ROW_INDEX = "__idx"


def parse_order_param(raw: str | None) -> list[Order]:
    """
    Parse an order request parameter.

    Args:
        raw: Comma separated ``field`` or ``field:direction`` tokens, e.g. "age:desc,name".

    Returns:
        list[Order]: Entries in parameter order (empty for a blank parameter).

    Raises:
        InvalidOrderDirectionError: If a direction is neither asc nor desc.
    """
    orders: list[Order] = []
    for token in (raw or "").split(","):
        token = token.strip()
        if not token:
            continue
        name, _, direction = token.partition(":")
        orders.append(Order.parse(name.strip(), direction.strip() or "ASC"))
    return orders


def _dedupe(orders: Iterable[Order]) -> list[Order]:
    # A repeated key can never break a tie, so only its first occurrence counts.
    seen: set[str] = set()
    out: list[Order] = []
    for order in orders:
        if order.name not in seen:
            seen.add(order.name)
            out.append(order)
    return out


def resolve_orders(table: TableDescriptor, orders: Sequence[Order] | None) -> list[Order]:
    """
    Validate a request's orders against a table.

    Returns:
        list[Order]: The requested orders, or the table's default order when none were
        requested (empty when the table declares none).

    Raises:
        UnknownOrderFieldError: If an entry names a field the table does not declare.
    """
    if not orders:
        return [table.default_order] if table.default_order is not None else []
    for order in orders:
        if not table.has_field(order.name):
            raise UnknownOrderFieldError(table.table_name, order.name)
    return _dedupe(orders)


def key_frame(rows: Sequence[Mapping[str, Any]], columns: Iterable[str]) -> pl.DataFrame:
    """
    Frame of the named columns of each row plus its input position under ROW_INDEX.

    A column a row lacks is null for that row. Rows are read, never copied into the
    frame wholesale.
    """
    names = list(dict.fromkeys(columns))
    if not rows:
        return pl.DataFrame(schema={ROW_INDEX: pl.UInt32})
    if not names:
        return pl.DataFrame({ROW_INDEX: list(range(len(rows)))}, schema={ROW_INDEX: pl.UInt32})
    df = pl.from_dicts([{name: r.get(name) for name in names} for r in rows], infer_schema_length=None)
    return df.with_row_index(ROW_INDEX)


def pick_rows(rows: Sequence[Mapping[str, Any]], df: pl.DataFrame) -> list[dict[str, Any]]:
    """The input rows selected by a key frame, in the frame's order."""
    return [dict(rows[i]) for i in df.get_column(ROW_INDEX).to_list()]


def sort_frame(df: pl.DataFrame, orders: Sequence[Order]) -> pl.DataFrame:
    """
    Sort a frame by a composite order (stable; nulls last).

    Raises:
        KeyError: If an order names a column absent from the frame.
    """
    orders = _dedupe(orders)
    if not orders or df.is_empty():
        return df
    missing = [o.name for o in orders if o.name not in df.columns]
    if missing:
        raise KeyError(f"cannot sort by missing columns: {missing!r}")
    return df.sort(
        by=[o.name for o in orders],
        descending=[o.descending for o in orders],
        nulls_last=True,
        maintain_order=True,
    )


def sort_rows(rows: Sequence[Mapping[str, Any]], orders: Sequence[Order]) -> list[dict[str, Any]]:
    """
    Sort row mappings by a composite order.

    Examples:
        >>> rows = [{"age": 30, "name": "b"}, {"age": 40, "name": "c"}, {"age": 30, "name": "a"}]
        >>> [r["name"] for r in sort_rows(rows, [Order.parse("age", "DESC"), Order.parse("name")])]
        ['c', 'a', 'b']
    """
    if not rows or not orders:
        return [dict(r) for r in rows]
    return pick_rows(rows, sort_frame(key_frame(rows, [o.name for o in orders]), orders))


def render_orders(orders: Iterable[Order]) -> str:
    """Canonical diagnostic rendering, e.g. "age DESC, name ASC"."""
    return ", ".join(str(o) for o in orders)
