"""
Storage collaborator boundary.

adminkit never talks to a database. It shapes and validates payloads, then hands
them to a StorageBackend supplied by the host (SQL, document store, ...).

Payload shapes passed to mutate
- CREATE: {"values": {field_name: stored value, ...}}
- UPDATE: {"id": primary key, "values": {...}}
- DELETE: {"ids": [primary key, ...]}

InMemoryStorage keeps each table as a list of row dicts; it backs tests and embedded
demos. Predicates, orders and pagination are evaluated over a Polars key frame
(adminkit.runtime.ordering.key_frame) and the stored rows are returned as stored.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from adminkit.core.descriptors import Order

from .filters import Pagination, Predicate, apply_predicate, paginate_frame
from .ordering import key_frame, pick_rows, sort_frame

__all__ = ["Operation", "StorageBackend", "InMemoryStorage"]


class Operation(str, Enum):
    """Mutations the core may request."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@runtime_checkable
class StorageBackend(Protocol):
    async def fetch(
        self,
        table_name: str,
        predicate: Predicate,
        orders: Sequence[Order],
        pagination: Pagination | None,
    ) -> list[dict[str, Any]]: ...

    async def mutate(self, table_name: str, operation: Operation, payload: Mapping[str, Any]) -> Any: ...


class InMemoryStorage:
    """
    In-memory StorageBackend keyed by table name.

    Rows are keyed by field name; ``primary_keys`` maps each table to its key field.
    """

    def __init__(self, primary_keys: Mapping[str, str], rows: Mapping[str, Sequence[Mapping[str, Any]]] | None = None) -> None:
        self.primary_keys = dict(primary_keys)
        self._rows: dict[str, list[dict[str, Any]]] = {name: [] for name in self.primary_keys}
        for name, table_rows in (rows or {}).items():
            self._rows[name] = [dict(r) for r in table_rows]

    def rows(self, table_name: str) -> list[dict[str, Any]]:
        return [dict(r) for r in self._rows.get(table_name, [])]

    async def fetch(
        self,
        table_name: str,
        predicate: Predicate,
        orders: Sequence[Order],
        pagination: Pagination | None,
    ) -> list[dict[str, Any]]:
        rows = self._rows.get(table_name, [])
        columns = [o.name for o in orders]
        if predicate.search:
            columns.extend(predicate.search_fields)
        columns.extend(predicate.equals)
        columns.extend(predicate.ranges)
        df = apply_predicate(key_frame(rows, columns), predicate)
        df = sort_frame(df, orders)
        if pagination is not None:
            df = paginate_frame(df, pagination)
        return pick_rows(rows, df)

    async def mutate(self, table_name: str, operation: Operation, payload: Mapping[str, Any]) -> Any:
        pk = self.primary_keys[table_name]
        table_rows = self._rows.setdefault(table_name, [])
        if operation is Operation.CREATE:
            row = dict(payload["values"])
            if row.get(pk) is None:
                row[pk] = max((r[pk] for r in table_rows), default=0) + 1
            table_rows.append(row)
            return row[pk]
        if operation is Operation.UPDATE:
            for row in table_rows:
                if row[pk] == payload["id"]:
                    row.update(payload["values"])
                    return payload["id"]
            raise KeyError(f"{table_name} has no row with {pk}={payload['id']!r}")
        ids = set(payload["ids"])
        before = len(table_rows)
        table_rows[:] = [r for r in table_rows if r[pk] not in ids]
        return before - len(table_rows)
