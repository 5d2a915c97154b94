"""
Process-wide holder of the resolved descriptor graph.

Tables are registered during startup, then the registry is sealed and shared
read-only by every request handler (no locking).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from adminkit.core.builder import build_descriptors
from adminkit.core.descriptors import TableDescriptor
from adminkit.core.errors import DuplicateTableKeyError

from .errors import RegistrySealedError, UnknownTableError

__all__ = ["TableRegistry"]

logger = logging.getLogger(__name__)


class TableRegistry:
    """
    Registry of TableDescriptor keyed by table name.

    Examples:
        >>> from adminkit.core.builder import build_table
        >>> users = build_table({"table_name": "user", "primary_key": "id",
        ...                      "fields": [{"field_name": "id"}]})
        >>> registry = TableRegistry()
        >>> registry.register_table(users)
        >>> registry.register_table(users)  # identical re-registration is a no-op
        >>> registry.get("user").plural_name
        'users'
    """

    def __init__(self, tables: Iterable[TableDescriptor] = ()) -> None:
        self._tables: dict[str, TableDescriptor] = {}
        self._sealed = False
        for table in tables:
            self.register_table(table)

    @classmethod
    def from_metadata(cls, records: Mapping[str, Any] | Sequence[Any]) -> TableRegistry:
        """Build descriptors from raw metadata and register them all."""
        return cls(build_descriptors(records).values())

    def register_table(self, descriptor: TableDescriptor) -> None:
        """
        Register a descriptor.

        Raises:
            DuplicateTableKeyError: If a distinct descriptor already uses the same key.
            RegistrySealedError: If called after seal().
        """
        if self._sealed:
            raise RegistrySealedError("table registry")
        existing = self._tables.get(descriptor.table_name)
        if existing is not None:
            if existing == descriptor:
                return
            raise DuplicateTableKeyError(descriptor.table_name)
        self._tables[descriptor.table_name] = descriptor
        logger.info("registered table %s", descriptor.table_name)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, table_name: str) -> TableDescriptor:
        """
        Raises:
            UnknownTableError: If no table is registered under table_name.
        """
        try:
            return self._tables[table_name]
        except KeyError as exc:
            raise UnknownTableError(table_name) from exc

    def find_by_plural_name(self, plural_name: str) -> TableDescriptor:
        """Resolve a table from its plural (route) name."""
        for table in self._tables.values():
            if table.plural_name == plural_name:
                return table
        raise UnknownTableError(plural_name)

    def tables(self) -> list[TableDescriptor]:
        return list(self._tables.values())

    def grouped(self) -> dict[str | None, list[TableDescriptor]]:
        """Panel menu: tables shown in the panel, grouped by group name (None = ungrouped)."""
        groups: dict[str | None, list[TableDescriptor]] = {}
        for table in self._tables.values():
            if table.show_in_panel:
                groups.setdefault(table.group_name, []).append(table)
        return groups

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._tables

    def __iter__(self) -> Iterator[TableDescriptor]:
        return iter(self._tables.values())

    def __len__(self) -> int:
        return len(self._tables)
