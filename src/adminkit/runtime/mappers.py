"""
Value mapper registry: key-addressed, bidirectional value transforms.

A mapper converts between the form/display representation (what the binder
produces) and the stored representation (what the storage collaborator gets).
Fields opt in by naming a mapper key in their metadata (``value_mapper``).

Contract
- map/restore are total: an unknown (or None) key is the identity.
- Round-trip law: for a well-behaved mapper, ``restore(map(v))`` behaves like ``v``.
  Display-only mappers are registered with ``lossy=True`` and knowingly break it;
  the registry records the flag but does not enforce the law.
- Registration happens at startup only; seal() rejects late registrations.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from adminkit.core.descriptors import TableDescriptor

from .errors import DuplicateMapperKeyError, RegistrySealedError

__all__ = ["ValueMapper", "FunctionMapper", "MapperRegistry"]

logger = logging.getLogger(__name__)


@runtime_checkable
class ValueMapper(Protocol):
    """Pluggable bidirectional transform addressed by ``key``."""

    key: str

    def map(self, value: Any) -> Any: ...

    def restore(self, value: Any) -> Any: ...


@dataclass(frozen=True)
class FunctionMapper:
    """
    ValueMapper built from two callables.

    Examples:
        >>> cents = FunctionMapper("cents", lambda v: int(round(v * 100)), lambda v: v / 100)
        >>> cents.restore(cents.map(12.5))
        12.5
    """

    key: str
    map_fn: Callable[[Any], Any]
    restore_fn: Callable[[Any], Any]

    def map(self, value: Any) -> Any:
        return self.map_fn(value)

    def restore(self, value: Any) -> Any:
        return self.restore_fn(value)


class MapperRegistry:
    """Registry of ValueMapper instances keyed by ``mapper.key``."""

    def __init__(self) -> None:
        self._mappers: dict[str, ValueMapper] = {}
        self._lossy: set[str] = set()
        self._sealed = False

    def register(self, mapper: ValueMapper, *, lossy: bool = False) -> None:
        """
        Register a mapper.

        Args:
            mapper: The mapper; its ``key`` must be unique.
            lossy: Mark the mapper as display-only (restore is not an inverse).

        Raises:
            DuplicateMapperKeyError: If the key is already registered.
            RegistrySealedError: If called after seal().
        """
        if self._sealed:
            raise RegistrySealedError("mapper registry")
        if mapper.key in self._mappers:
            raise DuplicateMapperKeyError(mapper.key)
        self._mappers[mapper.key] = mapper
        if lossy:
            self._lossy.add(mapper.key)
        logger.info("registered value mapper %s%s", mapper.key, " (lossy)" if lossy else "")

    def seal(self) -> None:
        self._sealed = True

    def __contains__(self, key: object) -> bool:
        return key in self._mappers

    def is_lossy(self, key: str) -> bool:
        return key in self._lossy

    def map(self, key: str | None, value: Any) -> Any:
        mapper = self._mappers.get(key) if key is not None else None
        return value if mapper is None else mapper.map(value)

    def restore(self, key: str | None, value: Any) -> Any:
        mapper = self._mappers.get(key) if key is not None else None
        return value if mapper is None else mapper.restore(value)

    def map_row(self, table: TableDescriptor, values: Mapping[str, Any]) -> dict[str, Any]:
        """Apply each field's declared mapper to a bound value mapping (form -> storage)."""
        out = dict(values)
        for f in table.fields:
            if f.field_name in out and f.value_mapper is not None:
                out[f.field_name] = self.map(f.value_mapper, out[f.field_name])
        return out

    def restore_row(self, table: TableDescriptor, row: Mapping[str, Any]) -> dict[str, Any]:
        """Inverse of map_row for rows read back from storage (storage -> form/display)."""
        out = dict(row)
        for f in table.fields:
            if f.field_name in out and f.value_mapper is not None:
                out[f.field_name] = self.restore(f.value_mapper, out[f.field_name])
        return out
