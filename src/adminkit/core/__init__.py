"""
Core package aggregator for adminkit contracts (types, metadata, descriptors, builder).

## Contracts (single source of truth)
- Types: column types, store kinds, directions, default actions, inference.
- Metadata: pydantic records for the raw per-table/per-field input feed.
- Descriptors: frozen TableDescriptor / FieldDescriptor / Order graph.
- Builder: resolution of metadata into descriptors with build-time invariants.
- Errors: SchemaError family (fatal at startup).

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- The descriptor graph is built once and shared read-only afterwards.

## Downstream usage
- adminkit.runtime: registries, form binder, ordering, access gate and dispatch all
  read descriptors produced here.

## Examples
```python
from adminkit.core import build_descriptors

tables = build_descriptors({"tables": [
    {
        "table_name": "users",
        "primary_key": "id",
        "fields": [
            {"field_name": "id", "property_type": "int", "read_only": True},
            {"field_name": "email", "limits": {"regex_pattern": "^.+@.+$"}},
        ],
    }
]})
tables["users"].get_field("email").verbose_name  # 'Email'
```
"""

from __future__ import annotations

from .builder import build_descriptors, build_table
from .descriptors import AutoNowDate, FieldDescriptor, Limits, Order, TableDescriptor
from .errors import SchemaError
from .metadata import FieldMetadata, LimitsMetadata, TableMetadata
from .types import ColumnType, DefaultAction, Direction, StoreKind

__all__ = [
    "build_descriptors",
    "build_table",
    "AutoNowDate",
    "FieldDescriptor",
    "Limits",
    "Order",
    "TableDescriptor",
    "SchemaError",
    "FieldMetadata",
    "LimitsMetadata",
    "TableMetadata",
    "ColumnType",
    "DefaultAction",
    "Direction",
    "StoreKind",
]
