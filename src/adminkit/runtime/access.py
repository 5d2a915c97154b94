"""
Access gate: authorize an operation against a table's declared roles.

Decision
- permit = table is public (no roles) OR caller holds at least one of its roles.
- No graduated access levels. A denial short-circuits the request before any
  validation or mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from adminkit.core.descriptors import TableDescriptor

from .errors import ForbiddenError

__all__ = ["permits", "require_access", "visible_tables"]

logger = logging.getLogger(__name__)


def permits(table: TableDescriptor, caller_roles: Iterable[str] | None) -> bool:
    """
    Examples:
        >>> from adminkit.core.builder import build_table
        >>> t = build_table({"table_name": "audit", "primary_key": "id",
        ...                  "fields": [{"field_name": "id"}], "access_roles": ["admin"]})
        >>> permits(t, {"editor"}), permits(t, {"admin", "editor"})
        (False, True)
    """
    if table.is_public:
        return True
    return not table.access_roles.isdisjoint(caller_roles or ())


def require_access(table: TableDescriptor, caller_roles: Iterable[str] | None) -> None:
    """
    Raises:
        ForbiddenError: If the caller holds none of the table's roles.
    """
    roles = frozenset(caller_roles or ())
    if not permits(table, roles):
        logger.warning(
            "denied access to %s for roles %s (requires one of %s)",
            table.table_name,
            sorted(roles),
            sorted(table.access_roles),
        )
        raise ForbiddenError(table.table_name, table.access_roles)


def visible_tables(tables: Iterable[TableDescriptor], caller_roles: Iterable[str] | None) -> list[TableDescriptor]:
    """Tables a caller may open, in input order (panel menu filtering)."""
    roles = frozenset(caller_roles or ())
    return [t for t in tables if permits(t, roles)]
