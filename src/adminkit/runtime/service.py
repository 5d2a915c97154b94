"""
AdminService: per-request orchestration over an AdminContext.

Every operation runs the same gate first:
    access gate -> (form binder -> value mappers) -> storage collaborator

Notes
- A denied caller never reaches validation or storage.
- A rejected form raises FormRejectedError before any mutation.
- Rows read from storage are restored through the value mappers before they are
  returned or used as the update baseline.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from adminkit.core.descriptors import Order, TableDescriptor
from adminkit.core.types import DefaultAction

from .access import require_access
from .context import AdminContext
from .errors import FormRejectedError, InvalidValueError, RecordNotFoundError, UnknownActionError
from .filters import Pagination, Predicate, build_predicate
from .forms import FormBinder, UserForm
from .ordering import parse_order_param, render_orders, resolve_orders
from .storage import Operation
from .values import parse_value

__all__ = ["ListPage", "AdminService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListPage:
    """One page of a listing."""

    table: TableDescriptor
    rows: list[dict[str, Any]]
    orders: list[Order]
    predicate: Predicate
    pagination: Pagination


class AdminService:
    def __init__(self, context: AdminContext) -> None:
        self.context = context

    def _table(self, table_name: str, caller_roles: Iterable[str] | None) -> TableDescriptor:
        table = self.context.tables.get(table_name)
        require_access(table, caller_roles)
        return table

    def _binder(self, language: str | None) -> FormBinder:
        translator = self.context.translator(language) if language is not None else None
        return FormBinder(settings=self.context.settings, translator=translator)

    def coerce_id(self, table: TableDescriptor, raw: Any) -> Any:
        """
        Type a record id taken from a route or a selection.

        Raises:
            InvalidValueError: If the id does not parse as the primary key's type.
        """
        if not isinstance(raw, str):
            return raw
        pk = table.primary_key_field
        try:
            return parse_value(pk.column_type, raw, self.context.settings)
        except ValueError as exc:
            raise InvalidValueError(pk.field_name, {"value": raw, "column_type": pk.column_type.value}) from exc

    async def list_rows(
        self,
        table_name: str,
        params: Mapping[str, Any],
        caller_roles: Iterable[str] | None = None,
    ) -> ListPage:
        """
        List one page of a table.

        Args:
            params: Query parameters (``search``, ``filters.*``, ``order``, ``page``).

        Raises:
            ForbiddenError, UnknownTableError, UnknownOrderFieldError,
            InvalidOrderDirectionError.
        """
        table = self._table(table_name, caller_roles)
        settings = self.context.settings
        predicate = build_predicate(table, params, settings)
        orders = resolve_orders(table, parse_order_param(params.get("order")))
        pagination = Pagination.from_params(params, settings)
        logger.debug("listing %s order=[%s] page=%d", table_name, render_orders(orders), pagination.page)
        rows = await self.context.storage.fetch(table_name, predicate, orders, pagination)
        restored = [self.context.mappers.restore_row(table, row) for row in rows]
        return ListPage(table=table, rows=restored, orders=orders, predicate=predicate, pagination=pagination)

    async def get_row(
        self,
        table_name: str,
        record_id: Any,
        caller_roles: Iterable[str] | None = None,
    ) -> dict[str, Any]:
        """
        Raises:
            RecordNotFoundError: If storage holds no such record.
        """
        table = self._table(table_name, caller_roles)
        return await self._fetch_one(table, self.coerce_id(table, record_id))

    async def _fetch_one(self, table: TableDescriptor, record_id: Any) -> dict[str, Any]:
        predicate = Predicate(equals={table.primary_key_name: record_id})
        rows = await self.context.storage.fetch(table.table_name, predicate, [], Pagination(page=1, per_page=1))
        if not rows:
            raise RecordNotFoundError(table.table_name, record_id)
        return self.context.mappers.restore_row(table, rows[0])

    async def create(
        self,
        table_name: str,
        form: UserForm,
        caller_roles: Iterable[str] | None = None,
        language: str | None = None,
    ) -> Any:
        """
        Validate a form and create a record.

        Returns:
            Any: Whatever the storage collaborator returns (usually the new id).

        Raises:
            ForbiddenError: Before any validation.
            UnknownActionError: If the table does not offer ``add``.
            FormRejectedError: With every field's ErrorResponse; nothing is created.
        """
        table = self._table(table_name, caller_roles)
        if not table.allows(DefaultAction.ADD):
            raise UnknownActionError(table_name, DefaultAction.ADD.value)
        result = self._binder(language).bind(form, table)
        if not result.ok:
            raise FormRejectedError(table_name, result.errors)
        values = self.context.mappers.map_row(table, result.values)
        outcome = await self.context.storage.mutate(table_name, Operation.CREATE, {"values": values})
        logger.info("created %s record %r", table_name, outcome)
        return outcome

    async def update(
        self,
        table_name: str,
        record_id: Any,
        form: UserForm,
        caller_roles: Iterable[str] | None = None,
        language: str | None = None,
    ) -> Any:
        """
        Validate a form against the stored record and update it.

        Raises:
            ForbiddenError: Before any validation.
            UnknownActionError: If the table does not offer ``edit``.
            RecordNotFoundError: If the record does not exist.
            FormRejectedError: With every field's ErrorResponse; nothing is updated.
        """
        table = self._table(table_name, caller_roles)
        if not table.allows(DefaultAction.EDIT):
            raise UnknownActionError(table_name, DefaultAction.EDIT.value)
        record_id = self.coerce_id(table, record_id)
        existing = await self._fetch_one(table, record_id)
        result = self._binder(language).bind(form, table, existing=existing)
        if not result.ok:
            raise FormRejectedError(table_name, result.errors)
        values = self.context.mappers.map_row(table, result.values)
        outcome = await self.context.storage.mutate(
            table_name, Operation.UPDATE, {"id": record_id, "values": values}
        )
        logger.info("updated %s record %r", table_name, record_id)
        return outcome

    async def perform_action(
        self,
        table_name: str,
        key: str,
        selected_ids: Sequence[Any],
        caller_roles: Iterable[str] | None = None,
    ) -> Any:
        """
        Run a table action once over a selection of record ids.

        Raises:
            ForbiddenError: Before the action is resolved.
            UnknownActionError: If the table does not offer ``key``.
            Exception: Whatever the action raises, unchanged.
        """
        table = self._table(table_name, caller_roles)
        ids = [self.coerce_id(table, raw) for raw in selected_ids]
        return await self.context.actions.dispatch(table, key, ids)
