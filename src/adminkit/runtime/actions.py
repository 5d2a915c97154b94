"""
Custom action dispatch.

Actions are key-addressed capabilities resolved per table. A table offers:
1) its own custom actions (keys listed in ``custom_actions``),
2) actions registered for every table,
3) the built-in delete action when ``delete`` is among its default actions.

Notes
- dispatch awaits the matching action exactly once. Idempotence against caller
  resubmission is the action's concern.
- Exceptions raised by an action (ActionError or anything else) reach the caller
  unchanged; there is no retry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from adminkit.core.descriptors import TableDescriptor
from adminkit.core.types import DefaultAction

from .errors import DuplicateActionKeyError, RegistrySealedError, UnknownActionError
from .storage import Operation, StorageBackend

__all__ = ["CustomAdminAction", "DeleteAction", "ActionRegistry", "DELETE_ACTION_KEY"]

logger = logging.getLogger(__name__)

DELETE_ACTION_KEY = "delete"


@runtime_checkable
class CustomAdminAction(Protocol):
    """User-supplied bulk operation over selected record ids."""

    key: str
    display_text: str

    async def perform_action(self, table_name: str, selected_ids: Sequence[Any]) -> Any: ...


class DeleteAction:
    """Built-in action deleting the selection through the storage collaborator."""

    key = DELETE_ACTION_KEY

    def __init__(self, storage: StorageBackend, display_text: str = "Delete selected") -> None:
        self.storage = storage
        self.display_text = display_text

    async def perform_action(self, table_name: str, selected_ids: Sequence[Any]) -> Any:
        return await self.storage.mutate(table_name, Operation.DELETE, {"ids": list(selected_ids)})


class ActionRegistry:
    """
    Registry of custom actions, per table or for all tables.

    Args:
        delete_action: Built-in delete action; None disables it everywhere.
    """

    def __init__(self, delete_action: CustomAdminAction | None = None) -> None:
        self._actions: dict[str, CustomAdminAction] = {}
        self._for_all: list[str] = []
        self._delete = delete_action
        self._sealed = False

    def _add(self, action: CustomAdminAction) -> None:
        if self._sealed:
            raise RegistrySealedError("action registry")
        if action.key in self._actions or action.key == DELETE_ACTION_KEY:
            raise DuplicateActionKeyError(action.key)
        self._actions[action.key] = action

    def register(self, action: CustomAdminAction) -> None:
        """
        Register an action offered to tables listing its key in ``custom_actions``.

        Raises:
            DuplicateActionKeyError: If the key is taken (``delete`` is reserved).
            RegistrySealedError: If called after seal().
        """
        self._add(action)
        logger.info("registered action %s", action.key)

    def register_for_all(self, action: CustomAdminAction) -> None:
        """Register an action offered on every table."""
        self._add(action)
        self._for_all.append(action.key)
        logger.info("registered action %s for all tables", action.key)

    def seal(self) -> None:
        self._sealed = True

    def check_tables(self, tables: Iterable[TableDescriptor]) -> None:
        """
        Verify every table only references registered action keys.

        Raises:
            UnknownActionError: On the first unregistered key.
        """
        for table in tables:
            for key in table.custom_actions:
                if key not in self._actions:
                    raise UnknownActionError(table.table_name, key)

    def actions_for(self, table: TableDescriptor) -> list[CustomAdminAction]:
        """Actions offered on a table: custom, then for-all, then delete."""
        keys = [k for k in table.custom_actions if k in self._actions]
        keys += [k for k in self._for_all if k not in keys]
        offered = [self._actions[k] for k in keys]
        if self._delete is not None and table.allows(DefaultAction.DELETE):
            offered.append(self._delete)
        return offered

    def get(self, table: TableDescriptor, key: str) -> CustomAdminAction:
        """
        Raises:
            UnknownActionError: If the table does not offer the key.
        """
        for action in self.actions_for(table):
            if action.key == key:
                return action
        raise UnknownActionError(table.table_name, key)

    async def dispatch(self, table: TableDescriptor, key: str, selected_ids: Sequence[Any]) -> Any:
        """Await the table's action ``key`` exactly once over the selection."""
        action = self.get(table, key)
        logger.info("dispatching action %s on %s (%d id(s))", key, table.table_name, len(selected_ids))
        return await action.perform_action(table.table_name, list(selected_ids))
