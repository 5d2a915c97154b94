from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from adminkit.core.builder import build_table
from adminkit.runtime.actions import ActionRegistry, CustomAdminAction, DeleteAction
from adminkit.runtime.errors import (
    ActionError,
    DuplicateActionKeyError,
    RegistrySealedError,
    UnknownActionError,
)
from adminkit.runtime.storage import InMemoryStorage


class RecordingAction:
    def __init__(self, key: str, fail: bool = False) -> None:
        self.key = key
        self.display_text = key.title()
        self.fail = fail
        self.calls: list[tuple[str, list[Any]]] = []

    async def perform_action(self, table_name: str, selected_ids: Sequence[Any]) -> Any:
        self.calls.append((table_name, list(selected_ids)))
        if self.fail:
            raise ActionError("export target unavailable")
        return len(selected_ids)


def _table(name: str = "post", **extra):
    meta = {"table_name": name, "primary_key": "id", "fields": [{"field_name": "id", "property_type": "int"}]}
    meta.update(extra)
    return build_table(meta)


def test_recording_action_satisfies_protocol() -> None:
    assert isinstance(RecordingAction("x"), CustomAdminAction)


def test_dispatch_invokes_exactly_once() -> None:
    export = RecordingAction("export")
    registry = ActionRegistry()
    registry.register(export)
    table = _table(custom_actions=["export"])

    result = asyncio.run(registry.dispatch(table, "export", [1, 2]))

    assert result == 2
    assert export.calls == [("post", [1, 2])]


def test_action_errors_propagate_unchanged() -> None:
    broken = RecordingAction("export", fail=True)
    registry = ActionRegistry()
    registry.register(broken)
    with pytest.raises(ActionError, match="export target unavailable"):
        asyncio.run(registry.dispatch(_table(custom_actions=["export"]), "export", [1]))
    assert len(broken.calls) == 1


def test_unknown_and_unoffered_keys() -> None:
    registry = ActionRegistry()
    registry.register(RecordingAction("export"))
    with pytest.raises(UnknownActionError):
        asyncio.run(registry.dispatch(_table(), "export", [1]))
    with pytest.raises(UnknownActionError):
        asyncio.run(registry.dispatch(_table(), "missing", [1]))


def test_duplicate_keys() -> None:
    registry = ActionRegistry()
    registry.register(RecordingAction("export"))
    with pytest.raises(DuplicateActionKeyError):
        registry.register_for_all(RecordingAction("export"))
    with pytest.raises(DuplicateActionKeyError):
        registry.register(RecordingAction("delete"))


def test_actions_for_order_and_delete() -> None:
    storage = InMemoryStorage({"post": "id"})
    registry = ActionRegistry(delete_action=DeleteAction(storage))
    registry.register(RecordingAction("export"))
    registry.register_for_all(RecordingAction("archive"))

    keys = [a.key for a in registry.actions_for(_table(custom_actions=["export"]))]
    assert keys == ["export", "archive", "delete"]

    no_delete = _table(default_actions=["add", "edit"])
    assert [a.key for a in registry.actions_for(no_delete)] == ["archive"]


def test_delete_action_goes_through_storage() -> None:
    storage = InMemoryStorage({"post": "id"}, rows={"post": [{"id": 1}, {"id": 2}, {"id": 3}]})
    registry = ActionRegistry(delete_action=DeleteAction(storage))

    deleted = asyncio.run(registry.dispatch(_table(), "delete", [1, 3]))

    assert deleted == 2
    assert storage.rows("post") == [{"id": 2}]


def test_check_tables_and_seal() -> None:
    registry = ActionRegistry()
    registry.register(RecordingAction("export"))
    registry.check_tables([_table(custom_actions=["export"])])
    with pytest.raises(UnknownActionError) as exc:
        registry.check_tables([_table("page", custom_actions=["publish"])])
    assert exc.value.key == "publish"

    registry.seal()
    with pytest.raises(RegistrySealedError):
        registry.register(RecordingAction("late"))
