from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any

import pytest

from adminkit.core.descriptors import Order
from adminkit.runtime.actions import ActionRegistry
from adminkit.runtime.config import AdminSettings
from adminkit.runtime.context import AdminContext
from adminkit.runtime.errors import (
    ForbiddenError,
    FormRejectedError,
    InvalidValueError,
    RecordNotFoundError,
    RegistrySealedError,
    UnknownActionError,
    UnknownOrderFieldError,
    UnknownTableError,
)
from adminkit.runtime.filters import Pagination, Predicate
from adminkit.runtime.mappers import FunctionMapper, MapperRegistry
from adminkit.runtime.service import AdminService
from adminkit.runtime.storage import InMemoryStorage

METADATA = {
    "tables": [
        {
            "table_name": "product",
            "primary_key": "id",
            "fields": [
                {"field_name": "id", "property_type": "int", "read_only": True},
                {"field_name": "name", "property_type": "str", "limits": {"min_length": 2}},
                {"field_name": "price", "property_type": "Decimal", "value_mapper": "cents"},
                {"field_name": "created", "property_type": "str", "read_only": True, "default_value": "import"},
            ],
            "searchable_fields": ["name"],
            "access_roles": ["staff"],
            "default_order": {"name": "price", "direction": "desc"},
        },
        {
            "table_name": "log",
            "primary_key": "id",
            "fields": [{"field_name": "id", "property_type": "int"}],
            "default_actions": ["delete"],
        },
    ]
}

ROWS = [
    {"id": 1, "name": "lamp", "price": 1999, "created": "seed"},
    {"id": 2, "name": "desk", "price": 15000, "created": "seed"},
    {"id": 3, "name": "lamp shade", "price": 999, "created": "seed"},
]


class SpyStorage(InMemoryStorage):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.mutations: list[tuple[str, Any]] = []

    async def mutate(self, table_name, operation, payload):
        self.mutations.append((table_name, operation))
        return await super().mutate(table_name, operation, payload)


@pytest.fixture
def storage() -> SpyStorage:
    return SpyStorage({"product": "id", "log": "id"}, rows={"product": ROWS})


@pytest.fixture
def service(storage: SpyStorage) -> AdminService:
    mappers = MapperRegistry()
    mappers.register(FunctionMapper("cents", lambda v: int(v * 100), lambda v: Decimal(v) / 100))
    context = AdminContext.build(METADATA, storage, settings=AdminSettings(max_items_in_page=2), mappers=mappers)
    return AdminService(context)


def test_list_uses_default_order_mappers_and_pagination(service: AdminService) -> None:
    page = asyncio.run(service.list_rows("product", {}, ["staff"]))
    assert [str(o) for o in page.orders] == ["price DESC"]
    assert [r["id"] for r in page.rows] == [2, 1]
    assert page.rows[0]["price"] == Decimal("150")

    second = asyncio.run(service.list_rows("product", {"page": "2"}, ["staff"]))
    assert [r["id"] for r in second.rows] == [3]


def test_list_with_search_and_order_param(service: AdminService) -> None:
    page = asyncio.run(service.list_rows("product", {"search": "LAMP", "order": "name:asc"}, ["staff"]))
    assert [r["name"] for r in page.rows] == ["lamp", "lamp shade"]
    with pytest.raises(UnknownOrderFieldError):
        asyncio.run(service.list_rows("product", {"order": "weight"}, ["staff"]))


def test_forbidden_before_validation(service: AdminService, storage: SpyStorage) -> None:
    with pytest.raises(ForbiddenError):
        asyncio.run(service.create("product", {"name": ""}, ["guest"]))
    assert storage.mutations == []


def test_create_maps_values_to_storage(service: AdminService, storage: SpyStorage) -> None:
    new_id = asyncio.run(service.create("product", {"name": "chair", "price": "49.90"}, ["staff"]))
    assert new_id == 4
    stored = storage.rows("product")[-1]
    assert stored == {"id": 4, "name": "chair", "price": 4990, "created": "import"}


def test_rejected_form_mutates_nothing(service: AdminService, storage: SpyStorage) -> None:
    with pytest.raises(FormRejectedError) as exc:
        asyncio.run(service.create("product", {"name": "x", "price": "cheap"}, ["staff"], language="en"))
    assert [e.field for e in exc.value.errors] == ["name", "price"]
    assert exc.value.errors[1].messages == ["cheap is not a valid decimal"]
    assert storage.mutations == []


def test_update_keeps_read_only_values(service: AdminService, storage: SpyStorage) -> None:
    asyncio.run(service.update("product", "1", {"name": "big lamp", "price": "25", "created": "hack"}, ["staff"]))
    row = next(r for r in storage.rows("product") if r["id"] == 1)
    assert row == {"id": 1, "name": "big lamp", "price": 2500, "created": "seed"}


def test_update_missing_record_and_bad_id(service: AdminService) -> None:
    with pytest.raises(RecordNotFoundError):
        asyncio.run(service.update("product", 99, {"name": "ok", "price": "1"}, ["staff"]))
    with pytest.raises(InvalidValueError):
        asyncio.run(service.get_row("product", "abc", ["staff"]))
    assert asyncio.run(service.get_row("product", "2", ["staff"]))["name"] == "desk"


def test_disabled_default_actions(service: AdminService) -> None:
    with pytest.raises(UnknownActionError):
        asyncio.run(service.create("log", {"id": "1"}))


def test_perform_delete_action(service: AdminService, storage: SpyStorage) -> None:
    deleted = asyncio.run(service.perform_action("product", "delete", ["1", "3"], ["staff"]))
    assert deleted == 2
    assert [r["id"] for r in storage.rows("product")] == [2]


def test_context_is_sealed_and_checks_action_keys(service: AdminService, storage: SpyStorage) -> None:
    with pytest.raises(RegistrySealedError):
        service.context.mappers.register(FunctionMapper("late", str, str))

    metadata = {"tables": [dict(METADATA["tables"][1], custom_actions=["export"])]}
    with pytest.raises(UnknownActionError):
        AdminContext.build(metadata, storage, settings=AdminSettings(), actions=ActionRegistry())


def test_in_memory_fetch_returns_stored_rows() -> None:
    docs = [
        {"id": 1, "price": 3, "meta": {"a": 1}},
        {"id": 2, "price": 2.5, "meta": {"b": 2}},
        {"id": 3, "price": 4, "tags": ["x"]},
    ]
    storage = InMemoryStorage({"doc": "id"}, rows={"doc": docs})

    rows = asyncio.run(storage.fetch("doc", Predicate(), [Order.parse("price", "desc")], None))
    assert rows == [docs[2], docs[0], docs[1]]
    assert type(rows[1]["price"]) is int
    assert "tags" not in rows[1]

    one = asyncio.run(storage.fetch("doc", Predicate(equals={"id": 2}), [], Pagination(page=1, per_page=1)))
    assert one == [{"id": 2, "price": 2.5, "meta": {"b": 2}}]


def test_resource_url(service: AdminService) -> None:
    assert service.context.resource_url("product") == "/admin/resources/products"
    assert service.context.resource_url("product", 7) == "/admin/resources/products/7"
    with pytest.raises(UnknownTableError):
        service.context.resource_url("missing")
