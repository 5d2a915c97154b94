from __future__ import annotations

from typing import Any

import pytest

from adminkit.core.builder import build_descriptors, build_table
from adminkit.core.descriptors import AutoNowDate
from adminkit.core.errors import (
    DuplicateFieldKeyError,
    DuplicateTableKeyError,
    InvalidEnumerationError,
    InvalidFieldOptionError,
    InvalidLimitError,
    InvalidRegexError,
    PrimaryKeyNotFoundError,
    SchemaError,
    UnknownFieldReferenceError,
)
from adminkit.core.types import ColumnType, DefaultAction, Direction, StoreKind


def _table(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "table_name": "users",
        "primary_key": "id",
        "fields": [
            {"field_name": "id", "property_type": "int", "read_only": True},
            {"field_name": "email", "property_type": "str", "limits": {"regex_pattern": "^.+@.+$"}},
        ],
    }
    base.update(overrides)
    return base


def test_defaults_applied() -> None:
    desc = build_table(
        _table(
            fields=[
                {"field_name": "id", "property_type": "int"},
                {"field_name": "firstName", "property_type": "str"},
                {"field_name": "created_at", "property_type": "datetime", "column_name": " "},
            ]
        )
    )
    assert desc.singular_name == "users"
    assert desc.plural_name == "users"
    assert desc.group_name is None
    assert desc.store is StoreKind.RELATIONAL
    assert desc.default_actions == frozenset(DefaultAction)
    assert desc.is_public

    first = desc.get_field("firstName")
    assert first.verbose_name == "First Name"
    assert first.column_name == "firstName"
    assert first.table_name == "users"
    created = desc.get_field("created_at")
    assert created.verbose_name == "Created At"
    assert created.column_name == "created_at"
    assert created.column_type is ColumnType.DATETIME


@pytest.mark.parametrize(
    "table_name, plural",
    [("category", "categories"), ("user", "users"), ("users", "users"), ("day", "days")],
)
def test_plural_name_default(table_name: str, plural: str) -> None:
    desc = build_table(_table(table_name=table_name))
    assert desc.plural_name == plural


def test_explicit_names_win() -> None:
    desc = build_table(_table(singular_name="Person", plural_name="People", group_name="Accounts"))
    assert (desc.singular_name, desc.plural_name, desc.group_name) == ("Person", "People", "Accounts")


def test_column_type_override_beats_inference() -> None:
    desc = build_table(
        _table(
            fields=[
                {"field_name": "id", "property_type": "int"},
                {"field_name": "code", "property_type": "int", "column_type": "STRING"},
            ]
        )
    )
    assert desc.get_field("id").column_type is ColumnType.INTEGER
    assert desc.get_field("code").column_type is ColumnType.STRING


def test_capabilities_infer_enumeration_and_file() -> None:
    desc = build_table(
        _table(
            fields=[
                {"field_name": "id", "property_type": "int"},
                {"field_name": "status", "property_type": "str", "enumeration_values": ["a", "b", "a"]},
                {"field_name": "avatar", "property_type": "str", "allowed_mime_types": ["Image/PNG"]},
            ]
        )
    )
    status = desc.get_field("status")
    assert status.column_type is ColumnType.ENUMERATION
    assert status.enumeration_values == ("a", "b")
    avatar = desc.get_field("avatar")
    assert avatar.is_file
    assert avatar.allowed_mime_types == frozenset({"image/png"})


def test_duplicate_field_key() -> None:
    with pytest.raises(DuplicateFieldKeyError) as exc:
        build_table(
            _table(fields=[{"field_name": "id"}, {"field_name": "email"}, {"field_name": "email"}])
        )
    assert exc.value.field_name == "email"


def test_duplicate_table_key() -> None:
    with pytest.raises(DuplicateTableKeyError) as exc:
        build_descriptors([_table(), _table()])
    assert exc.value.table_name == "users"


def test_primary_key_must_be_declared() -> None:
    with pytest.raises(PrimaryKeyNotFoundError):
        build_table(_table(primary_key="uuid"))


@pytest.mark.parametrize(
    "limits",
    [
        {"min_length": 5, "max_length": 2},
        {"min_length": -1},
        {"min_value": 10, "max_value": 1},
    ],
)
def test_invalid_limits(limits: dict[str, Any]) -> None:
    with pytest.raises(InvalidLimitError):
        build_table(_table(fields=[{"field_name": "id"}, {"field_name": "name", "limits": limits}]))


def test_invalid_regex() -> None:
    with pytest.raises(InvalidRegexError) as exc:
        build_table(
            _table(fields=[{"field_name": "id"}, {"field_name": "name", "limits": {"regex_pattern": "(["}}])
        )
    assert exc.value.pattern == "(["


@pytest.mark.parametrize(
    "field",
    [
        {"field_name": "status", "enumeration_values": []},
        {"field_name": "status", "column_type": "enumeration"},
    ],
)
def test_enumeration_without_values(field: dict[str, Any]) -> None:
    with pytest.raises(InvalidEnumerationError):
        build_table(_table(fields=[{"field_name": "id"}, field]))


@pytest.mark.parametrize(
    "overrides",
    [
        {"searchable_fields": ["nope"]},
        {"filterable_fields": ["nope"]},
        {"display_format": "{email} {nope}"},
        {"default_order": {"name": "nope"}},
    ],
)
def test_unknown_field_references(overrides: dict[str, Any]) -> None:
    with pytest.raises(UnknownFieldReferenceError):
        build_table(_table(**overrides))


def test_schema_errors_share_a_base() -> None:
    with pytest.raises(SchemaError):
        build_table(_table(primary_key="uuid"))
    assert issubclass(SchemaError, ValueError)


def test_table_options_resolved() -> None:
    desc = build_table(
        _table(
            access_roles=[" admin ", "", "editor"],
            default_order={"name": "email", "direction": "DESC"},
            default_actions=["ADD", "edit"],
            custom_actions=["export", "export"],
            display_format="{email}",
            store="document",
        )
    )
    assert desc.access_roles == frozenset({"admin", "editor"})
    assert desc.default_order is not None
    assert desc.default_order.direction is Direction.DESC
    assert desc.allows(DefaultAction.EDIT)
    assert not desc.allows(DefaultAction.DELETE)
    assert desc.custom_actions == ("export",)
    assert desc.store is StoreKind.DOCUMENT
    assert desc.display({"id": 1, "email": "a@b.com"}) == "a@b.com"


def test_display_falls_back_to_singular_and_key() -> None:
    desc = build_table(_table(singular_name="User"))
    assert desc.display({"id": 7}) == "User 7"


def test_build_descriptors_accepts_tables_mapping() -> None:
    tables = build_descriptors({"tables": [_table(), _table(table_name="category")]})
    assert list(tables) == ["users", "category"]
    assert tables["category"].plural_name == "categories"


def test_descriptors_are_immutable() -> None:
    desc = build_table(_table())
    with pytest.raises(AttributeError):
        desc.table_name = "other"  # type: ignore[misc]
    assert isinstance(desc.fields, tuple)


def test_confirmation_and_auto_now_resolved() -> None:
    fields = [
        {"field_name": "id", "property_type": "int", "read_only": True},
        {"field_name": "password", "property_type": "str", "confirmation": True},
        {"field_name": "created", "property_type": "datetime", "auto_now_date": True},
        {"field_name": "touched", "property_type": "date", "auto_now_date": {"update_on_change": True}},
        {"field_name": "note", "property_type": "str", "auto_now_date": False},
    ]
    desc = build_table(_table(fields=fields))
    assert desc.get_field("password").confirmation
    assert desc.get_field("created").auto_now_date == AutoNowDate(update_on_change=False)
    assert desc.get_field("touched").auto_now_date == AutoNowDate(update_on_change=True)
    assert desc.get_field("note").auto_now_date is None


@pytest.mark.parametrize(
    "field, option",
    [
        ({"field_name": "count", "property_type": "int", "auto_now_date": True}, "auto_now_date"),
        ({"field_name": "pin", "property_type": "int", "confirmation": True}, "confirmation"),
    ],
)
def test_field_options_need_compatible_types(field: dict[str, Any], option: str) -> None:
    fields = [{"field_name": "id", "property_type": "int"}, field]
    with pytest.raises(InvalidFieldOptionError) as exc:
        build_table(_table(fields=fields))
    assert exc.value.option == option
    assert isinstance(exc.value, SchemaError)


def test_required_and_panel_fields() -> None:
    fields = [
        {"field_name": "id", "property_type": "int", "read_only": True},
        {"field_name": "email", "property_type": "str"},
        {"field_name": "bio", "property_type": "str", "nullable": True, "show_in_panel": False},
        {"field_name": "level", "property_type": "int", "default_value": 1},
    ]
    desc = build_table(_table(fields=fields))
    assert [f.field_name for f in desc.fields if f.required_on_create] == ["email"]
    assert [f.field_name for f in desc.panel_fields] == ["id", "email", "level"]
