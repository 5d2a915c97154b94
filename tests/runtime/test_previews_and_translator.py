from __future__ import annotations

import asyncio
from typing import Any

import pytest

from adminkit.core.builder import build_table
from adminkit.runtime.errors import DuplicatePreviewKeyError, LengthOutOfRangeError
from adminkit.runtime.previews import AdminPreview, PreviewRegistry
from adminkit.runtime.translator import ENGLISH, Translator, TranslatorCatalog


class ImagePreview:
    key = "image"

    def create_preview(self, table_name: str, field_name: str, value: Any) -> str | None:
        if not value:
            return None
        return f'<img src="/{table_name}/{field_name}/{value}">'


class AsyncBadgePreview:
    key = "badge"

    async def create_preview(self, table_name: str, field_name: str, value: Any) -> str | None:
        return f"<b>{value}</b>"


TABLE = build_table(
    {
        "table_name": "user",
        "primary_key": "id",
        "fields": [
            {"field_name": "id"},
            {"field_name": "avatar", "preview": "image"},
            {"field_name": "role", "preview": "badge"},
            {"field_name": "note", "preview": "unregistered"},
        ],
    }
)


def _registry() -> PreviewRegistry:
    registry = PreviewRegistry()
    registry.register(ImagePreview())
    registry.register(AsyncBadgePreview())
    return registry


def test_preview_protocol() -> None:
    assert isinstance(ImagePreview(), AdminPreview)


def test_render_dispatches_by_field_preview_key() -> None:
    registry = _registry()
    assert asyncio.run(registry.render(TABLE, "avatar", "a.png")) == '<img src="/user/avatar/a.png">'
    assert asyncio.run(registry.render(TABLE, "role", "admin")) == "<b>admin</b>"


def test_render_default_cases() -> None:
    registry = _registry()
    assert asyncio.run(registry.render(TABLE, "avatar", "")) is None
    assert asyncio.run(registry.render(TABLE, "id", 1)) is None
    assert asyncio.run(registry.render(TABLE, "note", "x")) is None


def test_duplicate_preview_key() -> None:
    registry = _registry()
    with pytest.raises(DuplicatePreviewKeyError, match="preview"):
        registry.register(ImagePreview())


def test_translator_selection_falls_back() -> None:
    german = Translator("de", "Deutsch", {"required": "Pflichtfeld"})
    catalog = TranslatorCatalog([ENGLISH, german])
    assert catalog.select("DE").language_name == "Deutsch"
    assert catalog.select("fr") is ENGLISH
    assert catalog.select(None) is ENGLISH
    assert "de" in catalog

    german_default = TranslatorCatalog([ENGLISH, german], default_language="de")
    assert german_default.select("fr") is german


def test_translate_substitutes_params() -> None:
    error = LengthOutOfRangeError("name", {"length": 2, "range": "3..10"})
    assert ENGLISH.field_error(error) == "Length 2 is outside the allowed range (3..10)"
    assert ENGLISH.translate("unknown key") == "unknown key"
