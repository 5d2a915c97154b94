"""
Preview dispatch: optional custom rendering of field values.

A field opts in by naming a preview key (``preview``) in its metadata. A preview
returns a rendered fragment (opaque to adminkit) or None to request the default
scalar rendering.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Protocol, runtime_checkable

from adminkit.core.descriptors import TableDescriptor

from .errors import DuplicatePreviewKeyError, RegistrySealedError

__all__ = ["AdminPreview", "PreviewRegistry"]

logger = logging.getLogger(__name__)


@runtime_checkable
class AdminPreview(Protocol):
    key: str

    def create_preview(self, table_name: str, field_name: str, value: Any) -> Any: ...


class PreviewRegistry:
    """Previews keyed by ``preview.key``."""

    def __init__(self) -> None:
        self._previews: dict[str, AdminPreview] = {}
        self._sealed = False

    def register(self, preview: AdminPreview) -> None:
        """
        Raises:
            DuplicatePreviewKeyError: If the key is already registered.
            RegistrySealedError: If called after seal().
        """
        if self._sealed:
            raise RegistrySealedError("preview registry")
        if preview.key in self._previews:
            raise DuplicatePreviewKeyError(preview.key)
        self._previews[preview.key] = preview
        logger.info("registered preview %s", preview.key)

    def seal(self) -> None:
        self._sealed = True

    def __contains__(self, key: object) -> bool:
        return key in self._previews

    async def render(self, table: TableDescriptor, field_name: str, value: Any) -> str | None:
        """
        Render a field value with the field's preview.

        Returns:
            str | None: The fragment, or None for the default rendering (no preview
            declared, unknown key, or the preview declined).

        Notes:
            create_preview may be a plain or an async method.
        """
        key = table.get_field(field_name).preview
        preview = self._previews.get(key) if key is not None else None
        if preview is None:
            return None
        fragment = preview.create_preview(table.table_name, field_name, value)
        if inspect.isawaitable(fragment):
            fragment = await fragment
        return fragment
