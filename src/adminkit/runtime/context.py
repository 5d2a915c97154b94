"""
AdminContext: everything request handling needs, built once at startup.

The context is passed explicitly to request handlers (usually by way of
AdminService) instead of living in module globals. build() resolves the
metadata, cross-checks the registries and seals them, so the returned context
is read-only for the rest of the process.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from adminkit.core.constants import RESOURCES_PATH

from .actions import ActionRegistry, DeleteAction
from .config import AdminSettings
from .mappers import MapperRegistry
from .previews import PreviewRegistry
from .registry import TableRegistry
from .storage import StorageBackend
from .translator import Translator, TranslatorCatalog

__all__ = ["AdminContext"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminContext:
    settings: AdminSettings
    tables: TableRegistry
    mappers: MapperRegistry
    actions: ActionRegistry
    previews: PreviewRegistry
    translators: TranslatorCatalog
    storage: StorageBackend

    @classmethod
    def build(
        cls,
        metadata: TableRegistry | Mapping[str, Any] | Sequence[Any],
        storage: StorageBackend,
        *,
        settings: AdminSettings | None = None,
        mappers: MapperRegistry | None = None,
        actions: ActionRegistry | None = None,
        previews: PreviewRegistry | None = None,
        translators: TranslatorCatalog | None = None,
    ) -> AdminContext:
        """
        Resolve metadata, verify cross references and seal every registry.

        Args:
            metadata: A populated TableRegistry, or raw metadata records.
            storage: The storage collaborator.
            settings: Defaults to AdminSettings.load() (environment > TOML > defaults).
            mappers, actions, previews, translators: Pre-populated registries; empty
                ones (English catalog, built-in delete action) when omitted.

        Raises:
            SchemaError: If the metadata is invalid.
            UnknownActionError: If a table references an unregistered action key.
        """
        settings = settings or AdminSettings.load()
        tables = metadata if isinstance(metadata, TableRegistry) else TableRegistry.from_metadata(metadata)
        translators = translators or TranslatorCatalog(default_language=settings.default_language)
        if actions is None:
            display = translators.select(settings.default_language).translate("delete")
            actions = ActionRegistry(delete_action=DeleteAction(storage, display))
        mappers = mappers or MapperRegistry()
        previews = previews or PreviewRegistry()

        actions.check_tables(tables)
        for table in tables:
            for f in table.fields:
                if f.value_mapper is not None and f.value_mapper not in mappers:
                    logger.warning(
                        "%s.%s uses unregistered value mapper %s; values pass through unchanged",
                        table.table_name,
                        f.field_name,
                        f.value_mapper,
                    )
                if f.preview is not None and f.preview not in previews:
                    logger.warning(
                        "%s.%s uses unregistered preview %s; default rendering applies",
                        table.table_name,
                        f.field_name,
                        f.preview,
                    )

        for registry in (tables, mappers, actions, previews):
            registry.seal()
        logger.info("admin context ready with %d table(s)", len(tables))
        return cls(
            settings=settings,
            tables=tables,
            mappers=mappers,
            actions=actions,
            previews=previews,
            translators=translators,
            storage=storage,
        )

    def translator(self, language_code: str | None) -> Translator:
        return self.translators.select(language_code)

    def resource_url(self, table_name: str, record_id: Any = None) -> str:
        """
        Panel path of a table's listing, or of one record when record_id is given.

        Examples:
            ``/admin/resources/categories`` and ``/admin/resources/categories/7``.

        Raises:
            UnknownTableError: If no table is registered under table_name.
        """
        table = self.tables.get(table_name)
        path = f"/{self.settings.admin_path}/{RESOURCES_PATH}/{table.plural_name}"
        return path if record_id is None else f"{path}/{record_id}"
