"""
adminkit.runtime: request-time layer over the descriptor graph.

## Responsibilities
- Hold the built graph and the extension registries (tables, value mappers, actions,
  previews, translators) in an explicit AdminContext, sealed after startup.
- Validate and type untyped form data (FormBinder) and shape listing requests
  (predicates, orders, pagination) for the storage collaborator.
- Gate every operation on the table's access roles before anything else runs.

## Public API
- AdminSettings: configuration (environment > TOML > defaults).
- AdminContext / AdminService: startup context and per-request orchestration.
- FormBinder, bind_form, ErrorResponse, BindResult: form binding.
- MapperRegistry, FunctionMapper, ValueMapper: value mappers.
- ActionRegistry, CustomAdminAction, DeleteAction: action dispatch.
- PreviewRegistry, AdminPreview: preview dispatch.
- TranslatorCatalog, Translator: locale selection.
- StorageBackend, Operation, InMemoryStorage: storage boundary.

## Import DAG discipline
- Depends on stdlib, polars and adminkit.core only.
- adminkit.core MUST NOT import this package.
"""

from __future__ import annotations

from .access import permits, require_access
from .actions import ActionRegistry, CustomAdminAction, DeleteAction
from .config import AdminSettings
from .context import AdminContext
from .errors import AdminError, FormRejectedError
from .filters import Pagination, Predicate
from .forms import BindResult, ErrorResponse, FormBinder, bind_form
from .mappers import FunctionMapper, MapperRegistry, ValueMapper
from .ordering import sort_rows
from .previews import AdminPreview, PreviewRegistry
from .registry import TableRegistry
from .service import AdminService, ListPage
from .storage import InMemoryStorage, Operation, StorageBackend
from .translator import Translator, TranslatorCatalog

__all__ = [
    "permits",
    "require_access",
    "ActionRegistry",
    "CustomAdminAction",
    "DeleteAction",
    "AdminSettings",
    "AdminContext",
    "AdminError",
    "FormRejectedError",
    "Pagination",
    "Predicate",
    "BindResult",
    "ErrorResponse",
    "FormBinder",
    "bind_form",
    "FunctionMapper",
    "MapperRegistry",
    "ValueMapper",
    "sort_rows",
    "AdminPreview",
    "PreviewRegistry",
    "TableRegistry",
    "AdminService",
    "ListPage",
    "InMemoryStorage",
    "Operation",
    "StorageBackend",
    "Translator",
    "TranslatorCatalog",
]
