"""
adminkit core defaults.

Defines the default values consumed by the runtime layer (settings, form binder,
listing). This module is zero-IO and uses only the Python standard library.

Notes:
    - adminkit.runtime.config.AdminSettings sources its defaults from here.
    - Boolean form values follow HTML checkbox conventions ("on"/"off").
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "DEFAULT_LANGUAGE",
    "MAX_ITEMS_IN_PAGE",
    "TRUE_FORM",
    "FALSE_FORM",
    "DATE_FORMAT",
    "DATETIME_FORMAT",
    "FILTERS_PREFIX",
    "ADMIN_PATH",
    "RESOURCES_PATH",
    "CONFIRMATION_SUFFIX",
    "UNGROUPED",
    "UNKNOWN_MIME_TYPE",
]

# Language code used when a request carries no (or an unknown) language selection.
DEFAULT_LANGUAGE: Final[str] = "en"

# Page size for listings when the request does not ask for one.
MAX_ITEMS_IN_PAGE: Final[int] = 20

TRUE_FORM: Final[str] = "on"
FALSE_FORM: Final[str] = "off"

# strptime/strftime formats for date and datetime form inputs.
DATE_FORMAT: Final[str] = "%Y-%m-%d"
DATETIME_FORMAT: Final[str] = "%Y-%m-%dT%H:%M"

# Request parameters starting with this prefix carry listing filters (filters.<field>=value).
FILTERS_PREFIX: Final[str] = "filters."

ADMIN_PATH: Final[str] = "admin"

# Record pages live under /<admin_path>/<RESOURCES_PATH>/<plural_name>.
RESOURCES_PATH: Final[str] = "resources"

# A confirmed field is submitted twice: <field> and <field><CONFIRMATION_SUFFIX>.
CONFIRMATION_SUFFIX: Final[str] = "_confirmation"

# Group sentinel for tables declared without a group name.
UNGROUPED: Final[None] = None

UNKNOWN_MIME_TYPE: Final[str] = "unknown"
