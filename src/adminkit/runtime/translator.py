"""
Locale catalog and translator selection.

A Translator maps message keys (the form violation codes plus a few panel
strings) to text with ``{name}`` placeholders. The catalog is built at startup
and selected per request from a single language code, typically a cookie value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from adminkit.core.constants import DEFAULT_LANGUAGE
from adminkit.core.descriptors import populate_template

from .errors import FieldValidationError

__all__ = ["Translator", "TranslatorCatalog", "ENGLISH"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Translator:
    """
    Messages of one language.

    Attributes:
        language_code (str): Lowercase code used for selection, e.g. "en".
        language_name (str): Display name.
        messages (Mapping[str, str]): Key -> template.
        layout_direction (str): "ltr" or "rtl".
    """

    language_code: str
    language_name: str
    messages: Mapping[str, str] = field(default_factory=dict)
    layout_direction: str = "ltr"

    def translate(self, key: str, **values: Any) -> str:
        """Render a message; unknown keys render as the key itself."""
        return populate_template(self.messages.get(key, key), values)

    def field_error(self, error: FieldValidationError) -> str:
        return self.translate(error.code, **error.params)


ENGLISH = Translator(
    language_code="en",
    language_name="English",
    messages={
        "required": "This field is required",
        "length out of range": "Length {length} is outside the allowed range ({range})",
        "pattern mismatch": "Value does not match the required pattern ({pattern})",
        "disallowed mime type": "File type {mime_type} is not allowed (allowed: {allowed})",
        "invalid enumeration value": "{value} is not one of: {allowed}",
        "invalid value": "{value} is not a valid {column_type}",
        "value out of range": "Value {value} is outside the allowed range ({range})",
        "confirmation mismatch": "The confirmation value does not match",
        "forbidden": "You are not allowed to access {table}",
        "delete": "Delete selected",
        "no_items_found": "No items found",
    },
)


class TranslatorCatalog:
    """
    Translators keyed by language code, with a default fallback.

    Examples:
        >>> catalog = TranslatorCatalog()
        >>> catalog.select("xx").language_code
        'en'
        >>> catalog.select(None).translate("pattern mismatch", pattern="^a$")
        'Value does not match the required pattern (^a$)'
    """

    def __init__(
        self,
        translators: Iterable[Translator] = (ENGLISH,),
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._translators: dict[str, Translator] = {}
        self.default_language = default_language.strip().lower()
        for translator in translators:
            self.register(translator)

    def register(self, translator: Translator) -> None:
        """Add a translator, replacing any previous one with the same code."""
        code = translator.language_code.strip().lower()
        if code in self._translators:
            logger.info("replacing translator %s", code)
        self._translators[code] = translator

    def select(self, language_code: str | None) -> Translator:
        """
        Pick the translator for a language code.

        Absent or unknown codes fall back to the default language, then to English.
        """
        if language_code:
            found = self._translators.get(language_code.strip().lower())
            if found is not None:
                return found
        return self._translators.get(self.default_language, ENGLISH)

    def languages(self) -> list[Translator]:
        return list(self._translators.values())

    def __contains__(self, language_code: object) -> bool:
        return isinstance(language_code, str) and language_code.strip().lower() in self._translators
