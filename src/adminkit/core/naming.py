"""
Naming defaults for descriptors: humanized verbose names and plural table names.

Examples:
    >>> from adminkit.core.naming import humanize, pluralize
    >>> humanize("firstName"), humanize("created_at")
    ('First Name', 'Created At')
    >>> pluralize("category"), pluralize("user"), pluralize("users")
    ('categories', 'users', 'users')
"""

from __future__ import annotations

import re

__all__ = ["humanize", "pluralize", "split_words"]

_SEPARATOR_RE = re.compile(r"[\s_\-]+")
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")
_VOWELS = frozenset("aeiou")


def split_words(name: str) -> list[str]:
    """Split a snake_case, kebab-case or camelCase identifier into words."""
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(name.strip()):
        if chunk:
            words.extend(_WORD_RE.findall(chunk))
    return words


def humanize(name: str) -> str:
    """Turn an identifier into a capitalized, space separated label."""
    return " ".join(word[0].upper() + word[1:].lower() for word in split_words(name))


def pluralize(name: str) -> str:
    """
    Derive a plural form with a deliberately small heuristic.

    Rules:
        - names already ending in "s" are returned unchanged;
        - consonant + "y" becomes "ies" (category -> categories);
        - everything else gets an "s" appended.
    """
    if not name or name.endswith(("s", "S")):
        return name
    if name.endswith("y") and len(name) > 1 and name[-2].lower() not in _VOWELS:
        return name[:-1] + "ies"
    return name + "s"
