"""
Typed coercion of raw request strings according to a field's column type.

Used by the form binder (request body) and listing filters (query parameters).
Every parser raises ValueError on input it cannot represent; callers decide
whether that is a field violation or an ignored filter.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from adminkit.core.types import ColumnType

from .config import AdminSettings

__all__ = ["parse_value", "parse_duration", "INTEGER_BOUNDS"]

# Inclusive bounds of the fixed-width integer column types.
INTEGER_BOUNDS: dict[ColumnType, tuple[int, int]] = {
    ColumnType.SHORT: (-(2**15), 2**15 - 1),
    ColumnType.INTEGER: (-(2**31), 2**31 - 1),
    ColumnType.LONG: (-(2**63), 2**63 - 1),
}

_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)


def parse_duration(raw: str) -> timedelta:
    """
    Parse an ISO-8601 day/time duration ("P1DT2H", "PT90M") or a number of seconds.

    Raises:
        ValueError: If the text is neither form.
    """
    text = raw.strip()
    match = _DURATION_RE.match(text)
    if match and text.upper() not in {"P", "PT"}:
        parts = {k: float(v) for k, v in match.groupdict().items() if v is not None}
        return timedelta(**parts)
    seconds = float(_numeric_text(text))
    if not math.isfinite(seconds):
        raise ValueError(f"duration must be finite, got {raw!r}")
    return timedelta(seconds=seconds)


def _numeric_text(raw: str) -> str:
    text = raw.strip()
    # int(), float() and Decimal() accept digit grouping underscores; forms do not.
    if "_" in text:
        raise ValueError(f"invalid number {raw!r}")
    return text


def _parse_int(column_type: ColumnType, raw: str) -> int:
    value = int(_numeric_text(raw))
    lo, hi = INTEGER_BOUNDS[column_type]
    if not lo <= value <= hi:
        raise ValueError(f"{value} does not fit a {column_type.value} column")
    return value


def _parse_float(raw: str) -> float:
    value = float(_numeric_text(raw))
    if not math.isfinite(value):
        raise ValueError(f"number must be finite, got {raw!r}")
    return value


def _parse_decimal(raw: str) -> Decimal:
    try:
        value = Decimal(_numeric_text(raw))
    except InvalidOperation as exc:
        raise ValueError(f"invalid decimal {raw!r}") from exc
    if not value.is_finite():
        raise ValueError(f"decimal must be finite, got {raw!r}")
    return value


def _parse_bool(raw: str, settings: AdminSettings) -> bool:
    token = raw.strip().lower()
    if token in {settings.true_form.lower(), "true"}:
        return True
    if token in {settings.false_form.lower(), "false"}:
        return False
    raise ValueError(f"invalid boolean {raw!r}")


def _parse_date(raw: str, settings: AdminSettings) -> date:
    try:
        return datetime.strptime(raw.strip(), settings.date_format).date()
    except ValueError:
        return date.fromisoformat(raw.strip())


def _parse_datetime(raw: str, settings: AdminSettings) -> datetime:
    try:
        return datetime.strptime(raw.strip(), settings.datetime_format)
    except ValueError:
        return datetime.fromisoformat(raw.strip())


def parse_value(column_type: ColumnType, raw: str, settings: AdminSettings | None = None) -> Any:
    """
    Convert a raw string to the Python value of a column type.

    Args:
        column_type: Target column type.
        raw: Non-blank request value.
        settings: Source of date/datetime formats and boolean forms (defaults when None).

    Returns:
        Any: str for string-like types (string, enumeration, file, not_available), int,
        float, Decimal, bool, date, datetime, timedelta or bytes otherwise.

    Raises:
        ValueError: If the value cannot be represented.
    """
    settings = settings or AdminSettings()
    if column_type in INTEGER_BOUNDS:
        return _parse_int(column_type, raw)
    if column_type in (ColumnType.DOUBLE, ColumnType.FLOAT):
        return _parse_float(raw)
    if column_type is ColumnType.DECIMAL:
        return _parse_decimal(raw)
    if column_type is ColumnType.BOOLEAN:
        return _parse_bool(raw, settings)
    if column_type is ColumnType.CHAR:
        if len(raw) != 1:
            raise ValueError(f"expected a single character, got {raw!r}")
        return raw
    if column_type is ColumnType.DATE:
        return _parse_date(raw, settings)
    if column_type is ColumnType.DATETIME:
        return _parse_datetime(raw, settings)
    if column_type is ColumnType.DURATION:
        return parse_duration(raw)
    if column_type is ColumnType.BINARY:
        return raw.encode("utf-8")
    return raw
