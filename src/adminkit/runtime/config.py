"""
Configuration for the adminkit.runtime module.

Defines AdminSettings, a frozen dataclass carrying runtime configuration for the
form binder, listings and locale selection. Defaults are sourced from
adminkit.core.constants (the single source of truth).

Source of truth
- adminkit.core.constants.DEFAULT_LANGUAGE, MAX_ITEMS_IN_PAGE, TRUE_FORM, FALSE_FORM,
  DATE_FORMAT, DATETIME_FORMAT, ADMIN_PATH

Import DAG discipline
- Depends only on stdlib and adminkit.core.constants.

Notes
- Precedence: environment (ADMINKIT_*) > TOML > defaults.
- Invalid values in a layer are ignored and the previous layer's value is kept.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from adminkit.core.constants import ADMIN_PATH as CORE_ADMIN_PATH
from adminkit.core.constants import DATE_FORMAT as CORE_DATE_FORMAT
from adminkit.core.constants import DATETIME_FORMAT as CORE_DATETIME_FORMAT
from adminkit.core.constants import DEFAULT_LANGUAGE as CORE_DEFAULT_LANGUAGE
from adminkit.core.constants import FALSE_FORM as CORE_FALSE_FORM
from adminkit.core.constants import MAX_ITEMS_IN_PAGE as CORE_MAX_ITEMS_IN_PAGE
from adminkit.core.constants import TRUE_FORM as CORE_TRUE_FORM

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in _TRUTHY
    return False


@dataclass(frozen=True)
class AdminSettings:
    """
    Runtime settings for the adminkit.runtime layer.

    Attributes:
        default_language (str): Language code used when a request selects none or an
            unknown one.
        max_items_in_page (int): Listing page size when the request asks for none (>= 1).
        debug_mode (bool): When True, hosts may surface error details to callers.
        date_format (str): strptime format of date form inputs.
        datetime_format (str): strptime format of datetime form inputs.
        true_form (str): Checkbox value bound to True (besides "true").
        false_form (str): Checkbox value bound to False (besides "false").
        admin_path (str): Path prefix under which the host mounts the panel.

    Examples:
        >>> from adminkit.runtime.config import AdminSettings
        >>> AdminSettings(max_items_in_page=50)  # doctest: +ELLIPSIS
        AdminSettings(...)
    """

    default_language: str = CORE_DEFAULT_LANGUAGE
    max_items_in_page: int = CORE_MAX_ITEMS_IN_PAGE
    debug_mode: bool = False
    date_format: str = CORE_DATE_FORMAT
    datetime_format: str = CORE_DATETIME_FORMAT
    true_form: str = CORE_TRUE_FORM
    false_form: str = CORE_FALSE_FORM
    admin_path: str = CORE_ADMIN_PATH

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: AdminSettings, cfg: dict[str, Any] | None) -> AdminSettings:
        """Apply a loose config mapping onto AdminSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        for key in ("default_language", "date_format", "datetime_format", "true_form", "false_form"):
            value = cfg.get(key)
            if isinstance(value, str) and value.strip():
                s = replace(s, **{key: value.strip()})

        if "max_items_in_page" in cfg:
            try:
                size = int(cfg["max_items_in_page"])
            except (TypeError, ValueError):
                size = 0
            if size >= 1:
                s = replace(s, max_items_in_page=size)

        if "debug_mode" in cfg:
            s = replace(s, debug_mode=_bool(cfg["debug_mode"]))

        if "admin_path" in cfg and isinstance(cfg["admin_path"], str):
            path = cfg["admin_path"].strip().strip("/")
            if path:
                s = replace(s, admin_path=path)

        return s

    @classmethod
    def from_env(cls, base: AdminSettings | None = None, prefix: str = "ADMINKIT_") -> AdminSettings:
        """
        Build AdminSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - ADMINKIT_DEFAULT_LANGUAGE
            - ADMINKIT_MAX_ITEMS_IN_PAGE
            - ADMINKIT_DEBUG_MODE (1/0/true/false/yes/no/on/off)
            - ADMINKIT_DATE_FORMAT
            - ADMINKIT_DATETIME_FORMAT
            - ADMINKIT_TRUE_FORM / ADMINKIT_FALSE_FORM
            - ADMINKIT_ADMIN_PATH
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in (
            "default_language",
            "max_items_in_page",
            "debug_mode",
            "date_format",
            "datetime_format",
            "true_form",
            "false_form",
            "admin_path",
        ):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> AdminSettings:
        """
        Build AdminSettings from a TOML file.

        Search order when `path` is None:
            1) ./adminkit.toml (with either a top-level [admin] table or direct keys)
            2) ./pyproject.toml under [tool.adminkit]

        Returns defaults if no file is present or none parses.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "adminkit.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("adminkit") if isinstance(tool, dict) else None
            elif isinstance(data.get("admin"), dict):
                cfg = data["admin"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> AdminSettings:
        """
        Load AdminSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (adminkit.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)
