"""
Load raw table metadata from JSON or TOML files.

JSON files hold either a list of table records or {"tables": [...]}; TOML files
hold an array of tables (``[[tables]]``).
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path

from adminkit.core.builder import build_descriptors
from adminkit.core.descriptors import TableDescriptor
from adminkit.core.metadata import TableMetadata, parse_tables

__all__ = ["load_metadata_file", "load_descriptors"]


def load_metadata_file(path: str | os.PathLike[str]) -> list[TableMetadata]:
    """
    Read and validate a metadata file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the suffix is neither .json nor .toml, or the content does not parse.
        pydantic.ValidationError: If a record has the wrong shape.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".json":
        with p.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    elif suffix == ".toml":
        with p.open("rb") as fh:
            payload = tomllib.load(fh)
    else:
        raise ValueError(f"unsupported metadata file type {p.suffix!r} (expected .json or .toml)")
    try:
        return parse_tables(payload)
    except TypeError as exc:
        raise ValueError(f"{p}: {exc}") from exc


def load_descriptors(path: str | os.PathLike[str]) -> dict[str, TableDescriptor]:
    """Read a metadata file and build its descriptors (SchemaError on invalid metadata)."""
    return build_descriptors(load_metadata_file(path))
