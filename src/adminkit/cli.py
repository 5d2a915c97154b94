from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import polars as pl

from adminkit.core.descriptors import TableDescriptor
from adminkit.runtime.config import AdminSettings
from adminkit.runtime.metadata_files import load_descriptors


def _tables_frame(tables: dict[str, TableDescriptor]) -> pl.DataFrame:
    """One summary row per table."""
    return pl.DataFrame(
        {
            "table": [t.table_name for t in tables.values()],
            "plural": [t.plural_name for t in tables.values()],
            "group": [t.group_name for t in tables.values()],
            "store": [t.store.value for t in tables.values()],
            "fields": [len(t.fields) for t in tables.values()],
            "roles": [", ".join(sorted(t.access_roles)) or "public" for t in tables.values()],
        }
    )


def _fields_frame(table: TableDescriptor, panel_only: bool = False) -> pl.DataFrame:
    fields = table.panel_fields if panel_only else table.fields
    return pl.DataFrame(
        {
            "field": [f.field_name for f in fields],
            "label": [f.verbose_name for f in fields],
            "column": [f.column_name for f in fields],
            "type": [f.column_type.value for f in fields],
            "nullable": [f.nullable for f in fields],
            "read_only": [f.read_only for f in fields],
            "required": [f.required_on_create for f in fields],
            "default": [f.default_value for f in fields],
        },
        schema_overrides={"default": pl.Utf8},
    )


def _load(path: str) -> dict[str, TableDescriptor] | None:
    """Build descriptors from a metadata file, printing the failure instead of raising."""
    try:
        return load_descriptors(Path(path))
    except (OSError, ValueError) as e:
        # SchemaError and pydantic.ValidationError are ValueErrors
        print(f"[ERROR] {path}: {e}", file=sys.stderr)
        return None


def _configure_logging(verbose: bool) -> None:
    # ADMINKIT_DEBUG_MODE (or debug_mode in adminkit.toml) implies --verbose.
    if verbose or AdminSettings.load().debug_mode:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _cmd_check(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="check", description="Build descriptors from a metadata file.")
    p.add_argument("file", type=str, help="Path to a .json or .toml metadata file.")
    p.add_argument("--verbose", action="store_true", help="Log descriptor resolution.")
    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    tables = _load(args.file)
    if tables is None:
        return 1
    print(f"[INFO] {len(tables)} table(s) resolved from {args.file}")
    if tables:
        print(_tables_frame(tables))
    return 0


def _cmd_show(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="show", description="Show the resolved fields of one table.")
    p.add_argument("file", type=str, help="Path to a .json or .toml metadata file.")
    p.add_argument("--table", type=str, required=True, help="Table name.")
    p.add_argument("--panel-only", action="store_true", help="Only fields shown in listings.")
    p.add_argument("--verbose", action="store_true", help="Log descriptor resolution.")
    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    tables = _load(args.file)
    if tables is None:
        return 1
    table = tables.get(args.table)
    if table is None:
        print(f"[ERROR] no table {args.table!r} in {args.file}", file=sys.stderr)
        return 1
    print(f"[INFO] {table.table_name} ({table.singular_name} / {table.plural_name}), primary key {table.primary_key_name}")
    print(_fields_frame(table, panel_only=args.panel_only))
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="adminkit", description="adminkit metadata utilities CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("check")
    sub.add_parser("show")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    if cmd == "check":
        code = _cmd_check(rest)
    elif cmd == "show":
        code = _cmd_show(rest)
    else:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()
