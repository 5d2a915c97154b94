from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from adminkit.cli import main

TABLES = {
    "tables": [
        {
            "table_name": "category",
            "primary_key": "id",
            "group_name": "Catalog",
            "fields": [
                {"field_name": "id", "property_type": "int", "read_only": True},
                {"field_name": "displayName", "property_type": "str"},
                {"field_name": "secretNote", "property_type": "str", "nullable": True, "show_in_panel": False},
            ],
        },
        {
            "table_name": "user",
            "primary_key": "id",
            "access_roles": ["admin"],
            "fields": [{"field_name": "id", "property_type": "int"}],
        },
    ]
}


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return int(exc.value.code)


def _write_json(tmp_path: Path, payload) -> Path:
    p = tmp_path / "tables.json"
    p.write_text(json.dumps(payload))
    return p


def test_check_prints_summary(tmp_path: Path, capsys) -> None:
    path = _write_json(tmp_path, TABLES)

    assert _run(["check", str(path)]) == 0

    out = capsys.readouterr().out
    assert "[INFO] 2 table(s) resolved" in out
    assert "categories" in out
    assert "admin" in out


def test_check_reports_schema_errors(tmp_path: Path, capsys) -> None:
    broken = {"tables": [dict(TABLES["tables"][1], primary_key="uuid")]}
    path = _write_json(tmp_path, broken)

    assert _run(["check", str(path)]) == 1

    err = capsys.readouterr().err
    assert "[ERROR]" in err
    assert "'uuid'" in err


def test_check_reads_toml(tmp_path: Path, capsys) -> None:
    path = tmp_path / "tables.toml"
    path.write_text(
        """
        [[tables]]
        table_name = "tag"
        primary_key = "id"

        [[tables.fields]]
        field_name = "id"
        property_type = "int"
        """.strip()
    )

    assert _run(["check", str(path)]) == 0
    assert "tags" in capsys.readouterr().out


def test_show_table_fields(tmp_path: Path, capsys) -> None:
    path = _write_json(tmp_path, TABLES)

    assert _run(["show", str(path), "--table", "category"]) == 0
    out = capsys.readouterr().out
    assert "Display Name" in out
    assert "integer" in out

    assert _run(["show", str(path), "--table", "missing"]) == 1


def test_missing_file_and_unknown_command(tmp_path: Path) -> None:
    assert _run(["check", str(tmp_path / "nope.json")]) == 1
    assert _run(["check", str(tmp_path / "tables.yaml")]) == 1
    assert _run(["frobnicate"]) == 2


def test_show_panel_only(tmp_path: Path, capsys) -> None:
    path = _write_json(tmp_path, TABLES)

    assert _run(["show", str(path), "--table", "category"]) == 0
    assert "Secret Note" in capsys.readouterr().out

    assert _run(["show", str(path), "--table", "category", "--panel-only"]) == 0
    out = capsys.readouterr().out
    assert "Display Name" in out
    assert "Secret Note" not in out


def test_debug_mode_enables_logging(tmp_path: Path, monkeypatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    monkeypatch.chdir(tmp_path)
    path = _write_json(tmp_path, TABLES)

    monkeypatch.delenv("ADMINKIT_DEBUG_MODE", raising=False)
    assert _run(["check", str(path)]) == 0
    assert calls == []

    monkeypatch.setenv("ADMINKIT_DEBUG_MODE", "1")
    assert _run(["check", str(path)]) == 0
    assert calls[0]["level"] == logging.DEBUG
