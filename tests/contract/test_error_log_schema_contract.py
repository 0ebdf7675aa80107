from __future__ import annotations

import json
import re
from pathlib import Path

from lead_import.cli.__main__ import main as cli_main

"""Error log contract: JSON Lines with exactly the fixed keys."""

EXPECTED_KEYS = {"timestamp", "file", "row", "field", "error_type", "message"}
TS_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def _read_error_log(workdir: Path) -> list[dict]:
    files = list((workdir / "logs").glob("errors-*.log"))
    assert len(files) == 1
    return [json.loads(x) for x in files[0].read_text(encoding="utf-8").splitlines()]


def test_row_errors_logged_with_fixed_keys(write_config, make_lead_file, temp_workdir, monkeypatch):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    path = make_lead_file(
        "leads.xlsx",
        [
            ["Student Name", "Primary Contact Number"],
            ["Asha", "9876543210"],
            [None, "12345"],
        ],
    )
    cli_main(["import", str(path), "--operator-id", "op-1"])

    records = _read_error_log(temp_workdir)
    assert len(records) == 2
    for rec in records:
        assert set(rec) == EXPECTED_KEYS
        assert TS_PATTERN.match(rec["timestamp"])
        assert rec["file"] == "leads.xlsx"
        assert rec["row"] == 3
    assert [r["error_type"] for r in records] == ["REQUIRED_FIELD", "CONTACT_TOO_SHORT"]
    assert [r["field"] for r in records] == ["Student Name", "Primary Contact Number"]


def test_file_parse_error_logged_at_file_level(write_config, temp_workdir, monkeypatch):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    path = temp_workdir / "data" / "broken.xlsx"
    path.write_bytes(b"garbage")
    cli_main(["import", str(path), "--operator-id", "op-1"])

    (record,) = _read_error_log(temp_workdir)
    assert set(record) == EXPECTED_KEYS
    assert record["row"] == -1
    assert record["field"] == ""
    assert record["error_type"] == "FILE_PARSE_ERROR"


def test_clean_import_writes_no_error_log(write_config, make_lead_file, temp_workdir, monkeypatch):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    path = make_lead_file("ok.csv", [["Student Name", "Primary Contact Number"], ["Asha", "9876543210"]])
    assert cli_main(["import", str(path), "--operator-id", "op-1"]) == 0
    assert not (temp_workdir / "logs").exists()


def test_error_log_named_after_upload(write_config, make_lead_file, temp_workdir, monkeypatch, capsys):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    path = make_lead_file("spring_intake.csv", [["Student Name", "Primary Contact Number"], [None, "9876543210"]])
    cli_main(["import", str(path), "--operator-id", "op-1"])
    (log_file,) = (temp_workdir / "logs").glob("errors-*.log")
    assert log_file.name.startswith("errors-spring_intake-")
    assert "(REQUIRED_FIELD=1)" in capsys.readouterr().out
