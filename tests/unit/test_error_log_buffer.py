from __future__ import annotations

import json
import re
from pathlib import Path

from lead_import.logging.error_log import ErrorLogBuffer
from lead_import.models.error_record import ErrorRecord, RowError


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(ErrorRecord.from_row_error("leads.xlsx", RowError(4, "Student Name", "Required field")))
    buf.append(ErrorRecord.create("leads.xlsx", -1, "", "BATCH_INSERT_ERROR", "boom"))
    assert len(buf) == 2

    path = buf.flush()
    assert path is not None
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = [json.loads(x) for x in path.read_text(encoding="utf-8").splitlines()]
    assert lines[0]["row"] == 4
    assert lines[0]["field"] == "Student Name"
    assert lines[0]["error_type"] == "REQUIRED_FIELD"
    assert lines[1]["field"] == ""
    assert len(buf) == 0


def test_flush_without_records_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_second_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(ErrorRecord.create("a.csv", 2, "Email", "REQUIRED_FIELD", "Required field"))
    first = buf.flush()
    buf.append(ErrorRecord.create("a.csv", 3, "Email", "REQUIRED_FIELD", "Required field"))
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2


def test_records_returns_copy(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("a.csv", 2, "Email", "REQUIRED_FIELD", "Required field"))
    buf.records.clear()
    assert len(buf) == 1


def test_log_file_named_after_upload(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path, source="Admissions 2026 (draft).xlsx")
    buf.append(ErrorRecord.create("Admissions 2026 (draft).xlsx", 2, "Email", "REQUIRED_FIELD", "Required field"))
    path = buf.flush()
    assert re.fullmatch(r"errors-Admissions_2026_draft-\d{8}-\d{6}\.log", path.name)


def test_counts_by_type_survive_flush(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.from_row_error("a.csv", RowError(2, "Student Name", "Required field")))
    buf.append(ErrorRecord.create("a.csv", 2, "Primary Contact Number", "CONTACT_TOO_SHORT", "Must be at least 10 digits"))
    buf.flush()
    buf.append(ErrorRecord.from_row_error("a.csv", RowError(3, "Student Name", "Required field")))
    assert buf.counts_by_type() == {"REQUIRED_FIELD": 2, "CONTACT_TOO_SHORT": 1}
