from __future__ import annotations

import struct
from pathlib import Path

import pandas as pd
import pytest

from lead_import.excel.reader import FileParseError, normalize_sheet, read_lead_file, read_raw_frame


def test_read_xlsx_first_sheet_only(temp_workdir: Path):
    path = temp_workdir / "data" / "two_sheets.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame([["Student Name"], ["Asha"]]).to_excel(writer, sheet_name="First", header=False, index=False)
        pd.DataFrame([["Student Name"], ["Other"]]).to_excel(writer, sheet_name="Second", header=False, index=False)
    sheet = read_lead_file(path)
    assert sheet.sheet_name == "First"
    assert [r.values["Student Name"] for r in sheet.rows] == ["Asha"]


def test_row_numbers_start_at_two(make_lead_file):
    path = make_lead_file("rows.xlsx", [["Student Name"], ["A"], ["B"]])
    sheet = read_lead_file(path)
    assert [r.row_number for r in sheet.rows] == [2, 3]
    assert sheet.file_name == "rows.xlsx"


def test_blank_rows_skipped_but_numbering_kept(make_lead_file):
    path = make_lead_file(
        "gaps.csv",
        [["Student Name", "Primary Contact Number"], ["A", "1"], ["", ""], ["B", "2"]],
    )
    sheet = read_lead_file(path)
    assert [r.row_number for r in sheet.rows] == [2, 4]


def test_header_labels_are_stripped(make_lead_file):
    path = make_lead_file("hdr.xlsx", [["  Student Name ", "Email"], ["Asha", "a@example.com"]])
    sheet = read_lead_file(path)
    assert sheet.columns == ["Student Name", "Email"]
    assert sheet.rows[0].values["Student Name"] == "Asha"


def test_missing_cells_become_none(make_lead_file):
    path = make_lead_file("holes.xlsx", [["Student Name", "Email"], ["Asha", None]])
    sheet = read_lead_file(path)
    assert sheet.rows[0].values["Email"] is None


def test_csv_values_are_text(make_lead_file):
    path = make_lead_file("nums.csv", [["Primary Contact Number"], ["0987654321"]])
    sheet = read_lead_file(path)
    assert sheet.rows[0].values["Primary Contact Number"] == "0987654321"


def test_empty_csv_has_no_rows(temp_workdir: Path):
    path = temp_workdir / "data" / "empty.csv"
    path.write_text("", encoding="utf-8")
    sheet = read_lead_file(path)
    assert sheet.rows == []
    assert sheet.columns == []


def test_unsupported_suffix(temp_workdir: Path):
    with pytest.raises(FileParseError):
        read_raw_frame(temp_workdir / "leads.pdf")


def test_missing_file(temp_workdir: Path):
    with pytest.raises(FileParseError) as e:
        read_raw_frame(temp_workdir / "nope.xlsx")
    assert "file not found" in str(e.value)


def test_normalize_sheet_null_sentinels():
    df = pd.DataFrame([["Student Name", "Email"], ["Asha", " null "]], dtype=object)
    sheet = normalize_sheet(df, "S", null_sentinels={"NULL"})
    assert sheet.rows[0].values["Email"] is None


def test_normalize_sheet_duplicate_header_keeps_first():
    df = pd.DataFrame([["Student Name", "Student Name"], ["First", "Second"]], dtype=object)
    sheet = normalize_sheet(df, "S")
    assert sheet.rows[0].values == {"Student Name": "First"}


def test_csv_trailing_commas_are_cut_to_header_width(temp_workdir: Path):
    path = temp_workdir / "data" / "ragged.csv"
    path.write_text(
        "Student Name,Primary Contact Number\nAsha,9876543210\nRavi,9876543211,\nMeera,9876543212,,extra\n",
        encoding="utf-8",
    )
    sheet = read_lead_file(path)
    assert sheet.columns == ["Student Name", "Primary Contact Number"]
    assert [r.values for r in sheet.rows] == [
        {"Student Name": "Asha", "Primary Contact Number": "9876543210"},
        {"Student Name": "Ravi", "Primary Contact Number": "9876543211"},
        {"Student Name": "Meera", "Primary Contact Number": "9876543212"},
    ]
    assert [r.row_number for r in sheet.rows] == [2, 3, 4]


def test_csv_short_lines_pad_missing_cells(temp_workdir: Path):
    path = temp_workdir / "data" / "short.csv"
    path.write_text("Student Name,Primary Contact Number,Email\nAsha,9876543210\n", encoding="utf-8")
    sheet = read_lead_file(path)
    assert sheet.rows[0].values["Email"] is None


def _biff2_worksheet(rows: list[list[str]]) -> bytes:
    """Minimal Excel 2.x worksheet stream: BOF, one LABEL record per cell, EOF."""
    out = [struct.pack("<HHHH", 0x0009, 4, 0x0007, 0x0010)]
    for r, row in enumerate(rows):
        for c, text in enumerate(row):
            data = text.encode("latin-1")
            out.append(struct.pack("<HHHH3sB", 0x0004, 8 + len(data), r, c, b"\x00\x00\x00", len(data)) + data)
    out.append(struct.pack("<HH", 0x000A, 0))
    return b"".join(out)


def test_read_legacy_xls(temp_workdir: Path):
    path = temp_workdir / "data" / "legacy.xls"
    path.write_bytes(
        _biff2_worksheet([
            ["Student Name", "Primary Contact Number"],
            ["Asha", "9876543210"],
            ["Ravi", "9876543211"],
        ])
    )
    sheet = read_lead_file(path)
    assert sheet.columns == ["Student Name", "Primary Contact Number"]
    assert [r.values["Student Name"] for r in sheet.rows] == ["Asha", "Ravi"]
    assert sheet.rows[1].values["Primary Contact Number"] == "9876543211"
    assert [r.row_number for r in sheet.rows] == [2, 3]
