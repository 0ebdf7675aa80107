from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.lead import RawRow

"""Lead file reader.

Row 1 is the header row, rows 2+ are data rows. Only the first sheet of a
workbook is read. Every cell is read as-is (object dtype) and pandas' default
NA-string conversion is disabled: a cell containing "NA" is text, only truly
empty cells are missing. Configured null sentinels turn matching cells into
None here, before mapping.

Fully blank rows are skipped and do not count as data rows, but the remaining
rows keep their position in the file as row number.
"""

__all__ = [
    "FileParseError",
    "SheetData",
    "SUPPORTED_SUFFIXES",
    "read_raw_frame",
    "normalize_sheet",
    "read_lead_file",
]

EXCEL_SUFFIXES = {".xlsx", ".xls"}
CSV_SUFFIXES = {".csv"}
SUPPORTED_SUFFIXES = EXCEL_SUFFIXES | CSV_SUFFIXES

HEADER_ROW_NUMBER = 1


class FileParseError(Exception):
    """Raised when the uploaded file cannot be read as a table."""


@dataclass
class SheetData:
    file_name: str
    sheet_name: str
    columns: list[str]
    rows: list[RawRow]


def _is_blank(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, str):
        return val == ""
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def _read_csv_frame(path: Path) -> pd.DataFrame:
    """Read a CSV as text, width fixed by the header line.

    Data lines with more cells than the header (trailing commas from
    spreadsheet exports) are cut to the header width; those cells have no
    column to land in. Shorter lines are padded with missing cells.
    """
    options: dict[str, Any] = {
        "header": None,
        "dtype": str,
        "keep_default_na": False,
        "encoding": "utf-8-sig",
    }
    width = pd.read_csv(path, nrows=1, **options).shape[1]
    return pd.read_csv(
        path,
        engine="python",
        names=list(range(width)),
        skip_blank_lines=False,
        on_bad_lines=lambda cells: cells[:width],
        **options,
    )


def read_raw_frame(path: Path) -> tuple[str, pd.DataFrame]:
    """Read the first sheet (or the CSV body) without header interpretation.

    Returns ``(sheet_name, frame)``. An empty CSV yields an empty frame.

    Raises:
        FileParseError: unsupported extension, missing file, or a file the
            engine cannot parse.
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise FileParseError(
            f"unsupported file type '{path.suffix}' (expected one of {sorted(SUPPORTED_SUFFIXES)})"
        )
    if not path.exists():
        raise FileParseError(f"file not found: {path}")

    try:
        if suffix in CSV_SUFFIXES:
            try:
                df = _read_csv_frame(path)
            except pd.errors.EmptyDataError:
                df = pd.DataFrame()
            return path.stem, df

        xls = pd.ExcelFile(path)
        if not xls.sheet_names:
            return path.stem, pd.DataFrame()
        sheet_name = str(xls.sheet_names[0])
        df = xls.parse(
            xls.sheet_names[0],
            header=None,
            dtype=object,
            keep_default_na=False,
            na_values=[],
        )
        return sheet_name, df
    except FileParseError:
        raise
    except Exception as e:
        raise FileParseError(f"could not read {path.name}: {e}") from e


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    file_name: str = "",
    null_sentinels: frozenset[str] | set[str] | None = None,
) -> SheetData:
    """Apply the first row as header and build one RawRow per data row.

    Steps:
    1. An empty frame (no header at all) yields no columns and no rows
    2. Header labels are stripped; blank header cells are dropped
    3. Data rows that are entirely blank are skipped
    4. Cells whose upper-cased stripped text is a null sentinel become None
    """
    if df.shape[0] == 0:
        return SheetData(file_name=file_name, sheet_name=sheet_name, columns=[], rows=[])

    header = df.iloc[0].tolist()
    columns = ["" if _is_blank(c) else str(c).strip() for c in header]

    rows: list[RawRow] = []
    for offset, raw in enumerate(df.iloc[1:].itertuples(index=False, name=None), start=1):
        values = list(raw)
        if all(_is_blank(v) for v in values):
            continue
        row_dict: dict[str, Any] = {}
        for col, val in zip(columns, values, strict=False):
            if col == "" or col in row_dict:
                continue
            if _is_blank(val):
                row_dict[col] = None
                continue
            if null_sentinels and isinstance(val, str) and val.strip().upper() in null_sentinels:
                row_dict[col] = None
                continue
            row_dict[col] = val
        rows.append(RawRow(row_number=HEADER_ROW_NUMBER + offset, values=row_dict))

    return SheetData(
        file_name=file_name,
        sheet_name=sheet_name,
        columns=[c for c in columns if c],
        rows=rows,
    )


def read_lead_file(path: Path, null_sentinels: frozenset[str] | set[str] | None = None) -> SheetData:
    sheet_name, df = read_raw_frame(path)
    return normalize_sheet(df, sheet_name, file_name=path.name, null_sentinels=null_sentinels)
