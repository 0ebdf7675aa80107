from __future__ import annotations

from pathlib import Path

import pandas as pd
from openpyxl.utils import get_column_letter

from ..models.columns import DEFAULT_MAPPING, TEMPLATE_EXAMPLE_ROW, ColumnMapping

"""Downloadable import template: the header row plus one example row."""

TEMPLATE_FILE_NAME = "lead_import_template.xlsx"
TEMPLATE_SHEET_NAME = "Lead Template"
COLUMN_WIDTH = 20


def write_template(path: Path | None = None, mapping: ColumnMapping = DEFAULT_MAPPING) -> Path:
    """Write the lead import template workbook and return its path."""
    path = path or Path(TEMPLATE_FILE_NAME)
    if path.suffix.lower() != ".xlsx":
        raise ValueError(f"template must be an .xlsx file: {path}")

    labels = mapping.labels
    example = dict(zip([c.label for c in DEFAULT_MAPPING.columns], TEMPLATE_EXAMPLE_ROW, strict=True))
    df = pd.DataFrame([[example[label] for label in labels]], columns=labels)

    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=TEMPLATE_SHEET_NAME, index=False)
        ws = writer.sheets[TEMPLATE_SHEET_NAME]
        for idx in range(1, len(labels) + 1):
            ws.column_dimensions[get_column_letter(idx)].width = COLUMN_WIDTH
    return path
