from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import pandas as pd

from ..models.columns import DEFAULT_MAPPING, ColumnMapping
from ..models.lead import LeadStatus

"""Column mapper: one raw row -> sparse ``{field: text}`` record.

Cells are resolved once by ``cell_text``: None means the cell is missing,
anything else is the stripped text of the cell. Missing cells are left out of
the record instead of being written as null.
"""

__all__ = [
    "cell_text",
    "map_row",
    "CREATED_BY_FIELD",
    "STATUS_FIELD",
]

CREATED_BY_FIELD = "created_by"
STATUS_FIELD = "status"


def cell_text(value: Any) -> str | None:
    """Text of a cell, or None when the cell is missing.

    Missing means absent, None, NaN/NaT or the empty string. A whitespace-only
    cell is present and comes back as "". Whole floats lose their ".0" and
    dates render as ISO dates.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if value == "":
            return None
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
        return str(value)
    if value is pd.NaT:
        return None
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def map_row(
    values: Mapping[str, Any],
    operator_id: str,
    mapping: ColumnMapping = DEFAULT_MAPPING,
    initial_status: str = LeadStatus.NEW_LEAD.value,
) -> dict[str, str]:
    """Map one raw row to internal field names.

    ``created_by`` and ``status`` are set on every record regardless of the
    row content. No state is kept between calls.
    """
    mapped: dict[str, str] = {CREATED_BY_FIELD: operator_id, STATUS_FIELD: initial_status}
    for label, field in mapping.pairs.items():
        text = cell_text(values.get(label))
        if text is not None:
            mapped[field] = text
    return mapped
