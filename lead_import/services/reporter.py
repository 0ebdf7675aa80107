from __future__ import annotations

from collections.abc import Sequence

from ..models.error_record import RowError
from ..models.import_result import ImportOutcome, ImportStatus

"""Result reporter: outcome classification and operator-facing text.

- headline(): one-line toast text
- render_report(): success count, rejected rows, error table capped at
  ``limit`` entries plus "...and N more errors"
- render_summary_line(): machine-parsable SUMMARY line

SUMMARY line format:
    SUMMARY file={name} status={status} rows={total} imported={n}
    rejected={rows} errors={n} elapsed_sec={elapsed}
"""

__all__ = [
    "DEFAULT_ERROR_LIMIT",
    "classify",
    "headline",
    "visible_errors",
    "render_report",
    "render_summary_line",
]

DEFAULT_ERROR_LIMIT = 20

_TABLE_HEADERS = ("Row", "Field", "Error")


def classify(
    success_count: int,
    errors: Sequence[RowError],
    *,
    empty_input: bool = False,
    failed: bool = False,
) -> ImportStatus:
    """Classify an import.

    ``failed`` marks a file-parse or batch-submission failure: nothing was
    imported whatever the row errors say.
    """
    if empty_input:
        return ImportStatus.EMPTY_INPUT
    if failed or success_count == 0:
        return ImportStatus.ALL_FAILURE
    if errors:
        return ImportStatus.PARTIAL
    return ImportStatus.ALL_SUCCESS


def headline(outcome: ImportOutcome) -> str:
    if outcome.status is ImportStatus.EMPTY_INPUT:
        return "Empty file: No data rows found"
    if outcome.failure is not None:
        return f"Import failed: {outcome.failure}"
    if not outcome.errors:
        return f"Successfully imported {outcome.success_count} leads"
    return f"Imported {outcome.success_count} leads with {len(outcome.errors)} errors"


def visible_errors(
    errors: Sequence[RowError], limit: int = DEFAULT_ERROR_LIMIT
) -> tuple[list[RowError], int]:
    """First ``limit`` errors and the number left out."""
    shown = list(errors[:limit])
    return shown, max(len(errors) - limit, 0)


def _render_table(errors: Sequence[RowError]) -> list[str]:
    cells = [(str(e.row), e.field, e.message) for e in errors]
    widths = [
        max([len(h)] + [len(c[i]) for c in cells]) for i, h in enumerate(_TABLE_HEADERS)
    ]
    lines = ["  ".join(h.ljust(w) for h, w in zip(_TABLE_HEADERS, widths)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    for c in cells:
        lines.append("  ".join(v.ljust(w) for v, w in zip(c, widths)).rstrip())
    return lines


def render_report(outcome: ImportOutcome, limit: int = DEFAULT_ERROR_LIMIT) -> str:
    lines = [headline(outcome)]
    if outcome.is_empty:
        return "\n".join(lines)

    if outcome.success_count > 0:
        lines.append(f"{outcome.success_count} leads imported successfully")

    if outcome.errors:
        lines.append(
            f"{outcome.rejected_rows} rows had errors and were skipped ({len(outcome.errors)} errors)"
        )
        shown, hidden = visible_errors(outcome.errors, limit)
        lines.extend(_render_table(shown))
        if hidden:
            lines.append(f"...and {hidden} more errors")
    return "\n".join(lines)


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(outcome: ImportOutcome) -> str:
    """Render the SUMMARY line.

    Examples:
        >>> from lead_import.models.import_result import ImportOutcome, ImportStatus
        >>> outcome = ImportOutcome(
        ...     file_name="leads.xlsx", status=ImportStatus.ALL_SUCCESS,
        ...     success_count=3, errors=(), total_rows=3, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(outcome)
        'SUMMARY file=leads.xlsx status=success rows=3 imported=3 rejected=0 errors=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY file={outcome.file_name} "
        f"status={outcome.status.value} "
        f"rows={outcome.total_rows} "
        f"imported={outcome.success_count} "
        f"rejected={outcome.rejected_rows} "
        f"errors={len(outcome.errors)} "
        f"elapsed_sec={_format_number(outcome.elapsed_seconds)}"
    )
