from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .error_record import RowError

"""Import run models: state machine, outcome classification and the outcome.

State transitions for one import invocation:
    IDLE -> READING_FILE -> VALIDATING_ROWS -> SUBMITTING_BATCH -> REPORTING

Short-circuits (every path ends in REPORTING):
    READING_FILE -> REPORTING       empty input or unreadable file
    VALIDATING_ROWS -> REPORTING    no row was accepted, nothing to submit
"""

__all__ = [
    "ImportState",
    "ImportStatus",
    "ImportOutcome",
]


class ImportState(Enum):
    IDLE = "idle"
    READING_FILE = "reading_file"
    VALIDATING_ROWS = "validating_rows"
    SUBMITTING_BATCH = "submitting_batch"
    REPORTING = "reporting"


class ImportStatus(Enum):
    """Overall classification shown to the operator.

    - ALL_SUCCESS: every row imported
    - PARTIAL: some rows imported, some rejected
    - ALL_FAILURE: nothing imported (all rows rejected, unreadable file, or
      batch rejected by the store)
    - EMPTY_INPUT: the file had no data rows; validation never ran
    """
    ALL_SUCCESS = "success"
    PARTIAL = "partial"
    ALL_FAILURE = "failed"
    EMPTY_INPUT = "empty"


@dataclass(frozen=True)
class ImportOutcome:
    """Result of one import invocation.

    success_count is the number of rows that had no errors and were accepted
    by the store. It is 0 whenever the batch itself failed.
    """
    file_name: str
    status: ImportStatus
    success_count: int
    errors: tuple[RowError, ...]
    total_rows: int = 0
    failure: str | None = None  # verbatim reason for file/batch failures
    states: tuple[ImportState, ...] = ()
    elapsed_seconds: float = 0.0

    @property
    def rejected_rows(self) -> int:
        """Number of distinct rows with at least one error."""
        return len({e.row for e in self.errors})

    @property
    def is_empty(self) -> bool:
        return self.status is ImportStatus.EMPTY_INPUT
