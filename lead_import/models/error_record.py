from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from dataclasses import field as dc_field
from datetime import UTC, datetime

"""Row error and error-log record models.

RowError is what the operator sees: one failed rule on one row. ErrorRecord is
the JSON Lines entry written to the error log for every RowError and for the
file-level failures (unreadable file, rejected batch).
"""

__all__ = [
    "RowError",
    "ErrorRecord",
    "FILE_LEVEL_ROW",
    "REQUIRED_FIELD",
    "CONTACT_TOO_SHORT",
    "FILE_PARSE_ERROR",
    "BATCH_INSERT_ERROR",
]

# Row number used when an error concerns the whole file.
FILE_LEVEL_ROW = -1

REQUIRED_FIELD = "REQUIRED_FIELD"
CONTACT_TOO_SHORT = "CONTACT_TOO_SHORT"
FILE_PARSE_ERROR = "FILE_PARSE_ERROR"
BATCH_INSERT_ERROR = "BATCH_INSERT_ERROR"


@dataclass(frozen=True)
class RowError:
    """A validation failure on a single row.

    Attributes:
        row: Display row number (header is row 1, first data row is row 2)
        field: Template label of the offending column
        message: Operator-facing message
        error_type: Classification written to the error log
    """
    row: int
    field: str
    message: str
    error_type: str = dc_field(default=REQUIRED_FIELD, compare=False)


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded file name
        row: Display row number. -1 for file-level errors
        field: Template label, empty for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Validation message or verbatim failure reason
    """
    timestamp: str
    file: str
    row: int
    field: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, row: int, field: str, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            field=field,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_row_error(file: str, error: RowError) -> ErrorRecord:
        return ErrorRecord.create(file, error.row, error.field, error.error_type, error.message)

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
