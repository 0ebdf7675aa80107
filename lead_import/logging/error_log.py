from __future__ import annotations

import re
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Per-upload error log.

One JSON Lines file per import run, named after the uploaded file:
``logs/errors-<upload>-YYYYMMDD-HHMMSS.log`` (UTC). Every line is one
ErrorRecord with the fixed keys. Records are held until the run reaches
Reporting and written in one go, so an upload without errors leaves no file.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]+")


def _slug(source: str) -> str:
    return _UNSAFE.sub("_", Path(source).stem).strip("_.")


class ErrorLogBuffer:
    """Row, file and batch errors of one upload, flushed as JSON Lines.

    ``source`` is the uploaded file name; it becomes part of the log file name
    so logs of consecutive uploads can be told apart.
    """

    def __init__(self, logs_dir: Path = LOGS_DIR, source: str | None = None) -> None:
        self._logs_dir = logs_dir
        self._prefix = "errors"
        if source and _slug(source):
            self._prefix = f"errors-{_slug(source)}"
        self._pending: list[ErrorRecord] = []
        self._counts: Counter[str] = Counter()
        self._path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            self._path = self._logs_dir / f"{self._prefix}-{datetime.now(UTC).strftime(TIMESTAMP_FMT)}.log"
        return self._path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._pending)

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)
        self._counts[record.error_type] += 1

    def counts_by_type(self) -> dict[str, int]:
        """Errors seen this run per error_type, flushed ones included."""
        return dict(self._counts)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Write pending records; returns the log path, or None if nothing was pending."""
        if not self._pending:
            return None
        path = self.file_path
        with path.open("a", encoding="utf-8") as f:
            f.writelines(r.to_json_line() + "\n" for r in self._pending)
        self._pending.clear()
        return path
