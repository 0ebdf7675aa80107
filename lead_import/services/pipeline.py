from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..db.store import BatchInsertError, LeadStore
from ..excel.reader import FileParseError, read_lead_file
from ..logging.error_log import ErrorLogBuffer
from ..models.columns import DEFAULT_MAPPING, ColumnMapping
from ..models.error_record import (
    BATCH_INSERT_ERROR,
    FILE_LEVEL_ROW,
    FILE_PARSE_ERROR,
    ErrorRecord,
    RowError,
)
from ..models.import_result import ImportOutcome, ImportState
from ..models.lead import LeadStatus, NormalizedLead
from .ingest import submit_batch
from .mapper import CREATED_BY_FIELD, STATUS_FIELD, map_row
from .progress import RowProgressTracker
from .reporter import classify
from .validator import validate_row

"""Import pipeline for one uploaded file.

    read file -> map + validate each row (file order) -> submit accepted rows
    as one batch -> outcome

Row errors are collected, never raised. An unreadable file or a rejected batch
ends the run with status ALL_FAILURE and the verbatim reason in
``outcome.failure``. Not re-entrant: one run per call, no shared state.
"""

__all__ = [
    "run_import",
]

logger = logging.getLogger(__name__)

_SYSTEM_FIELDS = (CREATED_BY_FIELD, STATUS_FIELD)


class _StateTrail:
    """Records the state-machine path of one run."""

    def __init__(self) -> None:
        self.states: list[ImportState] = [ImportState.IDLE]

    @property
    def current(self) -> ImportState:
        return self.states[-1]

    def advance(self, state: ImportState) -> None:
        logger.debug(f"import state {self.current.value} -> {state.value}")
        self.states.append(state)


def run_import(
    path: Path,
    store: LeadStore,
    operator_id: str,
    *,
    mapping: ColumnMapping = DEFAULT_MAPPING,
    initial_status: str = LeadStatus.NEW_LEAD.value,
    null_sentinels: frozenset[str] | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ImportOutcome:
    """Import one lead file through ``store``.

    Args:
        path: Uploaded .xlsx/.xls/.csv file
        store: Persistence collaborator receiving the single batch
        operator_id: Identity written to ``created_by`` on every lead
        mapping: Template columns to import
        initial_status: Status written on every lead
        null_sentinels: Upper-cased cell texts treated as empty cells
        error_log: Buffer receiving one record per error; flushed before return

    Returns:
        ImportOutcome (never raises for row, file or batch failures)
    """
    start_time = datetime.now(UTC)
    trail = _StateTrail()
    file_name = path.name
    error_log = error_log if error_log is not None else ErrorLogBuffer(source=file_name)

    def finish(
        success_count: int,
        errors: list[RowError],
        total_rows: int,
        *,
        empty_input: bool = False,
        failure: str | None = None,
    ) -> ImportOutcome:
        trail.advance(ImportState.REPORTING)
        try:
            log_path = error_log.flush()
            if log_path is not None:
                counts = " ".join(f"{k}={v}" for k, v in sorted(error_log.counts_by_type().items()))
                logger.info(f"error log written: {log_path} ({counts})")
        except OSError as e:
            logger.warning(f"could not write error log: {e}")
        elapsed = (datetime.now(UTC) - start_time).total_seconds()
        return ImportOutcome(
            file_name=file_name,
            status=classify(success_count, errors, empty_input=empty_input, failed=failure is not None),
            success_count=success_count,
            errors=tuple(errors),
            total_rows=total_rows,
            failure=failure,
            states=tuple(trail.states),
            elapsed_seconds=elapsed,
        )

    trail.advance(ImportState.READING_FILE)
    try:
        sheet = read_lead_file(path, null_sentinels=null_sentinels)
    except FileParseError as e:
        logger.error(f"file: {e}")
        error_log.append(ErrorRecord.create(file_name, FILE_LEVEL_ROW, "", FILE_PARSE_ERROR, str(e)))
        return finish(0, [], 0, failure=str(e))

    if not sheet.rows:
        logger.warning(f"empty file: no data rows in {file_name}")
        return finish(0, [], 0, empty_input=True)

    unknown = [c for c in sheet.columns if c not in mapping.pairs]
    if unknown:
        logger.debug(f"ignoring columns not in template: {unknown}")

    trail.advance(ImportState.VALIDATING_ROWS)
    accepted: list[NormalizedLead] = []
    errors: list[RowError] = []
    with RowProgressTracker(len(sheet.rows)) as progress:
        for raw in sheet.rows:
            mapped = map_row(raw.values, operator_id, mapping, initial_status)
            result = validate_row(mapped, raw.row_number)
            if result.accepted:
                accepted.append(
                    NormalizedLead(
                        row_number=raw.row_number,
                        fields={k: v for k, v in mapped.items() if k not in _SYSTEM_FIELDS},
                        created_by=mapped[CREATED_BY_FIELD],
                        status=mapped[STATUS_FIELD],
                    )
                )
            else:
                errors.extend(result.errors)
                for err in result.errors:
                    error_log.append(ErrorRecord.from_row_error(file_name, err))
            progress.advance()
            progress.set_postfix(accepted=len(accepted), rejected=progress.current_row - len(accepted))

    logger.info(f"validated {len(sheet.rows)} rows: accepted={len(accepted)} errors={len(errors)}")

    if not accepted:
        return finish(0, errors, len(sheet.rows))

    trail.advance(ImportState.SUBMITTING_BATCH)
    try:
        success_count = submit_batch(store, accepted)
    except BatchInsertError as e:
        reason = str(e)
        logger.error(f"batch insert failed: {reason}")
        error_log.append(ErrorRecord.create(file_name, FILE_LEVEL_ROW, "", BATCH_INSERT_ERROR, reason))
        return finish(0, errors, len(sheet.rows), failure=reason)

    return finish(success_count, errors, len(sheet.rows))
