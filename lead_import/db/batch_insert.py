from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

from .store import BatchInsertError

"""Batch INSERT with psycopg2.extras.execute_values.

Lead records are sparse (only the columns that had a value in the file). The
statement uses the union of record keys in first-seen order; a record without
one of those keys inserts NULL there. Transaction boundaries belong to the
caller.
"""

__all__ = [
    "BatchMetrics",
    "InsertResult",
    "batch_insert",
    "collect_columns",
]


@dataclass(frozen=True)
class BatchMetrics:
    """Timing of a single batch insert."""
    batch_size: int  # Number of rows in this batch
    elapsed_seconds: float  # Time spent on execute_values call
    start_time: float  # Start timestamp (time.time())
    end_time: float  # End timestamp (time.time())


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int
    columns: tuple[str, ...] = ()


def collect_columns(records: Sequence[dict[str, Any]]) -> list[str]:
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def batch_insert(
    cursor: Any,
    table: str,
    records: Sequence[dict[str, Any]],
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """INSERT all records into ``table``.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: target table (validated identifier from config)
    records: list of ``{column: value}`` dicts
    page_size: execute_values page size
    metrics_callback: receives BatchMetrics after the statement ran. Not
        called when ``records`` is empty (nothing is executed).
    """
    if not records:
        return InsertResult(inserted_rows=0)

    columns = collect_columns(records)
    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f'INSERT INTO "{table}" ({cols_sql}) VALUES %s'
    rows = [tuple(record.get(c) for c in columns) for record in records]

    start_time = time.time()
    try:
        execute_values(cursor, sql, rows, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(str(e).strip()) from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    batch_size=len(rows),
                    elapsed_seconds=end_time - start_time,
                    start_time=start_time,
                    end_time=end_time,
                )
            )

    return InsertResult(inserted_rows=len(rows), columns=tuple(columns))
