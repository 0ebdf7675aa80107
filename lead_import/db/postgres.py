from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..models.config_models import DatabaseConfig
from ..models.permissions import MODE_ALL, MODE_SELECTED, PermissionSettings
from .batch_insert import BatchMetrics, batch_insert
from .store import BatchInsertError

"""PostgreSQL lead store.

The batch is inserted inside one transaction: commit on success, rollback and
BatchInsertError on any failure, so either every row is stored or none is.
"""

__all__ = [
    "PostgresLeadStore",
    "resolve_dsn",
    "connect",
]

logger = logging.getLogger(__name__)

_SETTING_KEYS = ("leads_module_enabled", "leads_permission_mode")


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Connection string, environment first.

    1. DATABASE_URL / PGDSN, then ``dsn`` from config
    2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling back to
       the matching config value, then to libpq defaults
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def connect(db_cfg: DatabaseConfig) -> Iterator[Any]:
    """Yield a psycopg2 connection (autocommit off), closed on exit."""
    conn = psycopg2.connect(resolve_dsn(db_cfg))
    conn.autocommit = False
    try:
        yield conn
    finally:
        conn.close()


class PostgresLeadStore:
    def __init__(self, conn: Any, table: str = "leads", page_size: int = 1000) -> None:
        self.conn = conn
        self.table = table
        self.page_size = page_size

    def _log_metrics(self, metrics: BatchMetrics) -> None:
        logger.debug(
            f"batch insert table={self.table} rows={metrics.batch_size} "
            f"elapsed={metrics.elapsed_seconds:.3f}s"
        )

    def insert_batch(self, records: Sequence[dict[str, Any]]) -> None:
        if not records:
            return
        try:
            with self.conn.cursor() as cur:
                result = batch_insert(
                    cur,
                    self.table,
                    records,
                    page_size=self.page_size,
                    metrics_callback=self._log_metrics,
                )
            self.conn.commit()
            logger.debug(
                f"committed {result.inserted_rows} rows into {self.table} columns={list(result.columns)}"
            )
        except BatchInsertError:
            self.conn.rollback()
            raise
        except psycopg2.Error as e:
            self.conn.rollback()
            raise BatchInsertError(str(e).strip()) from e

    def fetch_role(self, user_id: str) -> str | None:
        with self.conn.cursor() as cur:
            cur.execute("SELECT role FROM user_roles WHERE user_id = %s LIMIT 1", (user_id,))
            row = cur.fetchone()
        self.conn.rollback()
        return str(row[0]) if row is not None else None

    def fetch_permission_settings(self, user_id: str, role: str | None) -> PermissionSettings:
        with self.conn.cursor() as cur:
            cur.execute(
                "SELECT setting_key, setting_value FROM app_settings WHERE setting_key IN %s",
                (_SETTING_KEYS,),
            )
            settings = dict(cur.fetchall())
            enabled = settings.get("leads_module_enabled") is True
            mode = settings.get("leads_permission_mode") or MODE_ALL

            teacher_enabled: bool | None = None
            if role == "teacher" and enabled and mode == MODE_SELECTED:
                cur.execute("SELECT id FROM teachers WHERE user_id = %s LIMIT 1", (user_id,))
                teacher = cur.fetchone()
                if teacher is not None:
                    cur.execute(
                        "SELECT enabled FROM teacher_lead_permissions WHERE teacher_id = %s LIMIT 1",
                        (teacher[0],),
                    )
                    perm = cur.fetchone()
                    teacher_enabled = bool(perm[0]) if perm is not None else False
        # read-only queries: end the implicit transaction
        self.conn.rollback()
        return PermissionSettings(module_enabled=enabled, permission_mode=mode, teacher_enabled=teacher_enabled)
