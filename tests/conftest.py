# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from lead_import.db.store import BatchInsertError
from lead_import.logging.init import reset_logging
from lead_import.models.permissions import PermissionSettings


@pytest.fixture(autouse=True)
def _clean_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return """backend: postgres
table: leads
initial_status: new_lead
error_display_limit: 20
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: school
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_lead_file(temp_workdir: Path) -> Callable[..., Path]:
    """Write ``rows`` (first row = header) to data/<name> as xlsx or csv."""

    def _make(name: str, rows: Sequence[Sequence[Any]]) -> Path:
        path = temp_workdir / "data" / name
        df = pd.DataFrame(list(rows))
        if path.suffix == ".csv":
            df.to_csv(path, header=False, index=False)
        else:
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name="Leads", header=False, index=False)
        return path

    return _make


class RecordingStore:
    """In-memory LeadStore double: records batches, optionally fails."""

    def __init__(
        self,
        fail_with: str | None = None,
        settings: PermissionSettings | None = None,
        role: str | None = "admin",
    ) -> None:
        self.batches: list[list[dict[str, Any]]] = []
        self.role = role
        self.fail_with = fail_with
        self.settings = settings or PermissionSettings()

    def insert_batch(self, records: Sequence[dict[str, Any]]) -> None:
        self.batches.append(list(records))
        if self.fail_with is not None:
            raise BatchInsertError(self.fail_with)

    def fetch_role(self, user_id: str) -> str | None:
        return self.role

    def fetch_permission_settings(self, user_id: str, role: str | None) -> PermissionSettings:
        return self.settings


@pytest.fixture()
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def failing_store() -> RecordingStore:
    return RecordingStore(fail_with='duplicate key value violates unique constraint "leads_pkey"')
