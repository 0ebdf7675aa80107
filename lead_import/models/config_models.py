from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the lead import tool.

Built by lead_import.config.loader from config/import.yml. Connection settings
here are fallbacks: environment variables take precedence.
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """PostgreSQL connection fallbacks (PG* / DATABASE_URL win)."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class SupabaseConfig:
    """Supabase project fallbacks (SUPABASE_URL / SUPABASE_KEY win)."""
    url: str | None = None
    key: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    backend: str = "postgres"  # postgres | supabase
    table: str = "leads"
    initial_status: str = "new_lead"
    null_sentinels: frozenset[str] = frozenset()  # upper-cased, treated as empty cells
    error_display_limit: int = 20
    database: DatabaseConfig = DatabaseConfig()
    supabase: SupabaseConfig = SupabaseConfig()
