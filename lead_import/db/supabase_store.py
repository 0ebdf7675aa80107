from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client, create_client

from ..models.config_models import SupabaseConfig
from ..models.permissions import MODE_ALL, MODE_SELECTED, PermissionSettings
from .store import BatchInsertError

"""Supabase lead store.

The batch goes out as a single PostgREST insert request; PostgREST runs it in
one transaction, so a single bad record fails the whole request.
"""

__all__ = [
    "SupabaseLeadStore",
    "create_supabase_client",
]

_SETTING_KEYS = ["leads_module_enabled", "leads_permission_mode"]


def create_supabase_client(cfg: SupabaseConfig) -> Client:
    """Client from SUPABASE_URL / SUPABASE_KEY, falling back to config."""
    url = os.getenv("SUPABASE_URL") or cfg.url
    key = os.getenv("SUPABASE_KEY") or cfg.key
    if not url or not key:
        raise ValueError(
            "Missing Supabase credentials. Set SUPABASE_URL and SUPABASE_KEY environment variables."
        )
    return create_client(url, key)


def _reason(exc: Exception) -> str:
    if isinstance(exc, APIError) and exc.message:
        return str(exc.message)
    return str(exc)


class SupabaseLeadStore:
    def __init__(self, client: Client, table: str = "leads") -> None:
        self.client = client
        self.table = table

    def insert_batch(self, records: Sequence[dict[str, Any]]) -> None:
        if not records:
            return
        try:
            self.client.table(self.table).insert(list(records)).execute()
        except Exception as e:
            raise BatchInsertError(_reason(e)) from e

    def fetch_role(self, user_id: str) -> str | None:
        result = self.client.table("user_roles").select("role").eq("user_id", user_id).limit(1).execute()
        return str(result.data[0]["role"]) if result.data else None

    def fetch_permission_settings(self, user_id: str, role: str | None) -> PermissionSettings:
        result = (
            self.client.table("app_settings")
            .select("setting_key, setting_value")
            .in_("setting_key", _SETTING_KEYS)
            .execute()
        )
        settings = {row["setting_key"]: row["setting_value"] for row in (result.data or [])}
        enabled = settings.get("leads_module_enabled") is True
        mode = settings.get("leads_permission_mode") or MODE_ALL

        teacher_enabled: bool | None = None
        if role == "teacher" and enabled and mode == MODE_SELECTED:
            teacher = self.client.table("teachers").select("id").eq("user_id", user_id).limit(1).execute()
            if teacher.data:
                perm = (
                    self.client.table("teacher_lead_permissions")
                    .select("enabled")
                    .eq("teacher_id", teacher.data[0]["id"])
                    .limit(1)
                    .execute()
                )
                teacher_enabled = bool(perm.data[0]["enabled"]) if perm.data else False
        return PermissionSettings(module_enabled=enabled, permission_mode=mode, teacher_enabled=teacher_enabled)
