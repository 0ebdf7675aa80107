from __future__ import annotations

from dataclasses import dataclass

"""Lead module permission settings as stored in the database.

- app_settings.leads_module_enabled: bool
- app_settings.leads_permission_mode: "all" | "selected"
- teacher_lead_permissions.enabled: per-teacher flag, only read in "selected" mode
"""

__all__ = [
    "PermissionSettings",
    "MODE_ALL",
    "MODE_SELECTED",
]

MODE_ALL = "all"
MODE_SELECTED = "selected"


@dataclass(frozen=True)
class PermissionSettings:
    module_enabled: bool = False
    permission_mode: str = MODE_ALL
    teacher_enabled: bool | None = None  # None: user has no teacher record / not looked up
