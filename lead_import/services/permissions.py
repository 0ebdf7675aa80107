from __future__ import annotations

from dataclasses import dataclass

from ..models.permissions import MODE_ALL, MODE_SELECTED, PermissionSettings

"""Lead module access gate.

Admins always have access. Teachers need the leads module enabled and either
the "all" permission mode or their own teacher_lead_permissions flag in
"selected" mode; an unrecognised mode denies them. Every other role, or a
user without a role, is denied.
"""

__all__ = [
    "LeadPermissions",
    "PermissionDeniedError",
    "resolve_lead_permissions",
    "require_access",
    "ROLES",
]

ROLES = ("admin", "teacher", "parent")


class PermissionDeniedError(Exception):
    pass


@dataclass(frozen=True)
class LeadPermissions:
    is_admin: bool
    module_enabled: bool
    permission_mode: str
    teacher_enabled: bool

    @property
    def has_access(self) -> bool:
        return self.is_admin or (self.module_enabled and self.teacher_enabled)


def resolve_lead_permissions(role: str | None, settings: PermissionSettings) -> LeadPermissions:
    mode = settings.permission_mode
    teacher_enabled = False
    if role == "teacher" and settings.module_enabled:
        if mode == MODE_ALL:
            teacher_enabled = True
        elif mode == MODE_SELECTED:
            teacher_enabled = bool(settings.teacher_enabled)
    return LeadPermissions(
        is_admin=role == "admin",
        module_enabled=settings.module_enabled,
        permission_mode=mode,
        teacher_enabled=teacher_enabled,
    )


def require_access(role: str | None, settings: PermissionSettings) -> LeadPermissions:
    """Resolve permissions, raising PermissionDeniedError when access is denied."""
    perms = resolve_lead_permissions(role, settings)
    if not perms.has_access:
        raise PermissionDeniedError(
            f"role={role} has no access to leads "
            f"(module_enabled={perms.module_enabled} mode={perms.permission_mode})"
        )
    return perms
