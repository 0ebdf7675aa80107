from __future__ import annotations

import pytest

from lead_import.models.permissions import PermissionSettings
from lead_import.services.permissions import PermissionDeniedError, require_access, resolve_lead_permissions


def test_admin_always_has_access():
    perms = resolve_lead_permissions("admin", PermissionSettings(module_enabled=False))
    assert perms.is_admin
    assert perms.has_access


def test_teacher_denied_when_module_disabled():
    perms = resolve_lead_permissions("teacher", PermissionSettings(module_enabled=False))
    assert not perms.has_access


def test_teacher_allowed_in_all_mode():
    perms = resolve_lead_permissions("teacher", PermissionSettings(module_enabled=True, permission_mode="all"))
    assert perms.teacher_enabled
    assert perms.has_access


@pytest.mark.parametrize(
    "teacher_enabled, expected",
    [(True, True), (False, False), (None, False)],
)
def test_teacher_selected_mode_uses_own_flag(teacher_enabled, expected):
    settings = PermissionSettings(module_enabled=True, permission_mode="selected", teacher_enabled=teacher_enabled)
    assert resolve_lead_permissions("teacher", settings).has_access is expected


def test_parent_never_has_access():
    settings = PermissionSettings(module_enabled=True, permission_mode="all", teacher_enabled=True)
    assert not resolve_lead_permissions("parent", settings).has_access


def test_unknown_mode_denies_teacher():
    perms = resolve_lead_permissions("teacher", PermissionSettings(module_enabled=True, permission_mode="weird"))
    assert perms.permission_mode == "weird"
    assert not perms.teacher_enabled
    assert not perms.has_access


def test_unknown_mode_still_allows_admin():
    assert resolve_lead_permissions("admin", PermissionSettings(module_enabled=True, permission_mode="weird")).has_access


def test_require_access_raises_for_denied_role():
    with pytest.raises(PermissionDeniedError, match="role=parent"):
        require_access("parent", PermissionSettings(module_enabled=True))


def test_require_access_returns_permissions():
    assert require_access("admin", PermissionSettings()).is_admin
