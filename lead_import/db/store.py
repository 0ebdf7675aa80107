from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from ..models.permissions import PermissionSettings

"""Persistence collaborator contract.

The import pipeline only needs ``insert_batch``: the whole batch is stored or
the call raises BatchInsertError with the store's reason. Schema, uniqueness
and foreign keys are the store's business.
"""

__all__ = [
    "BatchInsertError",
    "LeadStore",
    "DryRunLeadStore",
]

logger = logging.getLogger(__name__)


class BatchInsertError(Exception):
    """The store rejected the batch. ``str(exc)`` is the verbatim reason."""


class LeadStore(Protocol):
    def insert_batch(self, records: Sequence[dict[str, Any]]) -> None:
        """Store every record atomically or raise BatchInsertError."""
        ...

    def fetch_role(self, user_id: str) -> str | None:
        """Role of ``user_id`` from user_roles, None when the user has no role."""
        ...

    def fetch_permission_settings(self, user_id: str, role: str | None) -> PermissionSettings:
        """Lead module settings for ``user_id``; teacher flag only for teachers."""
        ...


class DryRunLeadStore:
    """Accepts every batch without persisting it (mock mode).

    No database is reached, so the operator role is the one given at
    construction. Permission settings are empty: only admins pass the
    permission gate.
    """

    def __init__(self, role: str = "admin") -> None:
        self.role = role
        self.batches: list[list[dict[str, Any]]] = []

    def insert_batch(self, records: Sequence[dict[str, Any]]) -> None:
        logger.debug(f"dry-run: skipping insert of {len(records)} records")
        self.batches.append(list(records))

    def fetch_role(self, user_id: str) -> str | None:
        return self.role

    def fetch_permission_settings(self, user_id: str, role: str | None) -> PermissionSettings:
        return PermissionSettings()
