from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Lead row models.

RawRow is one spreadsheet row as read from the file. NormalizedLead is the
record built from it by the column mapper once the row has passed validation.
"""

__all__ = [
    "LeadStatus",
    "RawRow",
    "NormalizedLead",
    "status_label",
]


class LeadStatus(Enum):
    """Lifecycle status of an admission lead.

    Imported leads always start as NEW_LEAD; the remaining states are set by
    the admissions team afterwards.
    """
    NEW_LEAD = "new_lead"
    CONTACTED = "contacted"
    INTERESTED = "interested"
    FOLLOW_UP_REQUIRED = "follow_up_required"
    WAITING = "waiting"
    IN_PROCESS = "in_process"
    CONVERTED = "converted"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    LeadStatus.NEW_LEAD: "New Lead",
    LeadStatus.CONTACTED: "Contacted",
    LeadStatus.INTERESTED: "Interested",
    LeadStatus.FOLLOW_UP_REQUIRED: "Follow-up Required",
    LeadStatus.WAITING: "Waiting / On Hold",
    LeadStatus.IN_PROCESS: "In Process",
    LeadStatus.CONVERTED: "Converted",
    LeadStatus.REJECTED: "Rejected / Not Interested",
}


def status_label(status: str) -> str:
    """Operator-facing label for a stored status value (raw value if unknown)."""
    try:
        return LeadStatus(status).label
    except ValueError:
        return status


@dataclass(frozen=True)
class RawRow:
    """One data row of the uploaded file.

    row_number is the display row number: the header is row 1, so the first
    data row is row 2.
    """
    row_number: int
    values: dict[str, Any]


@dataclass(frozen=True)
class NormalizedLead:
    """Lead record ready for insertion.

    ``fields`` only holds the columns that had a value in the file; unset
    columns are left to the database.
    """
    row_number: int
    fields: dict[str, str]
    created_by: str
    status: str = LeadStatus.NEW_LEAD.value

    def as_record(self) -> dict[str, Any]:
        record: dict[str, Any] = dict(self.fields)
        record["created_by"] = self.created_by
        record["status"] = self.status
        return record
