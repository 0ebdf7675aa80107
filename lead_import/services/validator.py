from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ..models.columns import TemplateColumn
from ..models.error_record import CONTACT_TOO_SHORT, REQUIRED_FIELD, RowError

"""Row validator.

Rules, applied independently so one row can collect several errors:
1. Student Name is required
2. Primary Contact Number is required
3. Primary Contact Number must be at least 10 characters long. Only the text
   length is checked: "98-76-54-32-10" passes.

A row is accepted iff it has no errors. Rows are judged in isolation (no
duplicate detection) and validation never raises.
"""

__all__ = [
    "RowValidation",
    "validate_row",
    "MIN_CONTACT_LENGTH",
    "REQUIRED_MESSAGE",
    "CONTACT_LENGTH_MESSAGE",
]

MIN_CONTACT_LENGTH = 10
REQUIRED_MESSAGE = "Required field"
CONTACT_LENGTH_MESSAGE = "Must be at least 10 digits"

_NAME = TemplateColumn.STUDENT_NAME
_CONTACT = TemplateColumn.PRIMARY_CONTACT_NUMBER


@dataclass(frozen=True)
class RowValidation:
    row_number: int
    errors: tuple[RowError, ...]

    @property
    def accepted(self) -> bool:
        return not self.errors


def validate_row(mapped: Mapping[str, str], row_number: int) -> RowValidation:
    errors: list[RowError] = []

    if not mapped.get(_NAME.field):
        errors.append(RowError(row_number, _NAME.label, REQUIRED_MESSAGE, REQUIRED_FIELD))

    contact = mapped.get(_CONTACT.field)
    if not contact:
        errors.append(RowError(row_number, _CONTACT.label, REQUIRED_MESSAGE, REQUIRED_FIELD))
    elif len(contact) < MIN_CONTACT_LENGTH:
        errors.append(RowError(row_number, _CONTACT.label, CONTACT_LENGTH_MESSAGE, CONTACT_TOO_SHORT))

    return RowValidation(row_number=row_number, errors=tuple(errors))
