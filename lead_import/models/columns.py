from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

"""Template columns and the external -> internal column mapping.

The lead import template has a fixed set of header labels. Each label maps to
one column of the ``leads`` table. The mapping is built from the
``TemplateColumn`` enum, so a label that is not part of the template can never
reach the mapper: ``ColumnMapping`` rejects it at construction.
"""

__all__ = [
    "TemplateColumn",
    "ColumnMapping",
    "UnknownColumnError",
    "TEMPLATE_EXAMPLE_ROW",
    "DEFAULT_MAPPING",
]


class UnknownColumnError(ValueError):
    """Raised when a mapping is built from a label outside the template."""


class TemplateColumn(Enum):
    """Header labels of the lead import template, in template order.

    The enum value is the label shown in the spreadsheet; ``field`` is the
    ``leads`` column it is stored under.
    """
    STUDENT_NAME = "Student Name"
    GENDER = "Gender"
    DATE_OF_BIRTH = "Date of Birth"
    CURRENT_CLASS = "Current Class"
    CLASS_APPLYING_FOR = "Class Applying For"
    ACADEMIC_YEAR = "Academic Year"
    FATHER_NAME = "Father Name"
    MOTHER_NAME = "Mother Name"
    PRIMARY_CONTACT_PERSON = "Primary Contact Person"
    PRIMARY_CONTACT_NUMBER = "Primary Contact Number"
    ALTERNATE_CONTACT_NUMBER = "Alternate Contact Number"
    EMAIL = "Email"
    ADDRESS = "Address"
    AREA_CITY = "Area/City"
    FATHER_EDUCATION = "Father Education"
    MOTHER_EDUCATION = "Mother Education"
    FATHER_OCCUPATION = "Father Occupation"
    MOTHER_OCCUPATION = "Mother Occupation"
    ANNUAL_INCOME_RANGE = "Annual Income Range"
    PREVIOUS_SCHOOL = "Previous School"
    BOARD = "Board"
    MEDIUM_OF_INSTRUCTION = "Medium of Instruction"
    LAST_CLASS_PASSED = "Last Class Passed"
    ACADEMIC_PERFORMANCE = "Academic Performance"
    REMARKS = "Remarks"

    @property
    def label(self) -> str:
        return self.value

    @property
    def field(self) -> str:
        return _FIELDS[self]

    @classmethod
    def from_label(cls, label: str) -> TemplateColumn:
        try:
            return cls(label)
        except ValueError:
            raise UnknownColumnError(f"not a template column: {label!r}") from None


# leads column for each template label.
_FIELDS: dict[TemplateColumn, str] = {
    TemplateColumn.STUDENT_NAME: "student_name",
    TemplateColumn.GENDER: "gender",
    TemplateColumn.DATE_OF_BIRTH: "date_of_birth",
    TemplateColumn.CURRENT_CLASS: "current_class",
    TemplateColumn.CLASS_APPLYING_FOR: "class_applying_for",
    TemplateColumn.ACADEMIC_YEAR: "academic_year",
    TemplateColumn.FATHER_NAME: "father_name",
    TemplateColumn.MOTHER_NAME: "mother_name",
    TemplateColumn.PRIMARY_CONTACT_PERSON: "primary_contact_person",
    TemplateColumn.PRIMARY_CONTACT_NUMBER: "primary_mobile",
    TemplateColumn.ALTERNATE_CONTACT_NUMBER: "alternate_mobile",
    TemplateColumn.EMAIL: "email",
    TemplateColumn.ADDRESS: "address",
    TemplateColumn.AREA_CITY: "area_city",
    TemplateColumn.FATHER_EDUCATION: "father_education",
    TemplateColumn.MOTHER_EDUCATION: "mother_education",
    TemplateColumn.FATHER_OCCUPATION: "father_occupation",
    TemplateColumn.MOTHER_OCCUPATION: "mother_occupation",
    TemplateColumn.ANNUAL_INCOME_RANGE: "annual_income_range",
    TemplateColumn.PREVIOUS_SCHOOL: "previous_school",
    TemplateColumn.BOARD: "education_board",
    TemplateColumn.MEDIUM_OF_INSTRUCTION: "medium_of_instruction",
    TemplateColumn.LAST_CLASS_PASSED: "last_class_passed",
    TemplateColumn.ACADEMIC_PERFORMANCE: "academic_performance",
    TemplateColumn.REMARKS: "remarks",
}


# Example row written under the header of the downloadable template.
TEMPLATE_EXAMPLE_ROW: tuple[str, ...] = (
    "John Doe", "Male", "2015-03-15", "Class 5", "Class 6", "2026-2027",
    "Robert Doe", "Jane Doe", "father", "9876543210", "9876543211",
    "john@example.com", "123 Main St", "New Delhi",
    "Graduate", "Post Graduate", "Engineer", "Teacher",
    "₹5,00,000 - ₹10,00,000", "ABC School", "CBSE", "English",
    "Class 5", "Good", "Sample remarks",
)


@dataclass(frozen=True)
class ColumnMapping:
    """Immutable external label -> internal field mapping.

    Build it with ``ColumnMapping.from_labels`` when only part of the template
    should be imported; ``DEFAULT_MAPPING`` covers every template column.
    """
    columns: tuple[TemplateColumn, ...]

    def __post_init__(self) -> None:
        for col in self.columns:
            if not isinstance(col, TemplateColumn):
                raise UnknownColumnError(f"not a template column: {col!r}")

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> ColumnMapping:
        return cls(tuple(TemplateColumn.from_label(label) for label in labels))

    @property
    def pairs(self) -> Mapping[str, str]:
        """Read-only ``{label: field}`` view in template order."""
        return MappingProxyType({c.label: c.field for c in self.columns})

    @property
    def labels(self) -> list[str]:
        return [c.label for c in self.columns]


DEFAULT_MAPPING = ColumnMapping(tuple(TemplateColumn))
