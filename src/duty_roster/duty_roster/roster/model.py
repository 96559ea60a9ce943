from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from ..core.enums import SubjectKind


@dataclass(frozen=True)
class Employee:
    """Domain entity: an active staff member, read-only to the scheduler."""

    employee_id: str
    name: str
    job_title: str
    registry_or_tax_id: Optional[str]
    unit: str
    active: bool = True

    @property
    def subject_id(self) -> str:
        return self.employee_id

    @property
    def kind(self) -> SubjectKind:
        return SubjectKind.EMPLOYEE

    @property
    def display_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class PlaceholderPosition:
    """Planning slot for an unstaffed role."""

    placeholder_id: str
    label: str
    job_title: str
    unit: str

    @property
    def subject_id(self) -> str:
        return self.placeholder_id

    @property
    def kind(self) -> SubjectKind:
        return SubjectKind.PLACEHOLDER

    @property
    def display_name(self) -> str:
        return self.label

    def to_dict(self) -> dict:
        return {
            "placeholder_id": self.placeholder_id,
            "label": self.label,
            "job_title": self.job_title,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlaceholderPosition":
        return cls(
            placeholder_id=str(data["placeholder_id"]),
            label=str(data["label"]),
            job_title=str(data["job_title"]),
            unit=str(data["unit"]),
        )


Subject = Union[Employee, PlaceholderPosition]


@dataclass(frozen=True)
class RosterView:
    """Which employees are shown on the grid, plus the session's placeholders.

    Selection only filters what is displayed and reported; it never touches
    stored assignments.
    """

    selected_employee_ids: Tuple[str, ...] = ()
    placeholders: Tuple[PlaceholderPosition, ...] = field(default_factory=tuple)

    def is_selected(self, employee_id: str) -> bool:
        return str(employee_id) in self.selected_employee_ids

    def find_placeholder(self, placeholder_id: str) -> Optional[PlaceholderPosition]:
        for p in self.placeholders:
            if p.placeholder_id == str(placeholder_id):
                return p
        return None

    def to_dict(self) -> dict:
        return {
            "selected_employee_ids": list(self.selected_employee_ids),
            "placeholders": [p.to_dict() for p in self.placeholders],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RosterView":
        return cls(
            selected_employee_ids=tuple(str(i) for i in data.get("selected_employee_ids") or ()),
            placeholders=tuple(PlaceholderPosition.from_dict(p) for p in data.get("placeholders") or ()),
        )


@dataclass(frozen=True)
class OnCallWorker:
    """Member of the on-call pool ("sobreaviso") that substitutes are picked from."""

    worker_id: str
    full_name: str
    job_title: str
    unit: str
    active: bool = True
