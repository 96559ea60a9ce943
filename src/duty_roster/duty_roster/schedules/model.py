from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from ..common.datetime_utils import days_in_month
from ..common.validators import require_month
from ..core.constants import MAX_DAYS_IN_MONTH, MONTH_NAMES
from ..core.enums import ScheduleCategory, ShiftCode
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class MonthScope:
    """One grid: a category of one unit for one month."""

    category: ScheduleCategory
    unit: str
    month: int
    year: int

    def __post_init__(self) -> None:
        require_month(self.month)
        if not (self.unit or "").strip():
            raise ValidationError("Unidade não pode ficar em branco")

    @property
    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month)

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    def key_for(self, subject_id: str) -> "ScheduleKey":
        return ScheduleKey(
            subject_id=str(subject_id),
            category=self.category,
            unit=self.unit,
            month=self.month,
            year=self.year,
        )


@dataclass(frozen=True)
class ScheduleKey:
    subject_id: str
    category: ScheduleCategory
    unit: str
    month: int
    year: int

    @property
    def scope(self) -> MonthScope:
        return MonthScope(category=self.category, unit=self.unit, month=self.month, year=self.year)


@dataclass(frozen=True)
class CellWrite:
    day: int
    code: Optional[ShiftCode]


@dataclass
class ScheduleAssignment:
    """Day-by-day codes of one subject in one month (days 1..31)."""

    key: ScheduleKey
    days: Dict[int, Optional[ShiftCode]] = field(default_factory=dict)

    def code_on(self, day: int) -> Optional[ShiftCode]:
        return self.days.get(int(day))

    def apply(self, cell: CellWrite) -> None:
        if not 1 <= cell.day <= MAX_DAYS_IN_MONTH:
            raise ValidationError(f"Dia inválido: {cell.day}")
        self.days[cell.day] = cell.code

    def iter_filled(self, last_day: int) -> Iterator[tuple[int, ShiftCode]]:
        for day in range(1, int(last_day) + 1):
            code = self.days.get(day)
            if code is not None:
                yield day, code
