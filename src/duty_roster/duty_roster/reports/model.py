from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Tuple

from ..core.enums import ReportLineKind, ShiftCode
from ..schedules.model import MonthScope


@dataclass(frozen=True)
class ReportLine:
    """Read-model: one row of the monthly report (derived, never stored)."""

    subject_id: str
    name: str
    job_title: str
    registry: Optional[str]
    kind: ReportLineKind
    shift_breakdown: Mapping[ShiftCode, int]
    total_shifts: int
    substituted_days: int
    actual_days_worked: int


@dataclass(frozen=True)
class FloaterSummary:
    substitute_name: str
    count: int
    subjects_covered: Tuple[str, ...]
    reasons: Tuple[str, ...]
    days: Tuple[int, ...] = ()


@dataclass(frozen=True)
class ReportSummary:
    roster_size: int
    total_days_worked: int
    days_in_month: int
    total_substitutions: int
    distinct_floaters: int


@dataclass(frozen=True)
class ReportTotals:
    shift_breakdown: Mapping[ShiftCode, int]
    total_shifts: int
    substituted_days: int
    actual_days_worked: int


@dataclass(frozen=True)
class MonthlyReport:
    institution: str
    scope: MonthScope
    generated_at: datetime
    lines: Tuple[ReportLine, ...]
    floaters: Tuple[FloaterSummary, ...]
    summary: ReportSummary
    totals: ReportTotals
