from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..core.constants import FLOATER_JOB_TITLE, FLOATER_LABEL_SUFFIX, UNKNOWN_SUBJECT_NAME
from ..core.enums import ReportLineKind, ShiftCode
from ..roster.model import Employee, Subject
from ..schedules.model import MonthScope, ScheduleAssignment
from ..substitutions.model import Substitution
from .model import FloaterSummary, ReportLine, ReportSummary, ReportTotals


def _empty_breakdown() -> Dict[ShiftCode, int]:
    return {code: 0 for code in ShiftCode}


class MonthlyReportGenerator:
    """Aggregates assignments and substitution overlays into report rows.

    Per subject:
        total_shifts       = number of non-empty days
        substituted_days   = number of days covered by a substitute
        actual_days_worked = total_shifts - rest days - substituted_days

    Substitutions are only accepted on working days, so a rest day is never
    subtracted twice.
    """

    def generate(
        self,
        scope: MonthScope,
        roster: Sequence[Subject],
        assignments: Mapping[str, ScheduleAssignment],
        substitutions: Iterable[Substitution],
    ) -> Tuple[List[ReportLine], List[FloaterSummary]]:
        last_day = scope.days_in_month
        in_scope = sorted(
            (s for s in substitutions if s.key.scope == scope and 1 <= s.day <= last_day),
            key=lambda s: (s.day, s.created_at),
        )

        substituted: Dict[str, set] = {}
        for s in in_scope:
            substituted.setdefault(s.key.subject_id, set()).add(s.day)

        employee_lines: List[ReportLine] = []
        placeholder_lines: List[ReportLine] = []
        for subject in roster:
            line = self._line_for(subject, assignments.get(subject.subject_id), substituted.get(subject.subject_id, set()), last_day)
            if line.kind == ReportLineKind.EMPLOYEE:
                employee_lines.append(line)
            else:
                placeholder_lines.append(line)

        # sorted() is stable, so equal totals keep roster order.
        employee_lines = sorted(employee_lines, key=lambda ln: ln.actual_days_worked, reverse=True)

        floaters = self._floaters(in_scope, roster)
        floater_lines = [self._floater_line(f) for f in floaters]

        return employee_lines + placeholder_lines + floater_lines, floaters

    def _line_for(self, subject: Subject, assignment, substituted_days: set, last_day: int) -> ReportLine:
        breakdown = _empty_breakdown()
        if assignment is not None:
            for _, code in assignment.iter_filled(last_day):
                breakdown[code] += 1

        total = sum(breakdown.values())
        subs = len(substituted_days)
        is_employee = isinstance(subject, Employee)
        return ReportLine(
            subject_id=subject.subject_id,
            name=subject.display_name,
            job_title=subject.job_title,
            registry=subject.registry_or_tax_id if is_employee else None,
            kind=ReportLineKind.EMPLOYEE if is_employee else ReportLineKind.PLACEHOLDER,
            shift_breakdown=breakdown,
            total_shifts=total,
            substituted_days=subs,
            actual_days_worked=total - breakdown[ShiftCode.REST_DAY] - subs,
        )

    def _floaters(self, substitutions: Sequence[Substitution], roster: Sequence[Subject]) -> List[FloaterSummary]:
        names = {s.subject_id: s.display_name for s in roster}
        grouped: Dict[str, dict] = {}
        for s in substitutions:
            g = grouped.setdefault(s.substitute_name, {"count": 0, "subjects": [], "reasons": [], "days": []})
            g["count"] += 1
            covered = names.get(s.key.subject_id, UNKNOWN_SUBJECT_NAME)
            if covered not in g["subjects"]:
                g["subjects"].append(covered)
            if s.reason not in g["reasons"]:
                g["reasons"].append(s.reason)
            g["days"].append(s.day)

        summaries = [
            FloaterSummary(
                substitute_name=name,
                count=g["count"],
                subjects_covered=tuple(g["subjects"]),
                reasons=tuple(g["reasons"]),
                days=tuple(g["days"]),
            )
            for name, g in grouped.items()
        ]
        summaries.sort(key=lambda f: (-f.count, f.substitute_name.casefold()))
        return summaries

    @staticmethod
    def _floater_line(f: FloaterSummary) -> ReportLine:
        return ReportLine(
            subject_id=f"floater:{f.substitute_name}",
            name=f"{f.substitute_name} {FLOATER_LABEL_SUFFIX}",
            job_title=FLOATER_JOB_TITLE,
            registry=None,
            kind=ReportLineKind.FLOATER,
            shift_breakdown=_empty_breakdown(),
            total_shifts=f.count,
            substituted_days=0,
            actual_days_worked=f.count,
        )

    @staticmethod
    def totals(lines: Sequence[ReportLine]) -> ReportTotals:
        breakdown = _empty_breakdown()
        for ln in lines:
            for code, n in ln.shift_breakdown.items():
                breakdown[code] += n
        return ReportTotals(
            shift_breakdown=breakdown,
            total_shifts=sum(ln.total_shifts for ln in lines),
            substituted_days=sum(ln.substituted_days for ln in lines),
            actual_days_worked=sum(ln.actual_days_worked for ln in lines),
        )

    @staticmethod
    def summarize(scope: MonthScope, lines: Sequence[ReportLine], floaters: Sequence[FloaterSummary]) -> ReportSummary:
        return ReportSummary(
            roster_size=sum(1 for ln in lines if ln.kind != ReportLineKind.FLOATER),
            total_days_worked=sum(ln.actual_days_worked for ln in lines),
            days_in_month=scope.days_in_month,
            total_substitutions=sum(f.count for f in floaters),
            distinct_floaters=len(floaters),
        )
