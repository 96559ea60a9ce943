from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..common.validators import require_confirmation, require_day
from ..core.enums import ShiftCode
from ..core.exceptions import CapabilityUnavailable
from ..roster.model import PlaceholderPosition, Subject
from ..rotation.engine import RotationEngine
from ..substitutions.model import Substitution
from ..substitutions.session_store import PlanningSession
from .model import CellWrite, MonthScope, ScheduleAssignment
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleGrid:
    """Read-model of one month grid, ready for a host to render."""

    scope: MonthScope
    subjects: Tuple[Subject, ...] = ()
    assignments: Dict[str, ScheduleAssignment] = field(default_factory=dict)
    substitutions: Dict[Tuple[str, int], Substitution] = field(default_factory=dict)
    available: bool = True

    def code_on(self, subject_id: str, day: int) -> Optional[ShiftCode]:
        a = self.assignments.get(subject_id)
        return a.code_on(day) if a else None

    def to_dict(self) -> dict:
        rows = []
        for s in self.subjects:
            days = {}
            for day in range(1, self.scope.days_in_month + 1):
                code = self.code_on(s.subject_id, day)
                sub = self.substitutions.get((s.subject_id, day))
                days[str(day)] = {
                    "code": code.value if code else None,
                    "substitute_name": sub.substitute_name if sub else None,
                    "reason": sub.reason if sub else None,
                }
            rows.append(
                {
                    "subject_id": s.subject_id,
                    "kind": s.kind.value,
                    "name": s.display_name,
                    "job_title": s.job_title,
                    "days": days,
                }
            )
        return {
            "category": self.scope.category.value,
            "unit": self.scope.unit,
            "month": self.scope.month,
            "year": self.scope.year,
            "days_in_month": self.scope.days_in_month,
            "available": self.available,
            "rows": rows,
        }


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, *, engine: Optional[RotationEngine] = None):
        self._schedules = schedules
        self._engine = engine or RotationEngine()

    def edit_cell(
        self,
        session: PlanningSession,
        scope: MonthScope,
        subject: Subject,
        *,
        day: int,
        code: Optional[ShiftCode],
    ) -> List[CellWrite]:
        """Set one day and everything its rotation fills in.

        The batch is written atomically; on failure nothing is applied and
        the PersistenceError lists the attempted cells.
        """

        day = require_day(day, scope.days_in_month)
        writes = self._engine.apply_shift(subject.subject_id, day, code, scope.days_in_month)
        key = scope.key_for(subject.subject_id)

        self._schedules.write_cells(key=key, cells=writes, subject_kind=subject.kind)

        if isinstance(subject, PlaceholderPosition):
            for w in writes:
                if w.code is None:
                    session.remove_substitution(key, w.day)

        logger.info(
            "Wrote %d cell(s) for %s (%s %s, %s)",
            len(writes),
            subject.subject_id,
            scope.category.value,
            scope.unit,
            scope.label,
        )
        return writes

    def load_assignments(self, scope: MonthScope) -> Dict[str, ScheduleAssignment]:
        return {a.key.subject_id: a for a in self._schedules.list_assignments(scope=scope)}

    def load_grid(self, session: PlanningSession, scope: MonthScope, subjects: Sequence[Subject]) -> ScheduleGrid:
        """Assemble the grid; a missing schedule table yields an unavailable grid."""

        try:
            assignments = self.load_assignments(scope)
            durable = list(self._schedules.list_substitutions(scope=scope))
        except CapabilityUnavailable:
            logger.warning("Schedule tables unavailable; returning empty grid for %s", scope)
            return ScheduleGrid(scope=scope, subjects=tuple(subjects), available=False)

        substitutions = {(s.key.subject_id, s.day): s for s in durable + session.substitutions_for(scope)}
        return ScheduleGrid(
            scope=scope,
            subjects=tuple(subjects),
            assignments=assignments,
            substitutions=substitutions,
        )

    def clear_month(self, session: PlanningSession, scope: MonthScope, *, confirm: bool = False) -> int:
        require_confirmation(confirm, "limpar escala do mês")

        removed = self._schedules.clear_month(scope=scope)
        session.clear_scope(scope)
        logger.info("Cleared %s %s %s (%d rows)", scope.category.value, scope.unit, scope.label, removed)
        return removed
