from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..core.enums import ScheduleCategory
from ..roster.model import RosterView
from ..schedules.model import MonthScope, ScheduleKey
from .model import Substitution

_SlotKey = Tuple[ScheduleKey, int]


@dataclass
class PlanningSession:
    """State of one editing session.

    Holds the roster view and the substitutions recorded against
    placeholders, which are never written to the durable store. A host keeps
    it between requests through ``to_dict``/``from_dict``.
    """

    view: RosterView = field(default_factory=RosterView)
    placeholder_substitutions: Dict[_SlotKey, Substitution] = field(default_factory=dict)

    def get_substitution(self, key: ScheduleKey, day: int) -> Optional[Substitution]:
        return self.placeholder_substitutions.get((key, int(day)))

    def put_substitution(self, substitution: Substitution) -> None:
        self.placeholder_substitutions[(substitution.key, int(substitution.day))] = substitution

    def remove_substitution(self, key: ScheduleKey, day: int) -> bool:
        return self.placeholder_substitutions.pop((key, int(day)), None) is not None

    def substitutions_for(self, scope: MonthScope) -> List[Substitution]:
        out = [s for s in self.placeholder_substitutions.values() if s.key.scope == scope]
        out.sort(key=lambda s: (s.day, s.created_at))
        return out

    def drop_subject(self, subject_id: str) -> int:
        doomed = [k for k in self.placeholder_substitutions if k[0].subject_id == subject_id]
        for k in doomed:
            del self.placeholder_substitutions[k]
        return len(doomed)

    def clear_scope(self, scope: MonthScope) -> int:
        doomed = [k for k in self.placeholder_substitutions if k[0].scope == scope]
        for k in doomed:
            del self.placeholder_substitutions[k]
        return len(doomed)

    def to_dict(self) -> dict:
        return {
            "view": self.view.to_dict(),
            "placeholder_substitutions": [
                {
                    "subject_id": s.key.subject_id,
                    "category": s.key.category.value,
                    "unit": s.key.unit,
                    "month": s.key.month,
                    "year": s.key.year,
                    "day": s.day,
                    "substitute_id": s.substitute_id,
                    "substitute_name": s.substitute_name,
                    "reason": s.reason,
                    "created_at": s.created_at.isoformat(),
                }
                for s in self.placeholder_substitutions.values()
            ],
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PlanningSession":
        data = data or {}
        session = cls(view=RosterView.from_dict(data.get("view") or {}))
        for raw in data.get("placeholder_substitutions") or ():
            key = ScheduleKey(
                subject_id=str(raw["subject_id"]),
                category=ScheduleCategory(raw["category"]),
                unit=str(raw["unit"]),
                month=int(raw["month"]),
                year=int(raw["year"]),
            )
            session.put_substitution(
                Substitution(
                    key=key,
                    day=int(raw["day"]),
                    substitute_id=raw.get("substitute_id"),
                    substitute_name=str(raw["substitute_name"]),
                    reason=str(raw["reason"]),
                    created_at=datetime.fromisoformat(raw["created_at"]),
                )
            )
        return session
