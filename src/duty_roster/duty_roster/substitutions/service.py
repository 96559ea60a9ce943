from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_confirmation, require_day
from ..core.constants import DEFAULT_SUBSTITUTION_REASON
from ..core.enums import ShiftCode
from ..core.exceptions import ValidationError
from ..roster.model import Employee, PlaceholderPosition, Subject
from ..roster.service import RosterService
from ..schedules.model import MonthScope
from ..schedules.repository import ScheduleRepository
from .model import Substitution
from .session_store import PlanningSession

logger = logging.getLogger(__name__)


class SubstitutionService:
    """Records who covers an assigned day without touching the assignment.

    Substitutions of employees are durable; substitutions of placeholders
    stay in the PlanningSession only.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        roster: Optional[RosterService] = None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._schedules = schedules
        self._roster = roster
        self._clock = clock

    def _resolve_name(self, scope: MonthScope, substitute_name: str, substitute_id: Optional[str]) -> str:
        name = (substitute_name or "").strip()
        if name:
            return name
        if substitute_id and self._roster is not None:
            worker = self._roster.find_on_call(substitute_id, scope.unit)
            if worker:
                return worker.full_name
            raise ValidationError("Substituto não encontrado no sobreaviso da unidade")
        raise ValidationError("Informe o nome do substituto")

    def set_substitution(
        self,
        session: PlanningSession,
        scope: MonthScope,
        subject: Subject,
        *,
        day: int,
        substitute_name: str = "",
        reason: str = "",
        substitute_id: Optional[str] = None,
    ) -> Substitution:
        day = require_day(day, scope.days_in_month)
        key = scope.key_for(subject.subject_id)

        assignment = self._schedules.get_assignment(key=key)
        if assignment is None or assignment.code_on(day) is None:
            raise ValidationError(f"Não há turno no dia {day} para substituir")
        if assignment.code_on(day) == ShiftCode.REST_DAY:
            raise ValidationError(f"Dia {day} é folga (DR); não há plantão para substituir")

        substitution = Substitution(
            key=key,
            day=day,
            substitute_id=(substitute_id or None),
            substitute_name=self._resolve_name(scope, substitute_name, substitute_id),
            reason=(reason or "").strip() or DEFAULT_SUBSTITUTION_REASON,
            created_at=self._clock(),
        )

        if isinstance(subject, Employee):
            previous = self._schedules.get_substitution(key=key, day=day)
            self._schedules.upsert_substitution(substitution=substitution)
        elif isinstance(subject, PlaceholderPosition):
            previous = session.get_substitution(key, day)
            session.put_substitution(substitution)
        else:
            raise TypeError(f"Unsupported subject type: {type(subject)!r}")

        if previous is not None:
            logger.info("Replacing substitute %s on day %d of %s", previous.substitute_name, day, subject.subject_id)
        logger.info("Day %d of %s covered by %s (%s)", day, subject.subject_id, substitution.substitute_name, substitution.reason)
        return substitution

    def clear_substitution(
        self,
        session: PlanningSession,
        scope: MonthScope,
        subject: Subject,
        *,
        day: int,
        confirm: bool = False,
    ) -> bool:
        require_confirmation(confirm, "remover substituição")
        key = scope.key_for(subject.subject_id)

        if isinstance(subject, Employee):
            return self._schedules.delete_substitution(key=key, day=int(day))
        if isinstance(subject, PlaceholderPosition):
            return session.remove_substitution(key, day)
        raise TypeError(f"Unsupported subject type: {type(subject)!r}")

    def list_for_month(self, session: PlanningSession, scope: MonthScope) -> List[Substitution]:
        durable = list(self._schedules.list_substitutions(scope=scope))
        return durable + session.substitutions_for(scope)
