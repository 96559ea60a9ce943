from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterable, List, Optional, Sequence

from ..common.validators import require_confirmation, require_min_value, require_non_empty
from ..core.constants import ALL_UNITS, CATEGORY_JOB_TITLES, JOB_TITLE_PRIORITY, PLACEHOLDER_LABEL_PREFIX
from ..core.enums import ScheduleCategory
from ..schedules.repository import ScheduleRepository
from ..substitutions.session_store import PlanningSession
from .model import Employee, OnCallWorker, PlaceholderPosition, RosterView, Subject
from .repository import EmployeeRepository, OnCallRepository

logger = logging.getLogger(__name__)


def _job_title_rank(job_title: str) -> int:
    try:
        return JOB_TITLE_PRIORITY.index(job_title)
    except ValueError:
        return len(JOB_TITLE_PRIORITY)


def sort_employees(employees: Iterable[Employee]) -> List[Employee]:
    """Job-title priority first, then name."""
    return sorted(employees, key=lambda e: (_job_title_rank(e.job_title), e.name.casefold()))


class RosterService:
    def __init__(
        self,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        on_call: Optional[OnCallRepository] = None,
        *,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._employees = employees
        self._schedules = schedules
        self._on_call = on_call
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)

    def eligible_employees(self, category: ScheduleCategory, unit: str) -> List[Employee]:
        allowed = CATEGORY_JOB_TITLES[ScheduleCategory(category)]
        return [
            e
            for e in self._employees.list_active(unit=unit)
            if e.active and e.unit == unit and (allowed is None or e.job_title in allowed)
        ]

    def default_view(self, category: ScheduleCategory, unit: str) -> RosterView:
        return RosterView(selected_employee_ids=tuple(e.employee_id for e in self.eligible_employees(category, unit)))

    def select_employees(self, view: RosterView, employee_ids: Iterable[str]) -> RosterView:
        ids: list[str] = []
        for i in employee_ids:
            if str(i) not in ids:
                ids.append(str(i))
        return RosterView(selected_employee_ids=tuple(ids), placeholders=view.placeholders)

    def deselect_employee(self, view: RosterView, employee_id: str) -> RosterView:
        ids = tuple(i for i in view.selected_employee_ids if i != str(employee_id))
        return RosterView(selected_employee_ids=ids, placeholders=view.placeholders)

    def build_roster(self, view: RosterView, employees: Sequence[Employee]) -> List[Subject]:
        """Ordered grid rows: selected active employees, then every placeholder."""
        selected = [e for e in employees if e.active and view.is_selected(e.employee_id)]
        subjects: List[Subject] = list(sort_employees(selected))
        subjects.extend(view.placeholders)
        return subjects

    def add_placeholders(self, view: RosterView, *, job_title: str, quantity: int, unit: str) -> RosterView:
        job_title = require_non_empty(job_title, "Cargo")
        quantity = require_min_value(quantity, "Quantidade", 1)

        existing = sum(1 for p in view.placeholders if p.job_title == job_title)
        created = [
            PlaceholderPosition(
                placeholder_id=self._new_id(),
                label=f"{PLACEHOLDER_LABEL_PREFIX} {job_title} {existing + n}",
                job_title=job_title,
                unit=unit,
            )
            for n in range(1, quantity + 1)
        ]
        logger.info("Added %d placeholder(s) for %s in %s", quantity, job_title, unit)
        return RosterView(selected_employee_ids=view.selected_employee_ids, placeholders=view.placeholders + tuple(created))

    def remove_placeholder(self, session: PlanningSession, placeholder_id: str, *, confirm: bool = False) -> None:
        """Remove a placeholder and purge everything recorded against it.

        Only ids of this session's placeholders are acted on; any other id,
        including an employee id, is a no-op.
        """

        require_confirmation(confirm, "remover vaga")

        if session.view.find_placeholder(placeholder_id) is None:
            logger.info("Placeholder %s not in session; nothing to remove", placeholder_id)
            return

        self._schedules.delete_placeholder(placeholder_id=placeholder_id)
        session.drop_subject(placeholder_id)
        session.view = RosterView(
            selected_employee_ids=session.view.selected_employee_ids,
            placeholders=tuple(p for p in session.view.placeholders if p.placeholder_id != placeholder_id),
        )
        logger.info("Removed placeholder %s", placeholder_id)

    def substitute_pool(self, unit: str) -> List[OnCallWorker]:
        if self._on_call is None:
            return []
        pool = [w for w in self._on_call.list_active() if w.active and w.unit in (unit, ALL_UNITS)]
        pool.sort(key=lambda w: w.full_name.casefold())
        return pool

    def find_on_call(self, worker_id: str, unit: str) -> Optional[OnCallWorker]:
        for w in self.substitute_pool(unit):
            if w.worker_id == str(worker_id):
                return w
        return None
