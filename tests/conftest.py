from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import pytest

from src.duty_roster.duty_roster.core.enums import ScheduleCategory, SubjectKind
from src.duty_roster.duty_roster.core.exceptions import CapabilityUnavailable, PersistenceError
from src.duty_roster.duty_roster.roster.model import Employee, OnCallWorker
from src.duty_roster.duty_roster.roster.service import RosterService
from src.duty_roster.duty_roster.schedules.model import MonthScope, ScheduleAssignment, ScheduleKey
from src.duty_roster.duty_roster.schedules.service import ScheduleService
from src.duty_roster.duty_roster.substitutions.model import Substitution
from src.duty_roster.duty_roster.substitutions.service import SubstitutionService


class InMemoryScheduleStore:
    """Fake of the MySQL schedule repository, with failure switches."""

    def __init__(self):
        self.assignments: dict[ScheduleKey, ScheduleAssignment] = {}
        self.kinds: dict[ScheduleKey, SubjectKind] = {}
        self.substitutions: dict[tuple[ScheduleKey, int], Substitution] = {}
        self.available = True
        self.fail_writes = False

    def _check(self):
        if not self.available:
            raise CapabilityUnavailable("Tabela de escalas não encontrada")

    def list_assignments(self, *, scope: MonthScope):
        self._check()
        return [a for k, a in self.assignments.items() if k.scope == scope]

    def get_assignment(self, *, key: ScheduleKey) -> Optional[ScheduleAssignment]:
        self._check()
        return self.assignments.get(key)

    def write_cells(self, *, key, cells, subject_kind):
        self._check()
        if self.fail_writes:
            raise PersistenceError("write failed", operation="write_cells", key=key, cells=cells)
        a = self.assignments.setdefault(key, ScheduleAssignment(key=key))
        self.kinds[key] = subject_kind
        for c in cells:
            a.apply(c)
            if c.code is None:
                self.substitutions.pop((key, c.day), None)

    def clear_month(self, *, scope: MonthScope) -> int:
        self._check()
        doomed = [k for k in self.assignments if k.scope == scope]
        for k in doomed:
            del self.assignments[k]
        for sk in [sk for sk in self.substitutions if sk[0].scope == scope]:
            del self.substitutions[sk]
        return len(doomed)

    def delete_placeholder(self, *, placeholder_id: str) -> int:
        doomed = [
            k for k in self.assignments
            if k.subject_id == placeholder_id and self.kinds.get(k) == SubjectKind.PLACEHOLDER
        ]
        for k in doomed:
            del self.assignments[k]
            self.kinds.pop(k, None)
        doomed_keys = set(doomed)
        for sk in [sk for sk in self.substitutions if sk[0] in doomed_keys]:
            del self.substitutions[sk]
        return len(doomed)

    def list_substitutions(self, *, scope: MonthScope):
        self._check()
        return [s for (k, _), s in self.substitutions.items() if k.scope == scope]

    def get_substitution(self, *, key: ScheduleKey, day: int):
        return self.substitutions.get((key, day))

    def upsert_substitution(self, *, substitution: Substitution) -> None:
        self._check()
        self.substitutions[(substitution.key, substitution.day)] = substitution

    def delete_substitution(self, *, key: ScheduleKey, day: int) -> bool:
        return self.substitutions.pop((key, day), None) is not None


@dataclass
class InMemoryEmployees:
    employees: list[Employee] = field(default_factory=list)

    def list_active(self, *, unit: Optional[str] = None):
        return [e for e in self.employees if e.active and (unit is None or e.unit == unit)]

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        for e in self.employees:
            if e.employee_id == employee_id:
                return e
        return None


@dataclass
class InMemoryOnCall:
    workers: list[OnCallWorker] = field(default_factory=list)

    def list_active(self):
        return [w for w in self.workers if w.active]


class FixedClock:
    def __init__(self, start: datetime = datetime(2025, 4, 30, 18, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now


def counter_ids():
    n = {"i": 0}

    def _next() -> str:
        n["i"] += 1
        return f"ph-{n['i']}"

    return _next


@pytest.fixture
def store() -> InMemoryScheduleStore:
    return InMemoryScheduleStore()


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee("e-1", "Carla Souza", "Cuidador de Idosos", None, "Botafogo"),
            Employee("e-2", "Ana Paula", "Enfermeira", "COREN 123", "Botafogo"),
            Employee("e-3", "Bruno Costa", "Técnico de Enfermagem", "COREN 456", "Botafogo"),
            Employee("e-4", "Denise Lima", "Cozinheira", "444.555.666-77", "Botafogo"),
            Employee("e-5", "Eva Nunes", "Enfermeira", "COREN 789", "Copacabana"),
            Employee("e-6", "Fabio Rocha", "Enfermeira", "COREN 000", "Botafogo", active=False),
        ]
    )


@pytest.fixture
def on_call() -> InMemoryOnCall:
    return InMemoryOnCall(
        [
            OnCallWorker("oc-1", "Zuleide Alves", "Técnico de Enfermagem", "Ambas"),
            OnCallWorker("oc-2", "Gabriel Martins", "Cuidador de Idosos", "Botafogo"),
            OnCallWorker("oc-3", "Helena Prado", "Enfermeira", "Copacabana"),
            OnCallWorker("oc-4", "Igor Reis", "Enfermeira", "Botafogo", active=False),
        ]
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def roster_service(employees, store, on_call) -> RosterService:
    return RosterService(employees, store, on_call, id_factory=counter_ids())


@pytest.fixture
def schedule_service(store) -> ScheduleService:
    return ScheduleService(store)


@pytest.fixture
def substitution_service(store, roster_service, clock) -> SubstitutionService:
    return SubstitutionService(store, roster_service, clock=clock)


@pytest.fixture
def june_scope() -> MonthScope:
    return MonthScope(category=ScheduleCategory.ENFERMAGEM, unit="Botafogo", month=6, year=2024)
