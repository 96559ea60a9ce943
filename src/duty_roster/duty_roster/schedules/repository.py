from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SubjectKind
from ..substitutions.model import Substitution
from .model import CellWrite, MonthScope, ScheduleAssignment, ScheduleKey


class ScheduleRepository(Protocol):
    """Persistence collaborator for day cells and durable substitutions.

    Implementations raise CapabilityUnavailable when the schedule tables are
    missing and PersistenceError for any other storage failure.
    """

    def list_assignments(self, *, scope: MonthScope) -> Sequence[ScheduleAssignment]:
        raise NotImplementedError

    def get_assignment(self, *, key: ScheduleKey) -> Optional[ScheduleAssignment]:
        raise NotImplementedError

    def write_cells(self, *, key: ScheduleKey, cells: Sequence[CellWrite], subject_kind: SubjectKind) -> None:
        """Write a batch of day cells all-or-nothing.

        Creates the assignment row on first write. Cells written as empty
        also drop any substitution recorded for that day.
        """

        raise NotImplementedError

    def clear_month(self, *, scope: MonthScope) -> int:
        """Delete the scope's assignments and substitutions in one transaction.

        Returns the number of assignment rows removed.
        """

        raise NotImplementedError

    def delete_placeholder(self, *, placeholder_id: str) -> int:
        """Delete every assignment and substitution of one placeholder.

        Rows stored for employees are never touched.
        """

        raise NotImplementedError

    def list_substitutions(self, *, scope: MonthScope) -> Sequence[Substitution]:
        raise NotImplementedError

    def get_substitution(self, *, key: ScheduleKey, day: int) -> Optional[Substitution]:
        raise NotImplementedError

    def upsert_substitution(self, *, substitution: Substitution) -> None:
        raise NotImplementedError

    def delete_substitution(self, *, key: ScheduleKey, day: int) -> bool:
        raise NotImplementedError
