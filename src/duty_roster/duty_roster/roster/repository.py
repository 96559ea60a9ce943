from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, OnCallWorker


class EmployeeRepository(Protocol):
    def list_active(self, *, unit: Optional[str] = None) -> Sequence[Employee]:
        """Active staff only, optionally restricted to one unit."""

        raise NotImplementedError

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError


class OnCallRepository(Protocol):
    def list_active(self) -> Sequence[OnCallWorker]:
        raise NotImplementedError
