from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_errors
from .model import Employee
from .repository import EmployeeRepository

ACTIVE_STATUS = "Ativo"


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        name=r["full_name"],
        job_title=r["position"],
        registry_or_tax_id=r.get("professional_license_number") or r.get("cpf"),
        unit=r["unit"],
        active=r.get("status") == ACTIVE_STATUS,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, *, unit: Optional[str] = None) -> Sequence[Employee]:
        clauses = ["status=%s"]
        params: list[object] = [ACTIVE_STATUS]
        if unit is not None:
            clauses.append("unit=%s")
            params.append(unit)

        where = " AND ".join(clauses)

        with translate_errors("list_employees"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT employee_id, full_name, position, cpf, professional_license_number, unit, status
                    FROM employees
                    WHERE {where}
                    ORDER BY full_name ASC
                    """,
                    tuple(params),
                )
                return [_row_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with translate_errors("get_employee", key=employee_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT employee_id, full_name, position, cpf, professional_license_number, unit, status
                    FROM employees
                    WHERE employee_id=%s
                    """,
                    (str(employee_id),),
                )
                r = fetchone(cur)
                return _row_to_employee(r) if r else None
