from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, translate_errors
from .model import OnCallWorker
from .mysql_employee_repository import ACTIVE_STATUS
from .repository import OnCallRepository


class MySQLOnCallRepository(OnCallRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[OnCallWorker]:
        with translate_errors("list_on_call_workers"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT worker_id, full_name, position, unit, status
                    FROM on_call_workers
                    WHERE status=%s
                    ORDER BY full_name ASC
                    """,
                    (ACTIVE_STATUS,),
                )
                return [
                    OnCallWorker(
                        worker_id=str(r["worker_id"]),
                        full_name=r["full_name"],
                        job_title=r["position"],
                        unit=r["unit"],
                        active=True,
                    )
                    for r in fetchall(cur)
                ]
