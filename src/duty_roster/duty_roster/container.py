from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_INSTITUTION_NAME
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .roster.mysql_employee_repository import MySQLEmployeeRepository
from .roster.mysql_on_call_repository import MySQLOnCallRepository
from .roster.service import RosterService
from .rotation.engine import RotationEngine
from .rotation.factory import RotationStrategyFactory
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .substitutions.service import SubstitutionService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    on_call_repo: MySQLOnCallRepository
    schedules_repo: MySQLScheduleRepository

    roster_service: RosterService
    schedule_service: ScheduleService
    substitution_service: SubstitutionService
    report_service: ReportService


def build_container(*, db_config: dict, institution_name: str = DEFAULT_INSTITUTION_NAME) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    on_call_repo = MySQLOnCallRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)

    roster_service = RosterService(employees_repo, schedules_repo, on_call_repo)
    schedule_service = ScheduleService(schedules_repo, engine=RotationEngine(RotationStrategyFactory()))
    substitution_service = SubstitutionService(schedules_repo, roster_service)
    report_service = ReportService(schedules_repo, roster_service, institution_name=institution_name)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        on_call_repo=on_call_repo,
        schedules_repo=schedules_repo,
        roster_service=roster_service,
        schedule_service=schedule_service,
        substitution_service=substitution_service,
        report_service=report_service,
    )
