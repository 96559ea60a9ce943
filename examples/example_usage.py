"""Example: drive the service layer directly, without Flask.

Plans one month for a unit: a 24h rotation from day 1, one substitution,
then prints the report rows.
"""

import importlib

from config import get_settings_module

from src.duty_roster.duty_roster.container import build_container
from src.duty_roster.duty_roster.core.enums import ScheduleCategory, ShiftCode
from src.duty_roster.duty_roster.schedules.model import MonthScope
from src.duty_roster.duty_roster.substitutions.session_store import PlanningSession


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, institution_name=settings.INSTITUTION_NAME)

    scope = MonthScope(category=ScheduleCategory.GERAL, unit="Botafogo", month=4, year=2025)
    session = PlanningSession(view=container.roster_service.default_view(scope.category, scope.unit))

    roster = container.roster_service.build_roster(
        session.view, container.roster_service.eligible_employees(scope.category, scope.unit)
    )
    if not roster:
        print("Nenhum colaborador ativo na unidade; rode scripts/seed_db.py")
        return

    first = roster[0]
    container.schedule_service.edit_cell(session, scope, first, day=1, code=ShiftCode.DUTY_24H)
    container.substitution_service.set_substitution(
        session, scope, first, day=4, substitute_name="Maria Curinga", reason="Atestado"
    )

    report = container.report_service.build(session, scope)
    for line in report.lines:
        print(f"{line.name:<35} total={line.total_shifts:>2} efetivos={line.actual_days_worked:>2}")


if __name__ == "__main__":
    main()
