from datetime import datetime

import pytest

from src.duty_roster.duty_roster.core.enums import ScheduleCategory, ShiftCode
from src.duty_roster.duty_roster.core.exceptions import ConfirmationRequiredError, ValidationError
from src.duty_roster.duty_roster.roster.model import PlaceholderPosition, RosterView
from src.duty_roster.duty_roster.substitutions.session_store import PlanningSession


@pytest.fixture
def ana(roster_service):
    return next(e for e in roster_service.eligible_employees(ScheduleCategory.ENFERMAGEM, "Botafogo") if e.employee_id == "e-2")


@pytest.fixture
def session():
    return PlanningSession()


def test_substitution_on_empty_day_is_rejected(substitution_service, schedule_service, session, june_scope, ana):
    with pytest.raises(ValidationError):
        substitution_service.set_substitution(session, june_scope, ana, day=3, substitute_name="Zuleide Alves")

    schedule_service.edit_cell(session, june_scope, ana, day=1, code=ShiftCode.DUTY_24H)
    with pytest.raises(ValidationError):
        substitution_service.set_substitution(session, june_scope, ana, day=2, substitute_name="Zuleide Alves")


def test_second_substitution_replaces_the_first(substitution_service, schedule_service, store, session, june_scope, ana, clock):
    schedule_service.edit_cell(session, june_scope, ana, day=5, code=ShiftCode.SERVICE_DAY)

    substitution_service.set_substitution(session, june_scope, ana, day=5, substitute_name="Zuleide Alves", reason="Falta")
    clock.now = datetime(2025, 5, 1, 9, 0, 0)
    substitution_service.set_substitution(session, june_scope, ana, day=5, substitute_name="Gabriel Martins", reason="Atestado")

    subs = store.list_substitutions(scope=june_scope)
    assert len(subs) == 1
    assert subs[0].substitute_name == "Gabriel Martins"
    assert subs[0].reason == "Atestado"
    assert subs[0].created_at == datetime(2025, 5, 1, 9, 0, 0)


def test_substitution_does_not_change_the_assignment(substitution_service, schedule_service, store, session, june_scope, ana):
    schedule_service.edit_cell(session, june_scope, ana, day=5, code=ShiftCode.DUTY_6H)
    substitution_service.set_substitution(session, june_scope, ana, day=5, substitute_name="Zuleide Alves")

    assert store.get_assignment(key=june_scope.key_for("e-2")).code_on(5) == ShiftCode.DUTY_6H


def test_blank_reason_defaults_and_name_resolves_from_on_call_pool(substitution_service, schedule_service, session, june_scope, ana):
    schedule_service.edit_cell(session, june_scope, ana, day=5, code=ShiftCode.SERVICE_DAY)

    sub = substitution_service.set_substitution(session, june_scope, ana, day=5, substitute_id="oc-1", reason="  ")

    assert sub.substitute_name == "Zuleide Alves"
    assert sub.substitute_id == "oc-1"
    assert sub.reason == "Substituição"


def test_blank_name_without_pool_member_is_rejected(substitution_service, schedule_service, session, june_scope, ana):
    schedule_service.edit_cell(session, june_scope, ana, day=5, code=ShiftCode.SERVICE_DAY)

    with pytest.raises(ValidationError):
        substitution_service.set_substitution(session, june_scope, ana, day=5)
    with pytest.raises(ValidationError):
        substitution_service.set_substitution(session, june_scope, ana, day=5, substitute_id="oc-3")


def test_placeholder_substitutions_stay_in_the_session(substitution_service, schedule_service, store, june_scope):
    ph = PlaceholderPosition("ph-1", "Vaga Enfermeira 1", "Enfermeira", "Botafogo")
    session = PlanningSession(view=RosterView(placeholders=(ph,)))
    schedule_service.edit_cell(session, june_scope, ph, day=2, code=ShiftCode.DUTY_12H)

    substitution_service.set_substitution(session, june_scope, ph, day=4, substitute_name="Zuleide Alves")

    assert store.list_substitutions(scope=june_scope) == []
    assert [s.day for s in session.substitutions_for(june_scope)] == [4]
    assert [s.day for s in substitution_service.list_for_month(session, june_scope)] == [4]

    restored = PlanningSession.from_dict(session.to_dict())
    assert restored.substitutions_for(june_scope) == session.substitutions_for(june_scope)


def test_clear_substitution_when_absent_is_not_an_error(substitution_service, session, june_scope, ana):
    assert substitution_service.clear_substitution(session, june_scope, ana, day=7, confirm=True) is False


def test_clear_substitution_requires_confirmation(substitution_service, schedule_service, store, session, june_scope, ana):
    schedule_service.edit_cell(session, june_scope, ana, day=5, code=ShiftCode.SERVICE_DAY)
    substitution_service.set_substitution(session, june_scope, ana, day=5, substitute_name="Zuleide Alves")

    with pytest.raises(ConfirmationRequiredError):
        substitution_service.clear_substitution(session, june_scope, ana, day=5)

    assert substitution_service.clear_substitution(session, june_scope, ana, day=5, confirm=True) is True
    assert store.list_substitutions(scope=june_scope) == []


def test_rest_day_cannot_be_substituted(substitution_service, schedule_service, store, session, june_scope, ana):
    schedule_service.edit_cell(session, june_scope, ana, day=6, code=ShiftCode.REST_DAY)

    with pytest.raises(ValidationError):
        substitution_service.set_substitution(session, june_scope, ana, day=6, substitute_name="Zuleide Alves")

    assert store.list_substitutions(scope=june_scope) == []
