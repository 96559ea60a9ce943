import pytest

from src.duty_roster.duty_roster.core.enums import ReportLineKind, ScheduleCategory, ShiftCode, SubjectKind
from src.duty_roster.duty_roster.core.exceptions import ConfirmationRequiredError, ValidationError
from src.duty_roster.duty_roster.reports.service import ReportService
from src.duty_roster.duty_roster.roster.model import Employee, PlaceholderPosition, RosterView
from src.duty_roster.duty_roster.roster.service import sort_employees
from src.duty_roster.duty_roster.substitutions.session_store import PlanningSession


def _ids(subjects):
    return [s.subject_id for s in subjects]


def test_sort_employees_by_job_title_priority_then_name():
    staff = [
        Employee("x-1", "zelia", "Professora de Yoga", None, "U"),
        Employee("x-2", "Bia", "Motorista", None, "U"),
        Employee("x-3", "beto", "Enfermeira", None, "U"),
        Employee("x-4", "Ana", "Enfermeira", None, "U"),
        Employee("x-5", "Caio", "Cuidador de Idosos", None, "U"),
    ]

    # Unknown job titles go after every listed one.
    assert _ids(sort_employees(staff)) == ["x-4", "x-3", "x-5", "x-1", "x-2"]


def test_eligible_employees_follow_category_and_unit(roster_service):
    geral = roster_service.eligible_employees(ScheduleCategory.GERAL, "Botafogo")
    enfermagem = roster_service.eligible_employees(ScheduleCategory.ENFERMAGEM, "Botafogo")
    nutricao = roster_service.eligible_employees(ScheduleCategory.NUTRICAO, "Botafogo")

    assert sorted(e.employee_id for e in geral) == ["e-1", "e-2", "e-3", "e-4"]
    assert sorted(e.employee_id for e in enfermagem) == ["e-1", "e-2", "e-3"]
    assert [e.employee_id for e in nutricao] == ["e-4"]


def test_build_roster_puts_placeholders_after_employees(roster_service):
    view = roster_service.default_view(ScheduleCategory.ENFERMAGEM, "Botafogo")
    view = roster_service.add_placeholders(view, job_title="Enfermeira", quantity=2, unit="Botafogo")
    employees = roster_service.eligible_employees(ScheduleCategory.ENFERMAGEM, "Botafogo")

    roster = roster_service.build_roster(view, employees)

    assert _ids(roster) == ["e-2", "e-3", "e-1", "ph-1", "ph-2"]
    assert [s.kind for s in roster[-2:]] == [SubjectKind.PLACEHOLDER, SubjectKind.PLACEHOLDER]


def test_add_placeholders_numbers_labels_per_job_title(roster_service):
    view = roster_service.add_placeholders(RosterView(), job_title="Enfermeira", quantity=2, unit="Botafogo")
    view = roster_service.add_placeholders(view, job_title="Cozinheira", quantity=1, unit="Botafogo")
    view = roster_service.add_placeholders(view, job_title="Enfermeira", quantity=1, unit="Botafogo")

    assert [p.label for p in view.placeholders] == [
        "Vaga Enfermeira 1",
        "Vaga Enfermeira 2",
        "Vaga Cozinheira 1",
        "Vaga Enfermeira 3",
    ]


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_placeholders_rejects_quantity_below_one(roster_service, quantity):
    with pytest.raises(ValidationError):
        roster_service.add_placeholders(RosterView(), job_title="Enfermeira", quantity=quantity, unit="Botafogo")


def test_add_placeholders_rejects_blank_job_title(roster_service):
    with pytest.raises(ValidationError):
        roster_service.add_placeholders(RosterView(), job_title="  ", quantity=1, unit="Botafogo")


def test_remove_placeholder_purges_assignments_and_session_substitutions(
    roster_service, schedule_service, substitution_service, store, june_scope
):
    session = PlanningSession(view=roster_service.add_placeholders(RosterView(), job_title="Enfermeira", quantity=1, unit="Botafogo"))
    ph = session.view.placeholders[0]

    schedule_service.edit_cell(session, june_scope, ph, day=1, code=ShiftCode.DUTY_24H)
    substitution_service.set_substitution(session, june_scope, ph, day=4, substitute_name="Zuleide Alves")
    assert store.list_assignments(scope=june_scope)
    assert session.substitutions_for(june_scope)

    roster_service.remove_placeholder(session, ph.placeholder_id, confirm=True)

    assert store.list_assignments(scope=june_scope) == []
    assert session.substitutions_for(june_scope) == []
    assert session.view.placeholders == ()


def test_removed_placeholder_disappears_from_the_report(
    roster_service, schedule_service, substitution_service, store, june_scope, clock
):
    view = roster_service.default_view(june_scope.category, june_scope.unit)
    session = PlanningSession(view=roster_service.add_placeholders(view, job_title="Enfermeira", quantity=1, unit="Botafogo"))
    ph = session.view.placeholders[0]
    schedule_service.edit_cell(session, june_scope, ph, day=1, code=ShiftCode.DUTY_24H)
    substitution_service.set_substitution(session, june_scope, ph, day=4, substitute_name="Zuleide Alves")
    reports = ReportService(store, roster_service, clock=clock)

    before = reports.build(session, june_scope)
    assert "ph-1" in [ln.subject_id for ln in before.lines]
    assert [f.substitute_name for f in before.floaters] == ["Zuleide Alves"]

    roster_service.remove_placeholder(session, ph.placeholder_id, confirm=True)
    after = reports.build(session, june_scope)

    assert "ph-1" not in [ln.subject_id for ln in after.lines]
    assert after.floaters == ()
    assert all(ln.kind != ReportLineKind.FLOATER for ln in after.lines)
    assert after.summary.total_substitutions == 0


def test_remove_placeholder_ignores_employee_ids(roster_service, schedule_service, substitution_service, store, june_scope):
    ana = next(e for e in roster_service.eligible_employees(june_scope.category, june_scope.unit) if e.employee_id == "e-2")
    session = PlanningSession(view=roster_service.default_view(june_scope.category, june_scope.unit))
    schedule_service.edit_cell(session, june_scope, ana, day=1, code=ShiftCode.DUTY_24H)
    substitution_service.set_substitution(session, june_scope, ana, day=4, substitute_name="Zuleide Alves")

    roster_service.remove_placeholder(session, "e-2", confirm=True)

    kept = store.get_assignment(key=june_scope.key_for("e-2"))
    assert kept is not None
    assert kept.code_on(28) == ShiftCode.DUTY_24H
    assert len(store.list_substitutions(scope=june_scope)) == 1
    assert session.view.selected_employee_ids == roster_service.default_view(june_scope.category, june_scope.unit).selected_employee_ids


def test_store_placeholder_delete_skips_employee_rows(store, june_scope):
    store.write_cells(key=june_scope.key_for("e-2"), cells=[], subject_kind=SubjectKind.EMPLOYEE)

    assert store.delete_placeholder(placeholder_id="e-2") == 0
    assert store.get_assignment(key=june_scope.key_for("e-2")) is not None


def test_remove_placeholder_is_idempotent(roster_service):
    session = PlanningSession()

    roster_service.remove_placeholder(session, "missing", confirm=True)
    roster_service.remove_placeholder(session, "missing", confirm=True)

    assert session.view.placeholders == ()


def test_remove_placeholder_requires_confirmation(roster_service, store, june_scope):
    ph = PlaceholderPosition("ph-9", "Vaga Enfermeira 1", "Enfermeira", "Botafogo")
    session = PlanningSession(view=RosterView(placeholders=(ph,)))
    store.write_cells(key=june_scope.key_for("ph-9"), cells=[], subject_kind=SubjectKind.PLACEHOLDER)

    with pytest.raises(ConfirmationRequiredError):
        roster_service.remove_placeholder(session, "ph-9")

    assert session.view.placeholders == (ph,)
    assert len(store.assignments) == 1


def test_selection_is_a_view_filter_only(roster_service, schedule_service, store, june_scope):
    view = roster_service.default_view(ScheduleCategory.ENFERMAGEM, "Botafogo")
    employees = roster_service.eligible_employees(ScheduleCategory.ENFERMAGEM, "Botafogo")
    session = PlanningSession(view=view)
    ana = next(e for e in employees if e.employee_id == "e-2")
    schedule_service.edit_cell(session, june_scope, ana, day=3, code=ShiftCode.SERVICE_DAY)

    hidden = roster_service.deselect_employee(view, "e-2")
    assert "e-2" not in _ids(roster_service.build_roster(hidden, employees))
    assert store.get_assignment(key=june_scope.key_for("e-2")).code_on(3) == ShiftCode.SERVICE_DAY

    shown = roster_service.select_employees(hidden, ["e-2", "e-2", "e-1"])
    assert shown.selected_employee_ids == ("e-2", "e-1")
    assert _ids(roster_service.build_roster(shown, employees)) == ["e-2", "e-1"]


def test_substitute_pool_includes_both_units_and_skips_inactive(roster_service):
    pool = roster_service.substitute_pool("Botafogo")

    assert [w.worker_id for w in pool] == ["oc-2", "oc-1"]
    assert roster_service.find_on_call("oc-3", "Botafogo") is None
    assert roster_service.find_on_call("oc-1", "Copacabana").full_name == "Zuleide Alves"


def test_roster_view_round_trips_through_dict():
    view = RosterView(
        selected_employee_ids=("e-1",),
        placeholders=(PlaceholderPosition("ph-1", "Vaga Enfermeira 1", "Enfermeira", "Botafogo"),),
    )

    assert RosterView.from_dict(view.to_dict()) == view
