from __future__ import annotations

import io
import logging
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, send_file, session

from ..container import Container
from ..core.constants import SUBSTITUTION_REASONS
from ..core.enums import ScheduleCategory, ShiftCode
from ..core.exceptions import CapabilityUnavailable, NotFoundError, PersistenceError, ValidationError
from ..reports.approval import ReportApproval
from ..reports.model import MonthlyReport
from ..roster.model import Subject
from ..substitutions.session_store import PlanningSession
from .model import MonthScope

logger = logging.getLogger(__name__)

SESSION_KEY = "planning"


def _parse_int(value, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} inválido: {value!r}")


def _parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "sim", "yes", "on")
    return bool(value)


def _parse_code(value) -> Optional[ShiftCode]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return ShiftCode(str(value).strip())
    except ValueError:
        raise ValidationError(f"Código de turno inválido: {value!r}")


def _scope_from(data) -> MonthScope:
    try:
        category = ScheduleCategory(data.get("category") or ScheduleCategory.GERAL.value)
    except ValueError:
        raise ValidationError(f"Categoria inválida: {data.get('category')!r}")
    return MonthScope(
        category=category,
        unit=str(data.get("unit") or ""),
        month=_parse_int(data.get("month"), "Mês"),
        year=_parse_int(data.get("year"), "Ano"),
    )


def _report_to_dict(report: MonthlyReport) -> dict:
    def breakdown(b) -> dict:
        return {code.value: int(n) for code, n in b.items()}

    s = report.summary
    t = report.totals
    return {
        "institution": report.institution,
        "category": report.scope.category.value,
        "unit": report.scope.unit,
        "period": report.scope.label,
        "generated_at": report.generated_at.isoformat(),
        "summary": {
            "roster_size": s.roster_size,
            "total_days_worked": s.total_days_worked,
            "days_in_month": s.days_in_month,
            "total_substitutions": s.total_substitutions,
            "distinct_floaters": s.distinct_floaters,
        },
        "lines": [
            {
                "subject_id": ln.subject_id,
                "name": ln.name,
                "job_title": ln.job_title,
                "registry": ln.registry,
                "kind": ln.kind.value,
                "shift_breakdown": breakdown(ln.shift_breakdown),
                "total_shifts": ln.total_shifts,
                "substituted_days": ln.substituted_days,
                "actual_days_worked": ln.actual_days_worked,
            }
            for ln in report.lines
        ],
        "floaters": [
            {
                "substitute_name": f.substitute_name,
                "count": f.count,
                "subjects_covered": list(f.subjects_covered),
                "reasons": list(f.reasons),
                "days": list(f.days),
            }
            for f in report.floaters
        ],
        "totals": {
            "shift_breakdown": breakdown(t.shift_breakdown),
            "total_shifts": t.total_shifts,
            "substituted_days": t.substituted_days,
            "actual_days_worked": t.actual_days_worked,
        },
    }


def register(app: Flask, container: Container) -> None:
    def json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except CapabilityUnavailable as e:
                return jsonify({"success": False, "message": str(e)}), 503
            except NotFoundError as e:
                return jsonify({"success": False, "message": str(e)}), 404
            except PersistenceError as e:
                logger.error("%s failed: %s", e.operation, e)
                return jsonify({"success": False, "message": "Erro ao salvar no banco de dados"}), 500

        return wrapper

    def _payload() -> dict:
        if request.method == "GET":
            return request.args.to_dict()
        return request.get_json(silent=True) or {}

    def _view_key(scope: MonthScope) -> str:
        return f"{scope.category.value}|{scope.unit}"

    def _load_session(scope: MonthScope) -> PlanningSession:
        stored = (session.get(SESSION_KEY) or {}).get(_view_key(scope))
        if stored is None:
            return PlanningSession(view=container.roster_service.default_view(scope.category, scope.unit))
        return PlanningSession.from_dict(stored)

    def _save_session(scope: MonthScope, planning: PlanningSession) -> None:
        stored = dict(session.get(SESSION_KEY) or {})
        stored[_view_key(scope)] = planning.to_dict()
        session[SESSION_KEY] = stored

    def _roster(planning: PlanningSession, scope: MonthScope):
        employees = container.roster_service.eligible_employees(scope.category, scope.unit)
        return container.roster_service.build_roster(planning.view, employees)

    def _find_subject(planning: PlanningSession, scope: MonthScope, subject_id) -> Subject:
        for subject in _roster(planning, scope):
            if subject.subject_id == str(subject_id):
                return subject
        raise NotFoundError(f"Colaborador ou vaga não encontrado: {subject_id}")

    @app.route("/api/schedules/grid", methods=["GET"], endpoint="api_schedule_grid")
    @json_errors
    def api_schedule_grid():
        scope = _scope_from(_payload())
        planning = _load_session(scope)
        grid = container.schedule_service.load_grid(planning, scope, _roster(planning, scope))
        _save_session(scope, planning)
        return jsonify({"success": True, "grid": grid.to_dict()}), 200

    @app.route("/api/schedules/cells", methods=["POST"], endpoint="api_schedule_cell")
    @json_errors
    def api_schedule_cell():
        data = _payload()
        scope = _scope_from(data)
        planning = _load_session(scope)
        subject = _find_subject(planning, scope, data.get("subject_id"))

        writes = container.schedule_service.edit_cell(
            planning,
            scope,
            subject,
            day=_parse_int(data.get("day"), "Dia"),
            code=_parse_code(data.get("code")),
        )
        _save_session(scope, planning)
        return jsonify({
            "success": True,
            "cells": [{"day": w.day, "code": w.code.value if w.code else None} for w in writes],
        }), 200

    @app.route("/api/schedules/clear", methods=["POST"], endpoint="api_schedule_clear")
    @json_errors
    def api_schedule_clear():
        data = _payload()
        scope = _scope_from(data)
        planning = _load_session(scope)
        removed = container.schedule_service.clear_month(planning, scope, confirm=_parse_bool(data.get("confirm")))
        _save_session(scope, planning)
        return jsonify({"success": True, "removed": removed, "message": "Escala do mês limpa"}), 200

    @app.route("/api/schedules/substitutions", methods=["GET"], endpoint="api_substitution_list")
    @json_errors
    def api_substitution_list():
        scope = _scope_from(_payload())
        planning = _load_session(scope)
        items = container.substitution_service.list_for_month(planning, scope)
        return jsonify({
            "success": True,
            "substitutions": [
                {
                    "subject_id": s.key.subject_id,
                    "day": s.day,
                    "substitute_name": s.substitute_name,
                    "reason": s.reason,
                    "created_at": s.created_at.isoformat(),
                }
                for s in items
            ],
        }), 200

    @app.route("/api/schedules/substitutions", methods=["POST"], endpoint="api_substitution_set")
    @json_errors
    def api_substitution_set():
        data = _payload()
        scope = _scope_from(data)
        planning = _load_session(scope)
        subject = _find_subject(planning, scope, data.get("subject_id"))

        sub = container.substitution_service.set_substitution(
            planning,
            scope,
            subject,
            day=_parse_int(data.get("day"), "Dia"),
            substitute_name=str(data.get("substitute_name") or ""),
            reason=str(data.get("reason") or ""),
            substitute_id=data.get("substitute_id") or None,
        )
        _save_session(scope, planning)
        return jsonify({
            "success": True,
            "message": f"Substituição registrada: {sub.substitute_name}",
        }), 200

    @app.route("/api/schedules/substitutions", methods=["DELETE"], endpoint="api_substitution_clear")
    @json_errors
    def api_substitution_clear():
        data = _payload()
        scope = _scope_from(data)
        planning = _load_session(scope)
        subject = _find_subject(planning, scope, data.get("subject_id"))

        removed = container.substitution_service.clear_substitution(
            planning,
            scope,
            subject,
            day=_parse_int(data.get("day"), "Dia"),
            confirm=_parse_bool(data.get("confirm")),
        )
        _save_session(scope, planning)
        return jsonify({"success": True, "removed": removed}), 200

    @app.route("/api/schedules/substitutes", methods=["GET"], endpoint="api_substitute_pool")
    @json_errors
    def api_substitute_pool():
        unit = str(request.args.get("unit") or "")
        pool = container.roster_service.substitute_pool(unit)
        return jsonify({
            "success": True,
            "workers": [
                {"worker_id": w.worker_id, "full_name": w.full_name, "job_title": w.job_title, "unit": w.unit}
                for w in pool
            ],
            "reasons": list(SUBSTITUTION_REASONS),
        }), 200

    @app.route("/api/schedules/selection", methods=["POST"], endpoint="api_roster_selection")
    @json_errors
    def api_roster_selection():
        data = _payload()
        scope = _scope_from(data)
        planning = _load_session(scope)
        planning.view = container.roster_service.select_employees(planning.view, data.get("employee_ids") or [])
        _save_session(scope, planning)
        return jsonify({"success": True, "selected_employee_ids": list(planning.view.selected_employee_ids)}), 200

    @app.route("/api/schedules/placeholders", methods=["POST"], endpoint="api_placeholder_add")
    @json_errors
    def api_placeholder_add():
        data = _payload()
        scope = _scope_from(data)
        planning = _load_session(scope)
        planning.view = container.roster_service.add_placeholders(
            planning.view,
            job_title=str(data.get("job_title") or ""),
            quantity=_parse_int(data.get("quantity", 1), "Quantidade"),
            unit=scope.unit,
        )
        _save_session(scope, planning)
        return jsonify({
            "success": True,
            "placeholders": [p.to_dict() for p in planning.view.placeholders],
        }), 200

    @app.route("/api/schedules/placeholders/<placeholder_id>", methods=["DELETE"], endpoint="api_placeholder_remove")
    @json_errors
    def api_placeholder_remove(placeholder_id: str):
        data = _payload()
        scope = _scope_from(data)
        planning = _load_session(scope)
        container.roster_service.remove_placeholder(planning, placeholder_id, confirm=_parse_bool(data.get("confirm")))
        _save_session(scope, planning)
        return jsonify({"success": True, "message": "Vaga removida"}), 200

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="api_monthly_report")
    @json_errors
    def api_monthly_report():
        scope = _scope_from(_payload())
        report = container.report_service.build(_load_session(scope), scope)
        return jsonify({"success": True, "report": _report_to_dict(report)}), 200

    @app.route("/api/reports/monthly/export", methods=["POST"], endpoint="api_monthly_report_export")
    @json_errors
    def api_monthly_report_export():
        data = _payload()
        scope = _scope_from(data)

        approval = ReportApproval()
        approval.approve(str(data.get("signer_name") or ""), confirmed=_parse_bool(data.get("confirmed")))

        exported = container.report_service.export(_load_session(scope), scope, approval)
        return send_file(
            io.BytesIO(exported.content),
            mimetype=exported.mimetype,
            as_attachment=True,
            download_name=exported.filename,
        )
