from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_INSTITUTION_NAME
from ..roster.service import RosterService
from ..schedules.model import MonthScope
from ..schedules.repository import ScheduleRepository
from ..substitutions.session_store import PlanningSession
from .approval import ReportApproval
from .exporter import XLSX_MIMETYPE, ReportExporter
from .generator import MonthlyReportGenerator
from .model import MonthlyReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedReport:
    filename: str
    mimetype: str
    content: bytes


class ReportService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        roster: RosterService,
        *,
        generator: Optional[MonthlyReportGenerator] = None,
        exporter: Optional[ReportExporter] = None,
        institution_name: str = DEFAULT_INSTITUTION_NAME,
        clock: Callable[[], datetime] = now_local,
    ):
        self._schedules = schedules
        self._roster = roster
        self._generator = generator or MonthlyReportGenerator()
        self._exporter = exporter or ReportExporter()
        self._institution = institution_name
        self._clock = clock

    def build(self, session: PlanningSession, scope: MonthScope) -> MonthlyReport:
        """Compute the report from current data (nothing is cached)."""

        employees = self._roster.eligible_employees(scope.category, scope.unit)
        subjects = self._roster.build_roster(session.view, employees)
        assignments = {a.key.subject_id: a for a in self._schedules.list_assignments(scope=scope)}
        substitutions = list(self._schedules.list_substitutions(scope=scope)) + session.substitutions_for(scope)

        lines, floaters = self._generator.generate(scope, subjects, assignments, substitutions)
        return MonthlyReport(
            institution=self._institution,
            scope=scope,
            generated_at=self._clock(),
            lines=tuple(lines),
            floaters=tuple(floaters),
            summary=self._generator.summarize(scope, lines, floaters),
            totals=self._generator.totals(lines),
        )

    def export(self, session: PlanningSession, scope: MonthScope, approval: ReportApproval) -> ExportedReport:
        approval.require_exportable()

        report = self.build(session, scope)
        content = self._exporter.to_xlsx(report, approval)
        approval.mark_exported(now=report.generated_at)

        filename = f"escala_{scope.category.name.lower()}_{scope.unit.replace(' ', '_')}_{scope.year}_{scope.month:02d}.xlsx"
        logger.info("Exported %s signed by %s", filename, approval.signer_name)
        return ExportedReport(filename=filename, mimetype=XLSX_MIMETYPE, content=content)
