from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import ReportStatus
from ..core.exceptions import ApprovalRequiredError, ValidationError


@dataclass
class ReportApproval:
    """Sign-off gate in front of a report export.

    DRAFT -> APPROVED once a signer is named and the confirmation is ticked;
    APPROVED -> EXPORTED after one export. Nothing here is persisted, so each
    export needs a fresh approval. This is a UI precondition, not an
    authorization or audit control.
    """

    signer_name: str = ""
    confirmed: bool = False
    approved_at: Optional[datetime] = None
    exported_at: Optional[datetime] = None

    @property
    def status(self) -> ReportStatus:
        if self.exported_at is not None:
            return ReportStatus.EXPORTED
        if self.signer_name.strip() and self.confirmed:
            return ReportStatus.APPROVED
        return ReportStatus.DRAFT

    @property
    def is_approved(self) -> bool:
        return self.status == ReportStatus.APPROVED

    def approve(self, signer_name: str, *, confirmed: bool, now: Optional[datetime] = None) -> ReportStatus:
        if self.status == ReportStatus.EXPORTED:
            raise ValidationError("Relatório já exportado; inicie uma nova aprovação")
        self.signer_name = (signer_name or "").strip()
        self.confirmed = bool(confirmed)
        self.approved_at = (now or now_local()) if self.is_approved else None
        return self.status

    def require_exportable(self) -> None:
        if self.status == ReportStatus.EXPORTED:
            raise ApprovalRequiredError("Aprovação já utilizada; aprove novamente para exportar")
        if not self.signer_name.strip():
            raise ApprovalRequiredError("Informe o nome da Enfermeira Responsável Técnico")
        if not self.confirmed:
            raise ApprovalRequiredError("Confirme que os dados do relatório estão corretos")

    def mark_exported(self, *, now: Optional[datetime] = None) -> None:
        self.require_exportable()
        self.exported_at = now or now_local()
