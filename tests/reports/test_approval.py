from datetime import datetime

import pytest

from src.duty_roster.duty_roster.core.enums import ReportStatus
from src.duty_roster.duty_roster.core.exceptions import ApprovalRequiredError, ValidationError
from src.duty_roster.duty_roster.reports.approval import ReportApproval


def test_new_approval_is_a_draft_and_blocks_export():
    approval = ReportApproval()

    assert approval.status == ReportStatus.DRAFT
    with pytest.raises(ApprovalRequiredError):
        approval.require_exportable()


@pytest.mark.parametrize(
    "signer, confirmed",
    [("", True), ("   ", True), ("Maria Souza", False)],
)
def test_signer_and_confirmation_are_both_required(signer, confirmed):
    approval = ReportApproval()

    assert approval.approve(signer, confirmed=confirmed) == ReportStatus.DRAFT
    assert approval.approved_at is None
    with pytest.raises(ApprovalRequiredError):
        approval.require_exportable()


def test_signed_and_confirmed_allows_export():
    approval = ReportApproval()
    now = datetime(2025, 4, 30, 17, 0, 0)

    assert approval.approve("  Maria Souza ", confirmed=True, now=now) == ReportStatus.APPROVED
    assert approval.signer_name == "Maria Souza"
    assert approval.approved_at == now
    approval.require_exportable()


def test_an_approval_is_used_up_by_one_export():
    approval = ReportApproval()
    approval.approve("Maria Souza", confirmed=True)

    approval.mark_exported(now=datetime(2025, 4, 30, 17, 5, 0))

    assert approval.status == ReportStatus.EXPORTED
    with pytest.raises(ApprovalRequiredError):
        approval.require_exportable()
    with pytest.raises(ValidationError):
        approval.approve("Maria Souza", confirmed=True)


def test_mark_exported_without_approval_is_rejected():
    with pytest.raises(ApprovalRequiredError):
        ReportApproval().mark_exported()
