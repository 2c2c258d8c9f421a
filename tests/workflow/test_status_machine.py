from datetime import datetime, timezone

import pytest

from src.report_workflow.report_workflow.core.enums import ReportStatus, Role, WorkflowAction
from src.report_workflow.report_workflow.core.exceptions import TransitionRejected
from src.report_workflow.report_workflow.users.model import Actor
from src.report_workflow.report_workflow.workflow.status_machine import StatusMachine

NOW = datetime(2026, 3, 2, 10, 0, 0, tzinfo=timezone.utc)


def test_approve_stamps_destination_stage_columns(make_report):
    machine = StatusMachine()
    report = make_report(status=ReportStatus.SUBMITTED)

    change = machine.apply(report, WorkflowAction.APPROVE, Actor("pres-1", Role.PRESIDENT), "  ok  ", now=NOW)

    assert change.to_status == ReportStatus.COORDINATOR_REVIEWED
    assert change.stamps == {
        "coordinator_id": "pres-1",
        "coordinator_reviewed_at": NOW,
        "coordinator_comment": "ok",
    }
    assert change.fields["status"] == "coordinator_reviewed"


def test_final_approval_stamps_final_columns(make_report):
    change = StatusMachine().apply(
        make_report(status=ReportStatus.MANAGER_APPROVED),
        WorkflowAction.APPROVE,
        Actor("admin-1", Role.SUPER_ADMIN),
        now=NOW,
    )

    assert change.to_status == ReportStatus.FINAL_APPROVED
    assert change.stamps["final_approver_id"] == "admin-1"
    assert change.stamps["final_comment"] is None


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_reject_requires_a_reason(make_report, reason):
    with pytest.raises(TransitionRejected):
        StatusMachine().apply(
            make_report(status=ReportStatus.SUBMITTED),
            WorkflowAction.REJECT,
            Actor("pres-1", Role.PRESIDENT),
            reason,
            now=NOW,
        )


def test_reject_records_rejection_triple(make_report):
    change = StatusMachine().apply(
        make_report(status=ReportStatus.COORDINATOR_REVIEWED),
        WorkflowAction.REJECT,
        Actor("acct-1", Role.ACCOUNTANT),
        "Budget section missing",
        now=NOW,
    )

    assert change.to_status == ReportStatus.REJECTED
    assert change.stamps == {"rejected_by": "acct-1", "rejected_at": NOW, "rejection_reason": "Budget section missing"}


def test_cancel_returns_submitted_report_to_draft(make_report):
    change = StatusMachine().apply(
        make_report(status=ReportStatus.SUBMITTED),
        WorkflowAction.CANCEL,
        Actor("leader-1", Role.TEAM_LEADER),
        now=NOW,
    )

    assert change.to_status == ReportStatus.DRAFT
    assert change.stamps == {"submitted_at": None}
    assert not change.is_submission


def test_resubmit_clears_rejection_and_stage_stamps(make_report):
    report = make_report(
        status=ReportStatus.REJECTED,
        coordinator_id="pres-1",
        coordinator_reviewed_at=NOW,
        rejected_by="acct-1",
        rejected_at=NOW,
        rejection_reason="Fix totals",
    )

    change = StatusMachine().apply(report, WorkflowAction.RESUBMIT, Actor("leader-1", Role.TEAM_LEADER), now=NOW)
    updated = change.apply_to(report)

    assert change.to_status == ReportStatus.SUBMITTED
    assert change.is_submission
    assert updated.submitted_at == NOW
    assert updated.rejected_by is None and updated.rejection_reason is None
    assert updated.coordinator_id is None and updated.coordinator_reviewed_at is None


@pytest.mark.parametrize(
    "status,action",
    [
        (ReportStatus.DRAFT, WorkflowAction.APPROVE),
        (ReportStatus.FINAL_APPROVED, WorkflowAction.APPROVE),
        (ReportStatus.REJECTED, WorkflowAction.REJECT),
        (ReportStatus.COORDINATOR_REVIEWED, WorkflowAction.CANCEL),
        (ReportStatus.SUBMITTED, WorkflowAction.SUBMIT),
        (ReportStatus.DRAFT, WorkflowAction.RESUBMIT),
        (ReportStatus.DRAFT, WorkflowAction.EDIT),
    ],
)
def test_unknown_transitions_are_rejected(make_report, status, action):
    with pytest.raises(TransitionRejected):
        StatusMachine().apply(make_report(status=status), action, Actor("x", Role.SUPER_ADMIN), "why", now=NOW)


def test_attendance_is_live_outside_draft(make_report):
    machine = StatusMachine()

    assert not machine.attendance_is_live(make_report(status=ReportStatus.DRAFT))
    assert machine.attendance_is_live(make_report(status=ReportStatus.REJECTED))
