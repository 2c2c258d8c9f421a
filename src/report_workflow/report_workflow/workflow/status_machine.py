from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import utc_now
from ..common.validators import clean_optional
from ..core.enums import ReportStatus, WorkflowAction
from ..core.exceptions import TransitionRejected
from ..reports.model import Report
from ..users.model import Actor
from .model import StatusChange

# Pending stage -> stage reached on approval
_NEXT_STAGE = {
    ReportStatus.SUBMITTED: ReportStatus.COORDINATOR_REVIEWED,
    ReportStatus.COORDINATOR_REVIEWED: ReportStatus.MANAGER_APPROVED,
    ReportStatus.MANAGER_APPROVED: ReportStatus.FINAL_APPROVED,
}

# Destination stage -> (approver column, timestamp column, comment column)
_STAGE_COLUMNS = {
    ReportStatus.COORDINATOR_REVIEWED: ("coordinator_id", "coordinator_reviewed_at", "coordinator_comment"),
    ReportStatus.MANAGER_APPROVED: ("manager_id", "manager_approved_at", "manager_comment"),
    ReportStatus.FINAL_APPROVED: ("final_approver_id", "final_approved_at", "final_comment"),
}

_REJECTION_COLUMNS = ("rejected_by", "rejected_at", "rejection_reason")


class StatusMachine:
    """Validates a transition request and computes the columns it stamps.

    The machine does not check who is asking (see PermissionResolver); it only
    knows which (status, action) pairs exist and what each one writes.
    """

    def apply(
        self,
        report: Report,
        action: WorkflowAction,
        actor: Actor,
        comment: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> StatusChange:
        now = now or utc_now()
        current = report.status

        if action == WorkflowAction.APPROVE:
            target = self._next_stage(current, action)
            id_col, at_col, comment_col = _STAGE_COLUMNS[target]
            note = clean_optional(comment)
            stamps = {id_col: actor.user_id, at_col: now, comment_col: note}
            return self._change(action, current, target, stamps, note, now)

        if action == WorkflowAction.REJECT:
            self._next_stage(current, action)
            reason = clean_optional(comment)
            if reason is None:
                raise TransitionRejected("A reason is required to reject a report")
            rejected_by, rejected_at, rejection_reason = _REJECTION_COLUMNS
            stamps = {rejected_by: actor.user_id, rejected_at: now, rejection_reason: reason}
            return self._change(action, current, ReportStatus.REJECTED, stamps, reason, now)

        if action == WorkflowAction.CANCEL:
            self._require(current, ReportStatus.SUBMITTED, action)
            stamps = {"submitted_at": None}
            return self._change(action, current, ReportStatus.DRAFT, stamps, clean_optional(comment), now)

        if action == WorkflowAction.SUBMIT:
            self._require(current, ReportStatus.DRAFT, action)
            stamps = {"submitted_at": now}
            return self._change(action, current, ReportStatus.SUBMITTED, stamps, clean_optional(comment), now)

        if action == WorkflowAction.RESUBMIT:
            self._require(current, ReportStatus.REJECTED, action)
            # A rejection is a point-in-time objection; the new pass starts clean.
            stamps = {"submitted_at": now}
            stamps.update({col: None for col in _REJECTION_COLUMNS})
            for cols in _STAGE_COLUMNS.values():
                stamps.update({col: None for col in cols})
            return self._change(action, current, ReportStatus.SUBMITTED, stamps, clean_optional(comment), now)

        raise TransitionRejected(f"'{action.value}' does not change the report status")

    def attendance_is_live(self, report: Report) -> bool:
        """Embedded attendance is mirrored once a report has left draft."""
        return report.status != ReportStatus.DRAFT

    @staticmethod
    def _next_stage(current: ReportStatus, action: WorkflowAction) -> ReportStatus:
        target = _NEXT_STAGE.get(current)
        if target is None:
            raise TransitionRejected(f"Cannot {action.value} a report in status '{current.value}'")
        return target

    @staticmethod
    def _require(current: ReportStatus, expected: ReportStatus, action: WorkflowAction) -> None:
        if current != expected:
            raise TransitionRejected(f"Cannot {action.value} a report in status '{current.value}'")

    @staticmethod
    def _change(action, current, target, stamps, comment, now) -> StatusChange:
        return StatusChange(
            action=action,
            from_status=current,
            to_status=target,
            stamps=stamps,
            comment=comment,
            changed_at=now,
        )
