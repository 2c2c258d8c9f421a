"""Who may do what to a report, keyed on the closed Role/ReportStatus enums.

Every ReportStatus must appear in both tables below; the module refuses to
import otherwise, so a new status cannot silently fall through.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.enums import ReportStatus, Role, WorkflowAction
from ..reports.model import Report
from ..users.model import Actor
from .model import ActionPermission

# status -> (role that signs off this stage, status reached on approval)
_APPROVER_STAGES: dict[ReportStatus, Optional[Tuple[Role, ReportStatus]]] = {
    ReportStatus.DRAFT: None,
    ReportStatus.SUBMITTED: (Role.PRESIDENT, ReportStatus.COORDINATOR_REVIEWED),
    ReportStatus.COORDINATOR_REVIEWED: (Role.ACCOUNTANT, ReportStatus.MANAGER_APPROVED),
    ReportStatus.MANAGER_APPROVED: (Role.SUPER_ADMIN, ReportStatus.FINAL_APPROVED),
    ReportStatus.FINAL_APPROVED: None,
    ReportStatus.REJECTED: None,
}

_AUTHOR_ACTIONS: dict[ReportStatus, frozenset] = {
    ReportStatus.DRAFT: frozenset({WorkflowAction.EDIT, WorkflowAction.SUBMIT}),
    ReportStatus.SUBMITTED: frozenset({WorkflowAction.CANCEL}),
    ReportStatus.COORDINATOR_REVIEWED: frozenset(),
    ReportStatus.MANAGER_APPROVED: frozenset(),
    ReportStatus.FINAL_APPROVED: frozenset(),
    ReportStatus.REJECTED: frozenset({WorkflowAction.EDIT, WorkflowAction.RESUBMIT}),
}

# Approval queue per role. The top approver oversees every pending stage.
_PENDING_QUEUE: dict[Role, Tuple[ReportStatus, ...]] = {
    Role.SUPER_ADMIN: (
        ReportStatus.SUBMITTED,
        ReportStatus.COORDINATOR_REVIEWED,
        ReportStatus.MANAGER_APPROVED,
    ),
    Role.PRESIDENT: (ReportStatus.SUBMITTED,),
    Role.ACCOUNTANT: (ReportStatus.COORDINATOR_REVIEWED,),
    Role.TEAM_LEADER: (),
    Role.MEMBER: (),
}

_COMPLETED_QUEUE: dict[Role, Tuple[ReportStatus, ...]] = {
    Role.SUPER_ADMIN: (ReportStatus.FINAL_APPROVED,),
    Role.PRESIDENT: (
        ReportStatus.COORDINATOR_REVIEWED,
        ReportStatus.MANAGER_APPROVED,
        ReportStatus.FINAL_APPROVED,
    ),
    Role.ACCOUNTANT: (ReportStatus.MANAGER_APPROVED, ReportStatus.FINAL_APPROVED),
    Role.TEAM_LEADER: (),
    Role.MEMBER: (),
}


def _check_exhaustive() -> None:
    for name, table, enum in (
        ("_APPROVER_STAGES", _APPROVER_STAGES, ReportStatus),
        ("_AUTHOR_ACTIONS", _AUTHOR_ACTIONS, ReportStatus),
        ("_PENDING_QUEUE", _PENDING_QUEUE, Role),
        ("_COMPLETED_QUEUE", _COMPLETED_QUEUE, Role),
    ):
        missing = set(enum) - set(table)
        if missing:
            raise RuntimeError(f"{name} is missing entries for {sorted(m.value for m in missing)}")


_check_exhaustive()


class PermissionResolver:
    """Pure lookup over the fixed permission table. Never raises for a denial."""

    def resolve_for_role(self, role: Role, status: ReportStatus) -> Optional[ActionPermission]:
        """Approver permission for `role` at `status`, ignoring authorship."""
        stage = _APPROVER_STAGES[status]
        if stage is None or stage[0] != role:
            return None
        return ActionPermission(
            actions=frozenset({WorkflowAction.APPROVE, WorkflowAction.REJECT}),
            approve_to=stage[1],
        )

    def resolve(self, actor: Actor, report: Report) -> Optional[ActionPermission]:
        approver = self.resolve_for_role(actor.role, report.status)
        actions = set(approver.actions) if approver else set()

        if actor.user_id == report.author_id:
            actions |= _AUTHOR_ACTIONS[report.status]

        if not actions:
            return None
        return ActionPermission(
            actions=frozenset(actions),
            approve_to=approver.approve_to if approver else None,
        )

    def pending_statuses(self, role: Role) -> Tuple[ReportStatus, ...]:
        return _PENDING_QUEUE[role]

    def completed_statuses(self, role: Role) -> Tuple[ReportStatus, ...]:
        return _COMPLETED_QUEUE[role]
