from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for workflow permissions."""

    SUPER_ADMIN = "super_admin"
    PRESIDENT = "president"
    ACCOUNTANT = "accountant"
    TEAM_LEADER = "team_leader"
    MEMBER = "member"


class ReportStatus(str, Enum):
    """Persisted report status. Values must match the stored strings verbatim."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    COORDINATOR_REVIEWED = "coordinator_reviewed"
    MANAGER_APPROVED = "manager_approved"
    FINAL_APPROVED = "final_approved"
    REJECTED = "rejected"


class WorkflowAction(str, Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    RESUBMIT = "resubmit"
    EDIT = "edit"


class ReportType(str, Enum):
    WEEKLY = "weekly"
    MEETING = "meeting"
    EDUCATION = "education"
    CELL_LEADER = "cell_leader"
    PROJECT = "project"


class AttendanceType(str, Enum):
    WORSHIP = "worship"
    MEETING = "meeting"
