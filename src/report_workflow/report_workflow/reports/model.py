from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.constants import CELL_BOUND_REPORT_TYPES
from ..core.enums import AttendanceType, ReportStatus, ReportType


@dataclass(frozen=True)
class ReportNotes:
    """Free-text sections of a weekly report."""

    sermon_title: Optional[str] = None
    sermon_scripture: Optional[str] = None
    discussion_notes: Optional[str] = None
    other_notes: Optional[str] = None


@dataclass(frozen=True)
class CellAttendanceRow:
    """Aggregated head counts for one cell, as typed into the report form."""

    cell_name: str
    registered: int = 0
    worship: int = 0
    meeting: int = 0
    note: Optional[str] = None


@dataclass(frozen=True)
class MemberAttendanceSheet:
    """Per-member presence embedded in a cell-leader report for one date/type.

    `candidate_member_ids` is everyone on the cell roster; members not in
    `present_member_ids` are treated as absent by the synchronizer.
    """

    attendance_date: date
    attendance_type: AttendanceType
    present_member_ids: frozenset = frozenset()
    candidate_member_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Report:
    """Domain entity: a departmental report moving through the approval workflow."""

    report_id: str
    department_id: str
    author_id: str
    report_type: ReportType
    report_date: date
    status: ReportStatus
    department_name: str = ""

    submitted_at: Optional[datetime] = None

    coordinator_id: Optional[str] = None
    coordinator_reviewed_at: Optional[datetime] = None
    coordinator_comment: Optional[str] = None

    manager_id: Optional[str] = None
    manager_approved_at: Optional[datetime] = None
    manager_comment: Optional[str] = None

    final_approver_id: Optional[str] = None
    final_approved_at: Optional[datetime] = None
    final_comment: Optional[str] = None

    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    notes: ReportNotes = field(default_factory=ReportNotes)
    cell_rows: Tuple[CellAttendanceRow, ...] = ()
    member_sheets: Tuple[MemberAttendanceSheet, ...] = ()

    @property
    def is_cell_bound(self) -> bool:
        return self.report_type in CELL_BOUND_REPORT_TYPES


# Columns a workflow transition is allowed to write.
WORKFLOW_COLUMNS = frozenset(
    {
        "status",
        "submitted_at",
        "coordinator_id",
        "coordinator_reviewed_at",
        "coordinator_comment",
        "manager_id",
        "manager_approved_at",
        "manager_comment",
        "final_approver_id",
        "final_approved_at",
        "final_comment",
        "rejected_by",
        "rejected_at",
        "rejection_reason",
    }
)
