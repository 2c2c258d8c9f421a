from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_COMPLETED_LIMIT, DEFAULT_PENDING_LIMIT
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..history.model import ApprovalHistoryEntry
from ..history.service import ApprovalHistoryRecorder
from ..workflow.permissions import PermissionResolver
from .model import Report
from .repository import ReportRepository


class ReportQueryService:
    """Use case: approval queues and report lookup for the console."""

    def __init__(
        self,
        reports: ReportRepository,
        history: ApprovalHistoryRecorder,
        *,
        resolver: Optional[PermissionResolver] = None,
    ):
        self._reports = reports
        self._history = history
        self._resolver = resolver or PermissionResolver()

    def get_report(self, report_id: str) -> Report:
        report = self._reports.get(str(report_id))
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        return report

    def pending_for(self, role: Role, *, limit: int = DEFAULT_PENDING_LIMIT) -> Sequence[dict]:
        statuses = self._resolver.pending_statuses(role)
        if not statuses:
            return []
        return self._reports.list_by_statuses(statuses, limit=limit)

    def completed_for(self, role: Role, *, limit: int = DEFAULT_COMPLETED_LIMIT) -> Sequence[dict]:
        statuses = self._resolver.completed_statuses(role)
        if not statuses:
            return []
        return self._reports.list_by_statuses(statuses, limit=limit)

    def history_for(self, report_id: str) -> Sequence[ApprovalHistoryEntry]:
        # 404 for unknown reports rather than an empty trail
        self.get_report(report_id)
        return self._history.list_for_report(str(report_id))
