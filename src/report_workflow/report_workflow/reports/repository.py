from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import ReportStatus
from .model import MemberAttendanceSheet, Report


class ReportRepository(Protocol):
    def get(self, report_id: str) -> Optional[Report]:
        raise NotImplementedError

    def update(self, report_id: str, fields: Mapping[str, Any]) -> bool:
        """Partial update of workflow columns. Returns False when no row matched."""

        raise NotImplementedError

    def save_member_sheets(self, report_id: str, sheets: Sequence[MemberAttendanceSheet]) -> None:
        """Replace the per-member presence sheets attached to a report."""

        raise NotImplementedError

    def list_by_statuses(self, statuses: Sequence[ReportStatus], *, limit: int = 200) -> Sequence[dict]:
        """Return UI rows (joined with department/author), newest first."""

        raise NotImplementedError
