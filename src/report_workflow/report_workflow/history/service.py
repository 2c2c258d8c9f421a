from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import utc_now
from ..core.enums import ReportStatus
from .model import ApprovalHistoryEntry
from .repository import ApprovalHistoryRepository

logger = logging.getLogger(__name__)


class ApprovalHistoryRecorder:
    """Appends the audit trail of a report. A failed insert is logged and reported as False."""

    def __init__(self, history: ApprovalHistoryRepository):
        self._history = history

    def record(
        self,
        report_id: str,
        approver_id: str,
        from_status: ReportStatus,
        to_status: ReportStatus,
        comment: Optional[str] = None,
        *,
        at: Optional[datetime] = None,
    ) -> bool:
        entry = ApprovalHistoryEntry(
            report_id=str(report_id),
            approver_id=str(approver_id),
            from_status=from_status,
            to_status=to_status,
            comment=comment,
            created_at=at or utc_now(),
        )
        try:
            history_id = self._history.insert(entry)
        except Exception:
            logger.exception(
                "History %s -> %s not recorded",
                from_status.value,
                to_status.value,
                extra={"report_id": report_id, "operation": "history"},
            )
            return False
        logger.debug(
            "History %s -> %s recorded (id=%s)",
            from_status.value,
            to_status.value,
            history_id,
            extra={"report_id": report_id},
        )
        return history_id > 0

    def list_for_report(self, report_id: str) -> Sequence[ApprovalHistoryEntry]:
        return self._history.list_for_report(str(report_id))
