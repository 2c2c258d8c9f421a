from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ReportStatus


@dataclass(frozen=True)
class ApprovalHistoryEntry:
    """Append-only audit row: one per accepted transition, cancellation included."""

    report_id: str
    approver_id: str
    from_status: ReportStatus
    to_status: ReportStatus
    comment: Optional[str]
    created_at: datetime
    history_id: Optional[int] = None
