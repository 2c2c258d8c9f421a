from __future__ import annotations

from typing import Protocol, Sequence

from .model import ApprovalHistoryEntry


class ApprovalHistoryRepository(Protocol):
    # Insert-only: there is deliberately no update or delete.
    def insert(self, entry: ApprovalHistoryEntry) -> int:
        raise NotImplementedError

    def list_for_report(self, report_id: str) -> Sequence[ApprovalHistoryEntry]:
        raise NotImplementedError
