from __future__ import annotations

from typing import Sequence

from ..core.enums import ReportStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ApprovalHistoryEntry
from .repository import ApprovalHistoryRepository


class MySQLApprovalHistoryRepository(ApprovalHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, entry: ApprovalHistoryEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO approval_history(report_id, approver_id, from_status, to_status, comment, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.report_id,
                    entry.approver_id,
                    entry.from_status.value,
                    entry.to_status.value,
                    entry.comment,
                    entry.created_at,
                ),
            )
            return int(cur.lastrowid)

    def list_for_report(self, report_id: str) -> Sequence[ApprovalHistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT history_id, report_id, approver_id, from_status, to_status, comment, created_at
                FROM approval_history
                WHERE report_id=%s
                ORDER BY created_at ASC, history_id ASC
                """,
                (str(report_id),),
            )
            return [
                ApprovalHistoryEntry(
                    history_id=int(r["history_id"]),
                    report_id=str(r["report_id"]),
                    approver_id=str(r["approver_id"]),
                    from_status=ReportStatus(r["from_status"]),
                    to_status=ReportStatus(r["to_status"]),
                    comment=r.get("comment"),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
