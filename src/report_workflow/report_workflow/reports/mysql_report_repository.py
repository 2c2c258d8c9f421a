from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AttendanceType, ReportStatus, ReportType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, set_clause
from .model import WORKFLOW_COLUMNS, CellAttendanceRow, MemberAttendanceSheet, Report, ReportNotes
from .repository import ReportRepository

_REPORT_COLUMNS = """
    r.report_id, r.department_id, d.name AS department_name, r.author_id, r.report_type,
    r.report_date, r.status, r.submitted_at,
    r.coordinator_id, r.coordinator_reviewed_at, r.coordinator_comment,
    r.manager_id, r.manager_approved_at, r.manager_comment,
    r.final_approver_id, r.final_approved_at, r.final_comment,
    r.rejected_by, r.rejected_at, r.rejection_reason
"""


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, report_id: str) -> Optional[Report]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REPORT_COLUMNS}
                FROM reports r
                LEFT JOIN departments d ON d.department_id = r.department_id
                WHERE r.report_id=%s
                """,
                (str(report_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                SELECT sermon_title, sermon_scripture, discussion_notes, other_notes
                FROM report_notes WHERE report_id=%s
                """,
                (str(report_id),),
            )
            n = fetchone(cur)
            notes = ReportNotes(**n) if n else ReportNotes()

            cur.execute(
                """
                SELECT cell_name, registered, worship, meeting, note
                FROM report_cell_rows WHERE report_id=%s
                ORDER BY order_index ASC
                """,
                (str(report_id),),
            )
            cell_rows = tuple(
                CellAttendanceRow(
                    cell_name=c["cell_name"],
                    registered=int(c["registered"]),
                    worship=int(c["worship"]),
                    meeting=int(c["meeting"]),
                    note=c.get("note"),
                )
                for c in fetchall(cur)
            )

            cur.execute(
                """
                SELECT attendance_date, attendance_type, member_id, is_present
                FROM report_member_sheets WHERE report_id=%s
                ORDER BY attendance_date, attendance_type, member_id
                """,
                (str(report_id),),
            )
            member_sheets = _group_sheets(fetchall(cur))

        return Report(
            report_id=str(r["report_id"]),
            department_id=str(r["department_id"]),
            department_name=r.get("department_name") or "",
            author_id=str(r["author_id"]),
            report_type=ReportType(r["report_type"]),
            report_date=r["report_date"],
            status=ReportStatus(r["status"]),
            submitted_at=r.get("submitted_at"),
            coordinator_id=r.get("coordinator_id"),
            coordinator_reviewed_at=r.get("coordinator_reviewed_at"),
            coordinator_comment=r.get("coordinator_comment"),
            manager_id=r.get("manager_id"),
            manager_approved_at=r.get("manager_approved_at"),
            manager_comment=r.get("manager_comment"),
            final_approver_id=r.get("final_approver_id"),
            final_approved_at=r.get("final_approved_at"),
            final_comment=r.get("final_comment"),
            rejected_by=r.get("rejected_by"),
            rejected_at=r.get("rejected_at"),
            rejection_reason=r.get("rejection_reason"),
            notes=notes,
            cell_rows=cell_rows,
            member_sheets=member_sheets,
        )

    def update(self, report_id: str, fields: Mapping[str, Any]) -> bool:
        if not fields:
            return True
        assignments, params = set_clause(dict(fields), WORKFLOW_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE reports SET {assignments} WHERE report_id=%s",
                (*params, str(report_id)),
            )
            # MySQL reports 0 affected rows when values are unchanged; re-check existence.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM reports WHERE report_id=%s", (str(report_id),))
            return fetchone(cur) is not None

    def save_member_sheets(self, report_id: str, sheets: Sequence[MemberAttendanceSheet]) -> None:
        rows = []
        for sheet in sheets:
            for member_id in sheet.candidate_member_ids:
                rows.append(
                    (
                        str(report_id),
                        sheet.attendance_date,
                        sheet.attendance_type.value,
                        str(member_id),
                        1 if member_id in sheet.present_member_ids else 0,
                    )
                )

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM report_member_sheets WHERE report_id=%s", (str(report_id),))
            if rows:
                cur.executemany(
                    """
                    INSERT INTO report_member_sheets(report_id, attendance_date, attendance_type, member_id, is_present)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    rows,
                )

    def list_by_statuses(self, statuses: Sequence[ReportStatus], *, limit: int = 200) -> Sequence[dict]:
        if not statuses:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.report_id, r.report_type, r.report_date, r.status, r.created_at,
                       d.name AS department_name, u.name AS author_name
                FROM reports r
                LEFT JOIN departments d ON d.department_id = r.department_id
                LEFT JOIN users u ON u.user_id = r.author_id
                WHERE r.status IN ({in_clause(statuses)})
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                (*[s.value for s in statuses], int(limit)),
            )
            return [
                {
                    "report_id": str(r["report_id"]),
                    "report_type": r["report_type"],
                    "report_date": r["report_date"].strftime("%Y-%m-%d"),
                    "status": r["status"],
                    "created_at": r["created_at"].isoformat(),
                    "department_name": r.get("department_name") or "",
                    "author_name": r.get("author_name") or "",
                }
                for r in fetchall(cur)
            ]


def _group_sheets(rows: Sequence[dict]) -> tuple:
    grouped: dict[tuple, tuple[list, set]] = {}
    for r in rows:
        key = (r["attendance_date"], AttendanceType(r["attendance_type"]))
        candidates, present = grouped.setdefault(key, ([], set()))
        member_id = str(r["member_id"])
        candidates.append(member_id)
        if r["is_present"]:
            present.add(member_id)

    return tuple(
        MemberAttendanceSheet(
            attendance_date=day,
            attendance_type=kind,
            present_member_ids=frozenset(present),
            candidate_member_ids=tuple(candidates),
        )
        for (day, kind), (candidates, present) in grouped.items()
    )
