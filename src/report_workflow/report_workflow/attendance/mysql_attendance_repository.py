from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import AttendanceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_owned(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            # checked_via is never reassigned here, so the IF() guards see the stored value.
            cur.executemany(
                """
                INSERT INTO attendance_records(
                    member_id, report_id, attendance_date, attendance_type, is_present, checked_by, checked_via
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    report_id=IF(checked_via <=> VALUES(checked_via), VALUES(report_id), report_id),
                    is_present=IF(checked_via <=> VALUES(checked_via), VALUES(is_present), is_present),
                    checked_by=IF(checked_via <=> VALUES(checked_via), VALUES(checked_by), checked_by)
                """,
                [
                    (
                        r.member_id,
                        r.report_id,
                        r.attendance_date,
                        r.attendance_type.value,
                        int(r.is_present),
                        r.checked_by,
                        r.checked_via,
                    )
                    for r in records
                ],
            )
            return len(records)

    def delete_where(
        self,
        *,
        member_ids: Sequence[str],
        attendance_date: date,
        attendance_type: AttendanceType,
        checked_via: str,
    ) -> int:
        if not member_ids:
            return 0
        ids = [str(m) for m in member_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                DELETE FROM attendance_records
                WHERE attendance_date=%s
                  AND attendance_type=%s
                  AND checked_via=%s
                  AND member_id IN ({in_clause(ids)})
                """,
                (attendance_date, attendance_type.value, checked_via, *ids),
            )
            return int(cur.rowcount)

    def list_for_date(self, *, attendance_date: date, attendance_type: AttendanceType) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT member_id, report_id, attendance_date, attendance_type, is_present, checked_by, checked_via
                FROM attendance_records
                WHERE attendance_date=%s AND attendance_type=%s
                ORDER BY member_id
                """,
                (attendance_date, attendance_type.value),
            )
            return [
                AttendanceRecord(
                    member_id=str(r["member_id"]),
                    report_id=r.get("report_id"),
                    attendance_date=r["attendance_date"],
                    attendance_type=AttendanceType(r["attendance_type"]),
                    is_present=bool(r["is_present"]),
                    checked_by=r.get("checked_by"),
                    checked_via=r.get("checked_via"),
                )
                for r in fetchall(cur)
            ]
