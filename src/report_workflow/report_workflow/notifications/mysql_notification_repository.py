from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import NewNotification, Notification
from .repository import NotificationRepository

_INSERT_SQL = """
    INSERT INTO notifications(user_id, title, body, link, report_id, is_read, is_sent)
    VALUES(%s,%s,%s,%s,%s,%s,%s)
"""


def _params(n: NewNotification) -> tuple:
    return (n.user_id, n.title, n.body, n.link, n.report_id, int(n.is_read), int(n.is_sent))


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, notification: NewNotification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT_SQL, _params(notification))
            return int(cur.lastrowid)

    def bulk_insert(self, notifications: Sequence[NewNotification]) -> int:
        if not notifications:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            # mysql-connector rewrites executemany INSERTs into one multi-row statement.
            cur.executemany(_INSERT_SQL, [_params(n) for n in notifications])
            return int(cur.rowcount)

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        clauses = ["user_id=%s"]
        if unread_only:
            clauses.append("is_read=0")
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT notification_id, user_id, title, body, link, report_id, is_read, is_sent, created_at
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (str(user_id), int(limit)),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=str(r["user_id"]),
                    title=r["title"],
                    body=r.get("body") or "",
                    link=r.get("link"),
                    report_id=r.get("report_id"),
                    is_read=bool(r["is_read"]),
                    is_sent=bool(r["is_sent"]),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]

    def count_unread(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS cnt FROM notifications WHERE user_id=%s AND is_read=0",
                (str(user_id),),
            )
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0

    def mark_read(self, user_id: str, notification_ids: Sequence[int]) -> int:
        if not notification_ids:
            return 0
        ids = [int(i) for i in notification_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE notifications SET is_read=1
                WHERE user_id=%s AND notification_id IN ({in_clause(ids)})
                """,
                (str(user_id), *ids),
            )
            return int(cur.rowcount)

    def mark_all_read(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE user_id=%s AND is_read=0",
                (str(user_id),),
            )
            return int(cur.rowcount)
