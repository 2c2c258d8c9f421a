from __future__ import annotations

import threading
from concurrent.futures import Future
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

import pytest

from src.report_workflow.report_workflow.attendance.synchronizer import AttendanceSynchronizer
from src.report_workflow.report_workflow.core.enums import ReportStatus, ReportType, Role
from src.report_workflow.report_workflow.history.service import ApprovalHistoryRecorder
from src.report_workflow.report_workflow.notifications.dispatcher import NotificationDispatcher
from src.report_workflow.report_workflow.notifications.model import Notification
from src.report_workflow.report_workflow.reports.model import Report
from src.report_workflow.report_workflow.users.model import User
from src.report_workflow.report_workflow.workflow.coordinator import WorkflowCoordinator

FIXED_NOW = datetime(2026, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


class FakeUserRepo:
    def __init__(self, users=()):
        self._users = {u.user_id: u for u in users}
        self.fail = False

    def get_by_id(self, user_id):
        return self._users.get(str(user_id))

    def list_active_ids_by_role(self, role):
        if self.fail:
            raise RuntimeError("user store down")
        return [u.user_id for u in self._users.values() if u.role == role and u.is_active]


class FakeReportRepo:
    def __init__(self, reports=()):
        self._reports = {r.report_id: r for r in reports}
        self.updates = []
        self.saved_sheets = {}
        self.fail = False

    def get(self, report_id):
        return self._reports.get(str(report_id))

    def update(self, report_id, fields):
        if self.fail:
            raise RuntimeError("report store down")
        report = self._reports.get(str(report_id))
        if report is None:
            return False
        self.updates.append((str(report_id), dict(fields)))
        values = dict(fields)
        values["status"] = ReportStatus(values["status"])
        self._reports[str(report_id)] = replace(report, **values)
        return True

    def save_member_sheets(self, report_id, sheets):
        self.saved_sheets[str(report_id)] = tuple(sheets)
        report = self._reports.get(str(report_id))
        if report is not None:
            self._reports[str(report_id)] = replace(report, member_sheets=tuple(sheets))

    def list_by_statuses(self, statuses, *, limit=200):
        rows = [
            {"report_id": r.report_id, "status": r.status.value, "department_name": r.department_name}
            for r in self._reports.values()
            if r.status in statuses
        ]
        return rows[:limit]


class FakeHistoryRepo:
    def __init__(self):
        self.entries = []
        self.fail = False
        self._lock = threading.Lock()

    def insert(self, entry):
        if self.fail:
            raise RuntimeError("history store down")
        with self._lock:
            history_id = len(self.entries) + 1
            self.entries.append(replace(entry, history_id=history_id))
        return history_id

    def list_for_report(self, report_id):
        return [e for e in self.entries if e.report_id == str(report_id)]


class FakeNotificationRepo:
    def __init__(self):
        self.rows = []
        self.fail = False
        self.bulk_calls = 0
        self._lock = threading.Lock()

    def _add(self, n):
        notification_id = len(self.rows) + 1
        self.rows.append(
            Notification(
                notification_id=notification_id,
                user_id=n.user_id,
                title=n.title,
                body=n.body,
                link=n.link,
                report_id=n.report_id,
                is_read=n.is_read,
                is_sent=n.is_sent,
                created_at=FIXED_NOW,
            )
        )
        return notification_id

    def insert(self, notification):
        with self._lock:
            return self._add(notification)

    def bulk_insert(self, notifications):
        if self.fail:
            raise RuntimeError("notification store down")
        with self._lock:
            self.bulk_calls += 1
            for n in notifications:
                self._add(n)
        return len(notifications)

    def list_for_user(self, user_id, *, unread_only=False, limit=50):
        rows = [n for n in self.rows if n.user_id == str(user_id) and not (unread_only and n.is_read)]
        return list(reversed(rows))[:limit]

    def count_unread(self, user_id):
        return sum(1 for n in self.rows if n.user_id == str(user_id) and not n.is_read)

    def mark_read(self, user_id, notification_ids):
        changed = 0
        for i, n in enumerate(self.rows):
            if n.notification_id in notification_ids and n.user_id == str(user_id) and not n.is_read:
                self.rows[i] = replace(n, is_read=True)
                changed += 1
        return changed

    def mark_all_read(self, user_id):
        return self.mark_read(user_id, [n.notification_id for n in self.rows])


class FakeAttendanceRepo:
    """Keyed on (member_id, attendance_date, attendance_type), like the unique index."""

    def __init__(self):
        self.rows = {}
        self.fail = False
        self._lock = threading.Lock()

    def upsert_owned(self, records):
        if self.fail:
            raise RuntimeError("attendance store down")
        with self._lock:
            for r in records:
                existing = self.rows.get(r.natural_key)
                if existing is None or existing.checked_via == r.checked_via:
                    self.rows[r.natural_key] = r
        return len(records)

    def delete_where(self, *, member_ids, attendance_date, attendance_type, checked_via):
        if self.fail:
            raise RuntimeError("attendance store down")
        with self._lock:
            doomed = [
                key
                for key, r in self.rows.items()
                if r.member_id in member_ids
                and r.attendance_date == attendance_date
                and r.attendance_type == attendance_type
                and r.checked_via == checked_via
            ]
            for key in doomed:
                del self.rows[key]
        return len(doomed)

    def list_for_date(self, *, attendance_date, attendance_type):
        return sorted(
            (r for r in self.rows.values() if r.attendance_date == attendance_date and r.attendance_type == attendance_type),
            key=lambda r: r.member_id,
        )


class FakePushClient:
    def __init__(self):
        self.calls = []
        self.fail = False

    def send(self, user_ids, *, title, body, link=None):
        if self.fail:
            raise RuntimeError("executor closed")
        self.calls.append({"user_ids": list(user_ids), "title": title, "body": body, "link": link})
        future: Future = Future()
        future.set_result(True)
        return future


def build_report(
    *,
    report_id: str = "r-1",
    status: ReportStatus = ReportStatus.DRAFT,
    author_id: str = "leader-1",
    report_type: ReportType = ReportType.WEEKLY,
    department_name: str = "Youth",
    **overrides,
) -> Report:
    return Report(
        report_id=report_id,
        department_id="d-1",
        author_id=author_id,
        report_type=report_type,
        report_date=date(2026, 3, 1),
        status=status,
        department_name=department_name,
        **overrides,
    )


@pytest.fixture
def make_report():
    return build_report


@pytest.fixture
def users_repo():
    return FakeUserRepo(
        [
            User(user_id="pres-1", name="President", email="p@example.org", role=Role.PRESIDENT),
            User(user_id="acct-1", name="Accountant", email="a@example.org", role=Role.ACCOUNTANT),
            User(user_id="acct-2", name="Accountant 2", email="a2@example.org", role=Role.ACCOUNTANT),
            User(user_id="acct-3", name="Retired", email="a3@example.org", role=Role.ACCOUNTANT, is_active=False),
            User(user_id="admin-1", name="Admin", email="s@example.org", role=Role.SUPER_ADMIN),
            User(user_id="leader-1", name="Leader", email="l@example.org", role=Role.TEAM_LEADER),
        ]
    )


@pytest.fixture
def history_repo():
    return FakeHistoryRepo()


@pytest.fixture
def notifications_repo():
    return FakeNotificationRepo()


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def push_client():
    return FakePushClient()


@pytest.fixture
def dispatcher(users_repo, notifications_repo, push_client):
    return NotificationDispatcher(users_repo, notifications_repo, push_client)


@pytest.fixture
def synchronizer(attendance_repo):
    return AttendanceSynchronizer(attendance_repo)


@pytest.fixture
def make_coordinator(history_repo, dispatcher, synchronizer):
    created = []

    def _make(*reports_in, repo: Optional[FakeReportRepo] = None):
        repo = repo or FakeReportRepo(reports_in)
        coordinator = WorkflowCoordinator(
            repo,
            ApprovalHistoryRecorder(history_repo),
            dispatcher,
            synchronizer,
            clock=lambda: FIXED_NOW,
        )
        created.append(coordinator)
        return coordinator, repo

    yield _make
    for c in created:
        c.shutdown()
