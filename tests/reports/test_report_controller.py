from types import SimpleNamespace

import pytest
from flask import Flask

from src.report_workflow.report_workflow.core.enums import ReportStatus, ReportType
from src.report_workflow.report_workflow.history.service import ApprovalHistoryRecorder
from src.report_workflow.report_workflow.notifications.controller import register as register_notifications
from src.report_workflow.report_workflow.notifications.service import NotificationInboxService
from src.report_workflow.report_workflow.reports.controller import register as register_reports
from src.report_workflow.report_workflow.reports.service import ReportQueryService

from conftest import FakeReportRepo


@pytest.fixture
def app(make_report, make_coordinator, history_repo, notifications_repo):
    repo = FakeReportRepo(
        [
            make_report(report_id="r-1", status=ReportStatus.SUBMITTED),
            make_report(report_id="r-2", status=ReportStatus.REJECTED, report_type=ReportType.CELL_LEADER),
        ]
    )
    coordinator, _ = make_coordinator(repo=repo)
    container = SimpleNamespace(
        workflow=coordinator,
        report_query_service=ReportQueryService(repo, ApprovalHistoryRecorder(history_repo)),
        notification_inbox=NotificationInboxService(notifications_repo),
    )
    flask_app = Flask(__name__)
    flask_app.secret_key = "test"
    register_reports(flask_app, container)
    register_notifications(flask_app, container)
    return flask_app


def _client(app, user_id, role):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
    return client


def test_anonymous_requests_are_refused(app):
    assert app.test_client().post("/reports/r-1/transitions", json={"action": "approve"}).status_code == 401


def test_approve_then_history_and_inbox(app):
    president = _client(app, "pres-1", "president")

    res = president.post("/reports/r-1/transitions", json={"action": "approve", "comment": "ok"})
    assert res.status_code == 200
    assert res.get_json()["status"] == "coordinator_reviewed"

    history = president.get("/reports/r-1/history").get_json()["history"]
    assert [(h["from_status"], h["to_status"]) for h in history] == [("submitted", "coordinator_reviewed")]

    accountant = _client(app, "acct-1", "accountant")
    assert accountant.get("/notifications/unread-count").get_json() == {"count": 1}
    items = accountant.get("/notifications").get_json()["notifications"]
    assert items[0]["link"] == "/reports/r-1"
    assert accountant.post("/notifications/read", json={"ids": [items[0]["id"]]}).get_json() == {"updated": 1}
    assert accountant.get("/notifications/unread-count").get_json() == {"count": 0}


def test_outcomes_map_to_status_codes(app):
    accountant = _client(app, "acct-1", "accountant")
    president = _client(app, "pres-1", "president")

    assert accountant.post("/reports/r-1/transitions", json={"action": "approve"}).status_code == 403
    assert president.post("/reports/r-1/transitions", json={"action": "reject", "comment": ""}).status_code == 400
    assert president.post("/reports/r-1/transitions", json={"action": "launch"}).status_code == 400
    assert president.post("/reports/nope/transitions", json={"action": "approve"}).status_code == 404


def test_pending_queue_follows_role(app):
    rows = _client(app, "pres-1", "president").get("/approvals/pending").get_json()["reports"]
    assert [r["report_id"] for r in rows] == ["r-1"]

    assert _client(app, "leader-1", "team_leader").get("/approvals/pending").get_json() == {"reports": []}


def test_member_attendance_edit(app):
    leader = _client(app, "leader-1", "team_leader")
    body = {
        "sheets": [
            {
                "attendance_date": "2026-03-01",
                "attendance_type": "worship",
                "present_member_ids": ["m-1"],
                "candidate_member_ids": ["m-1", "m-2"],
            }
        ]
    }

    res = leader.put("/reports/r-2/member-attendance", json=body)

    assert res.status_code == 200
    assert res.get_json()["side_effects"][0]["operation"] == "attendance"
    assert leader.put("/reports/r-2/member-attendance", json={"sheets": [{"attendance_type": "x"}]}).status_code == 400


def test_non_string_comment_is_a_bad_request(app):
    president = _client(app, "pres-1", "president")

    res = president.post("/reports/r-1/transitions", json={"action": "approve", "comment": 42})

    assert res.status_code == 400
    assert president.get("/reports/r-1/history").get_json() == {"history": []}
