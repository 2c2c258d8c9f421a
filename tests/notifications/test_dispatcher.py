from concurrent.futures import Future

import pytest

from src.report_workflow.report_workflow.core.enums import ReportStatus
from src.report_workflow.report_workflow.notifications.dispatcher import NotificationDispatcher
from src.report_workflow.report_workflow.notifications.model import ApprovalTransition
from src.report_workflow.report_workflow.notifications.templates import render


def _transition(to_status, *, from_status=ReportStatus.SUBMITTED, department_name="Youth", report_type="weekly"):
    return ApprovalTransition(
        report_id="r-7",
        from_status=from_status,
        to_status=to_status,
        department_name=department_name,
        report_type=report_type,
        author_id="leader-1",
    )


def test_submission_goes_to_tier1_holders(dispatcher, notifications_repo, push_client):
    outcome = dispatcher.dispatch(_transition(ReportStatus.SUBMITTED, from_status=ReportStatus.DRAFT))

    assert outcome.ok
    assert outcome.recipients == ("pres-1",)
    assert notifications_repo.rows[0].title == "New report submitted"
    assert notifications_repo.rows[0].body == "Youth weekly report has been submitted."
    assert notifications_repo.rows[0].report_id == "r-7"
    assert outcome.push_task.result() is True
    assert push_client.calls[0]["title"] == "New report submitted"


def test_inactive_users_are_not_notified(dispatcher, notifications_repo):
    outcome = dispatcher.dispatch(_transition(ReportStatus.COORDINATOR_REVIEWED))

    assert outcome.recipients == ("acct-1", "acct-2")
    assert notifications_repo.bulk_calls == 1
    assert {n.body for n in notifications_repo.rows} == {"Youth report is awaiting tier-2 approval."}


def test_draft_is_a_quiet_transition(dispatcher, notifications_repo, push_client):
    outcome = dispatcher.dispatch(_transition(ReportStatus.DRAFT))

    assert outcome.ok and outcome.skipped
    assert notifications_repo.rows == []
    assert push_client.calls == []
    assert not dispatcher.handles(ReportStatus.DRAFT)


def test_zero_recipients_sends_no_push(dispatcher, users_repo, notifications_repo, push_client):
    users_repo._users = {}

    outcome = dispatcher.dispatch(_transition(ReportStatus.MANAGER_APPROVED))

    assert outcome.ok
    assert outcome.recipients == ()
    assert notifications_repo.rows == []
    assert push_client.calls == []


def test_unscheduled_push_does_not_fail_dispatch(dispatcher, push_client, notifications_repo):
    push_client.fail = True

    outcome = dispatcher.dispatch(_transition(ReportStatus.REJECTED))

    assert outcome.ok
    assert outcome.push_task is None
    assert [n.user_id for n in notifications_repo.rows] == ["leader-1"]


def test_template_bodies_use_labels_and_keep_braces():
    msg = render(ReportStatus.SUBMITTED, report_id="r-1", department_name="Cell {A}", report_type="cell_leader")

    assert msg.body == "Cell {A} cell leader report has been submitted."
    assert msg.link == "/reports/r-1"


@pytest.mark.parametrize(
    "status,title",
    [
        (ReportStatus.MANAGER_APPROVED, "Tier-2 approval complete"),
        (ReportStatus.FINAL_APPROVED, "Report approved"),
        (ReportStatus.REJECTED, "Report rejected"),
    ],
)
def test_template_titles(status, title):
    assert render(status, report_id="r-1", department_name="Youth", report_type="weekly").title == title


def test_unknown_report_type_passes_through():
    msg = render(ReportStatus.SUBMITTED, report_id="r-1", department_name="Youth", report_type="retreat")

    assert msg.body == "Youth retreat report has been submitted."


class _SlowPushClient:
    """Hands back a future the test resolves after dispatch has returned."""

    def __init__(self):
        self.pending = Future()

    def send(self, user_ids, *, title, body, link=None):
        return self.pending


def test_dispatch_returns_before_push_completes(users_repo, notifications_repo):
    push = _SlowPushClient()
    dispatcher = NotificationDispatcher(users_repo, notifications_repo, push)

    outcome = dispatcher.dispatch(_transition(ReportStatus.REJECTED))

    assert outcome.ok
    assert outcome.push_task is push.pending
    assert not outcome.push_task.done()
    assert [n.user_id for n in notifications_repo.rows] == ["leader-1"]

    push.pending.set_result(False)
    assert outcome.ok
