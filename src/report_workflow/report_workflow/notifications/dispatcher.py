from __future__ import annotations

import logging

from ..core.enums import ReportStatus
from ..users.repository import UserRepository
from .model import ApprovalTransition, DispatchOutcome, NewNotification
from .push import PushClient
from .recipients import rule_for, unique_in_order
from .repository import NotificationRepository
from .templates import render

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Fan-out of one approval transition to in-app rows plus one push trigger.

    Quiet transitions (no template, no recipients) are successes, not errors.
    With zero recipients no push request is issued at all.
    """

    def __init__(self, users: UserRepository, notifications: NotificationRepository, push: PushClient):
        self._users = users
        self._notifications = notifications
        self._push = push

    def handles(self, status: ReportStatus) -> bool:
        return rule_for(status) is not None

    def dispatch(self, transition: ApprovalTransition) -> DispatchOutcome:
        log_ctx = {"report_id": transition.report_id, "operation": "notification"}

        message = render(
            transition.to_status,
            report_id=transition.report_id,
            department_name=transition.department_name,
            report_type=transition.report_type,
        )
        rule = rule_for(transition.to_status)
        if message is None or rule is None:
            logger.info("No notification for status %s", transition.to_status.value, extra=log_ctx)
            return DispatchOutcome(ok=True, skipped=True)

        try:
            recipients = tuple(unique_in_order(rule.resolve(transition, self._users)))
        except Exception as e:
            logger.exception("Recipient lookup failed for %r", rule, extra=log_ctx)
            return DispatchOutcome(ok=False, error=f"recipient lookup failed: {e}")

        if not recipients:
            logger.info("No recipients for %r; nothing to notify", rule, extra=log_ctx)
            return DispatchOutcome(ok=True, recipients=())

        rows = [
            NewNotification(
                user_id=user_id,
                title=message.title,
                body=message.body,
                link=message.link,
                report_id=transition.report_id,
            )
            for user_id in recipients
        ]

        created = 0
        error = None
        try:
            created = self._notifications.bulk_insert(rows)
        except Exception as e:
            logger.exception("Bulk notification insert failed for %d recipients", len(rows), extra=log_ctx)
            error = f"notification insert failed: {e}"

        # Push is triggered whether or not the in-app rows were written.
        push_task = None
        try:
            push_task = self._push.send(recipients, title=message.title, body=message.body, link=message.link)
        except Exception:
            logger.exception("Could not schedule push delivery", extra=log_ctx)

        return DispatchOutcome(
            ok=error is None,
            recipients=recipients,
            created=created,
            error=error,
            push_task=push_task,
        )
