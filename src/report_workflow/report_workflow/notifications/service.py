from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.exceptions import ValidationError
from .model import NewNotification, Notification
from .repository import NotificationRepository
from .templates import report_link


class NotificationInboxService:
    """Use case: a user's notification inbox (read side + read-state updates)."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def list_for_user(
        self, *, user_id: str, unread_only: bool = False, limit: int = DEFAULT_NOTIFICATION_LIMIT
    ) -> Sequence[Notification]:
        if int(limit) <= 0:
            raise ValidationError("limit must be positive")
        return self._notifications.list_for_user(str(user_id), unread_only=unread_only, limit=int(limit))

    def unread_count(self, *, user_id: str) -> int:
        return self._notifications.count_unread(str(user_id))

    def mark_as_read(self, *, user_id: str, notification_ids: Sequence[int]) -> int:
        if not notification_ids:
            return 0
        try:
            ids = [int(i) for i in notification_ids]
        except (TypeError, ValueError):
            raise ValidationError("Notification ids must be integers")
        return self._notifications.mark_read(str(user_id), ids)

    def mark_all_as_read(self, *, user_id: str) -> int:
        return self._notifications.mark_all_read(str(user_id))

    def notify_user(
        self,
        *,
        user_id: str,
        title: str,
        body: str = "",
        report_id: Optional[str] = None,
        link: Optional[str] = None,
    ) -> int:
        """Single ad-hoc notification (e.g. an administrator message)."""
        title = require_non_empty(title, "Title")
        if link is None and report_id:
            link = report_link(report_id)
        return self._notifications.insert(
            NewNotification(user_id=str(user_id), title=title, body=body or "", link=link, report_id=report_id)
        )
