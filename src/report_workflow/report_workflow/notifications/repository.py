from __future__ import annotations

from typing import Protocol, Sequence

from .model import NewNotification, Notification


class NotificationRepository(Protocol):
    def insert(self, notification: NewNotification) -> int:
        raise NotImplementedError

    def bulk_insert(self, notifications: Sequence[NewNotification]) -> int:
        """Write all rows in one round trip. Returns the number of rows written."""

        raise NotImplementedError

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError

    def count_unread(self, user_id: str) -> int:
        raise NotImplementedError

    def mark_read(self, user_id: str, notification_ids: Sequence[int]) -> int:
        """Only rows owned by `user_id` are touched."""

        raise NotImplementedError

    def mark_all_read(self, user_id: str) -> int:
        raise NotImplementedError
