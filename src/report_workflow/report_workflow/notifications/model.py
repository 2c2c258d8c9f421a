from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..core.enums import ReportStatus


@dataclass(frozen=True)
class Notification:
    """In-app notification owned by its recipient."""

    notification_id: int
    user_id: str
    title: str
    body: str
    link: Optional[str]
    report_id: Optional[str]
    is_read: bool
    is_sent: bool
    created_at: datetime


@dataclass(frozen=True)
class NewNotification:
    user_id: str
    title: str
    body: str
    link: Optional[str] = None
    report_id: Optional[str] = None
    is_read: bool = False
    is_sent: bool = False


@dataclass(frozen=True)
class ApprovalTransition:
    """Everything the dispatcher needs to know about one accepted transition."""

    report_id: str
    from_status: ReportStatus
    to_status: ReportStatus
    department_name: str
    report_type: str
    author_id: str


@dataclass(frozen=True)
class RenderedMessage:
    title: str
    body: str
    link: str


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of one dispatch.

    `push_task` is the detached push delivery; it is never awaited by the
    dispatcher and may still be running when the outcome is returned.
    """

    ok: bool
    recipients: Tuple[str, ...] = ()
    created: int = 0
    skipped: bool = False
    error: Optional[str] = None
    push_task: Optional["Future[bool]"] = None
