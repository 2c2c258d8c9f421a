from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.synchronizer import AttendanceSynchronizer
from .core.constants import DEFAULT_PUSH_MAX_WORKERS, DEFAULT_PUSH_TIMEOUT_SECONDS, DEFAULT_WORKFLOW_MAX_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .history.mysql_history_repository import MySQLApprovalHistoryRepository
from .history.service import ApprovalHistoryRecorder
from .notifications.dispatcher import NotificationDispatcher
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.push import PushClient
from .notifications.service import NotificationInboxService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportQueryService
from .users.mysql_user_repository import MySQLUserRepository
from .workflow.coordinator import WorkflowCoordinator
from .workflow.permissions import PermissionResolver


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    reports_repo: MySQLReportRepository
    history_repo: MySQLApprovalHistoryRepository
    notifications_repo: MySQLNotificationRepository
    attendance_repo: MySQLAttendanceRepository

    push_client: PushClient
    history_recorder: ApprovalHistoryRecorder
    dispatcher: NotificationDispatcher
    synchronizer: AttendanceSynchronizer
    workflow: WorkflowCoordinator
    report_query_service: ReportQueryService
    notification_inbox: NotificationInboxService

    def shutdown(self) -> None:
        self.workflow.shutdown()
        self.push_client.shutdown(wait=False)


def build_container(
    *,
    db_config: dict,
    push_endpoint_url: Optional[str] = None,
    push_api_token: Optional[str] = None,
    push_timeout: float = DEFAULT_PUSH_TIMEOUT_SECONDS,
    push_max_workers: int = DEFAULT_PUSH_MAX_WORKERS,
    workflow_max_workers: int = DEFAULT_WORKFLOW_MAX_WORKERS,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    reports_repo = MySQLReportRepository(conn)
    history_repo = MySQLApprovalHistoryRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    push_client = PushClient(
        push_endpoint_url,
        api_token=push_api_token,
        timeout=push_timeout,
        max_workers=push_max_workers,
    )
    resolver = PermissionResolver()
    history_recorder = ApprovalHistoryRecorder(history_repo)
    dispatcher = NotificationDispatcher(users_repo, notifications_repo, push_client)
    synchronizer = AttendanceSynchronizer(attendance_repo)
    workflow = WorkflowCoordinator(
        reports_repo,
        history_recorder,
        dispatcher,
        synchronizer,
        resolver=resolver,
        max_workers=workflow_max_workers,
    )
    report_query_service = ReportQueryService(reports_repo, history_recorder, resolver=resolver)
    notification_inbox = NotificationInboxService(notifications_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        reports_repo=reports_repo,
        history_repo=history_repo,
        notifications_repo=notifications_repo,
        attendance_repo=attendance_repo,
        push_client=push_client,
        history_recorder=history_recorder,
        dispatcher=dispatcher,
        synchronizer=synchronizer,
        workflow=workflow,
        report_query_service=report_query_service,
        notification_inbox=notification_inbox,
    )
