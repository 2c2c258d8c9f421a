from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from ..attendance.synchronizer import AttendanceSynchronizer
from ..common.datetime_utils import utc_now
from ..core.constants import DEFAULT_WORKFLOW_MAX_WORKERS
from ..core.enums import WorkflowAction
from ..core.exceptions import TransitionRejected
from ..history.service import ApprovalHistoryRecorder
from ..notifications.dispatcher import NotificationDispatcher
from ..notifications.model import ApprovalTransition
from ..reports.model import MemberAttendanceSheet, Report
from ..reports.repository import ReportRepository
from ..users.model import Actor
from .model import SideEffectResult, StatusChange, WorkflowResult, WorkflowOutcome
from .permissions import PermissionResolver
from .status_machine import StatusMachine

logger = logging.getLogger(__name__)

HISTORY = "history"
NOTIFICATION = "notification"
ATTENDANCE = "attendance"


class WorkflowCoordinator:
    """Runs one transition request end to end.

    permission -> status change -> report write -> side effects in parallel.
    Side effects (history, notifications, attendance) never undo the report
    write; their failures are logged and reported in the result.
    """

    def __init__(
        self,
        reports: ReportRepository,
        history: ApprovalHistoryRecorder,
        dispatcher: NotificationDispatcher,
        synchronizer: AttendanceSynchronizer,
        *,
        resolver: Optional[PermissionResolver] = None,
        machine: Optional[StatusMachine] = None,
        executor: Optional[Executor] = None,
        max_workers: int = DEFAULT_WORKFLOW_MAX_WORKERS,
        clock: Callable = utc_now,
    ):
        self._reports = reports
        self._history = history
        self._dispatcher = dispatcher
        self._synchronizer = synchronizer
        self._resolver = resolver or PermissionResolver()
        self._machine = machine or StatusMachine()
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="workflow")
        self._owns_executor = executor is None
        self._clock = clock

    def execute(
        self,
        report: Report,
        action: WorkflowAction,
        actor: Actor,
        comment: Optional[str] = None,
    ) -> WorkflowResult:
        log_ctx = {"report_id": report.report_id, "action": action.value, "actor_id": actor.user_id}

        if action == WorkflowAction.EDIT:
            return WorkflowResult.invalid(report, "Edits are saved without a status transition")

        permission = self._resolver.resolve(actor, report)
        if permission is None or not permission.allows(action):
            logger.info("Denied %s on report in status %s", action.value, report.status.value, extra=log_ctx)
            return WorkflowResult.denied(report, f"Not permitted to {action.value} this report")

        try:
            change = self._machine.apply(report, action, actor, comment, now=self._clock())
        except TransitionRejected as e:
            return WorkflowResult.invalid(report, str(e))

        try:
            written = self._reports.update(report.report_id, change.fields)
        except Exception as e:
            logger.exception("Report update failed", extra=log_ctx)
            return WorkflowResult.failed(report, f"Report update failed: {e}")
        if not written:
            logger.error("Report update matched no row", extra=log_ctx)
            return WorkflowResult.failed(report, "Report no longer exists")

        updated = change.apply_to(report)
        side_effects = self._run_side_effects(updated, change, actor)

        for effect in side_effects:
            if not effect.ok:
                logger.error(
                    "Side effect %s degraded: %s",
                    effect.operation,
                    effect.error,
                    extra={**log_ctx, "operation": effect.operation},
                )

        logger.info(
            "Report %s -> %s",
            change.from_status.value,
            change.to_status.value,
            extra=log_ctx,
        )
        return WorkflowResult(
            outcome=WorkflowOutcome.APPLIED,
            report=updated,
            change=change,
            side_effects=side_effects,
        )

    def save_member_attendance(
        self,
        report: Report,
        actor: Actor,
        sheets: Sequence[MemberAttendanceSheet],
    ) -> WorkflowResult:
        """Edit path for cell-bound reports: store the sheets and re-sync attendance."""
        log_ctx = {"report_id": report.report_id, "action": WorkflowAction.EDIT.value, "actor_id": actor.user_id}

        permission = self._resolver.resolve(actor, report)
        if permission is None or not permission.allows(WorkflowAction.EDIT):
            return WorkflowResult.denied(report, "Not permitted to edit this report")
        if not report.is_cell_bound:
            return WorkflowResult.invalid(report, "Only cell-bound reports carry member attendance")
        for sheet in sheets:
            stray = set(sheet.present_member_ids) - set(sheet.candidate_member_ids)
            if stray:
                return WorkflowResult.invalid(report, "Present members must belong to the cell roster")

        try:
            self._reports.save_member_sheets(report.report_id, sheets)
        except Exception as e:
            logger.exception("Saving member attendance failed", extra=log_ctx)
            return WorkflowResult.failed(report, f"Saving member attendance failed: {e}")

        updated = replace(report, member_sheets=tuple(sheets))
        side_effects: Tuple[SideEffectResult, ...] = ()
        if self._machine.attendance_is_live(updated):
            side_effects = (
                self._guard(
                    ATTENDANCE,
                    updated.report_id,
                    lambda: self._synchronizer.reconcile_sheets(
                        updated.report_id,
                        updated.member_sheets,
                        actor.user_id,
                        previous=report.member_sheets,
                    ),
                ),
            )
        return WorkflowResult(outcome=WorkflowOutcome.APPLIED, report=updated, side_effects=side_effects)

    def shutdown(self, *, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _run_side_effects(self, report: Report, change: StatusChange, actor: Actor) -> Tuple[SideEffectResult, ...]:
        jobs: List[Tuple[str, Callable]] = [
            (
                HISTORY,
                lambda: self._history.record(
                    report.report_id,
                    actor.user_id,
                    change.from_status,
                    change.to_status,
                    change.comment,
                    at=change.changed_at,
                ),
            )
        ]

        if self._dispatcher.handles(change.to_status):
            transition = ApprovalTransition(
                report_id=report.report_id,
                from_status=change.from_status,
                to_status=change.to_status,
                department_name=report.department_name,
                report_type=report.report_type.value,
                author_id=report.author_id,
            )
            jobs.append((NOTIFICATION, lambda: self._dispatcher.dispatch(transition)))

        if report.is_cell_bound and change.is_submission and report.member_sheets:
            jobs.append(
                (
                    ATTENDANCE,
                    lambda: self._synchronizer.reconcile_sheets(report.report_id, report.member_sheets, actor.user_id),
                )
            )

        futures: List[Tuple[str, Future]] = [
            (name, self._executor.submit(self._guard, name, report.report_id, fn)) for name, fn in jobs
        ]
        return tuple(future.result() for _, future in futures)

    @staticmethod
    def _guard(operation: str, report_id: str, fn: Callable) -> SideEffectResult:
        try:
            result = fn()
        except Exception as e:
            logger.exception(
                "Side effect %s raised",
                operation,
                extra={"report_id": report_id, "operation": operation},
            )
            return SideEffectResult(operation=operation, ok=False, error=str(e) or type(e).__name__)

        if isinstance(result, bool):
            return SideEffectResult(operation=operation, ok=result, error=None if result else f"{operation} not written")
        ok = bool(getattr(result, "ok", True))
        return SideEffectResult(operation=operation, ok=ok, error=getattr(result, "error", None), detail=result)
