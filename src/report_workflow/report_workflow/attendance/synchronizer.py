from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.constants import CELL_REPORT_CHECKED_VIA
from ..core.enums import AttendanceType
from ..reports.model import MemberAttendanceSheet
from .model import AttendanceRecord, SyncOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceSynchronizer:
    """Mirror the member presence embedded in a report into attendance_records.

    Only rows carrying this synchronizer's provenance tag are ever deleted or
    overwritten. Re-running the same call yields the same rows.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def reconcile(
        self,
        report_id: str,
        attendance_date: date,
        attendance_type: AttendanceType,
        present_member_ids: Iterable[str],
        candidate_member_ids: Sequence[str],
        checked_via: str,
        actor_id: Optional[str],
    ) -> SyncOutcome:
        present_set = {str(m) for m in present_member_ids}
        candidates = list(dict.fromkeys(str(m) for m in candidate_member_ids))
        candidate_set = set(candidates)

        present = [m for m in candidates if m in present_set]
        absent = [m for m in candidates if m not in present_set]
        ignored = tuple(sorted(present_set - candidate_set))
        if ignored:
            logger.warning(
                "Ignoring %d present members outside the candidate roster",
                len(ignored),
                extra={"report_id": report_id, "operation": "attendance"},
            )

        try:
            # Deletes first, so a present->absent flip never leaves a stale row behind.
            deleted = self._attendance.delete_where(
                member_ids=absent,
                attendance_date=attendance_date,
                attendance_type=attendance_type,
                checked_via=checked_via,
            ) if absent else 0

            upserted = self._attendance.upsert_owned(
                [
                    AttendanceRecord(
                        member_id=member_id,
                        report_id=str(report_id),
                        attendance_date=attendance_date,
                        attendance_type=attendance_type,
                        is_present=True,
                        checked_by=actor_id,
                        checked_via=checked_via,
                    )
                    for member_id in present
                ]
            ) if present else 0
        except Exception as e:
            logger.exception(
                "Attendance sync failed for %s/%s",
                attendance_date.isoformat(),
                attendance_type.value,
                extra={"report_id": report_id, "operation": "attendance"},
            )
            return SyncOutcome(ok=False, error=str(e), ignored_member_ids=ignored)

        logger.info(
            "Attendance synced for %s/%s: %d present, %d removed",
            attendance_date.isoformat(),
            attendance_type.value,
            upserted,
            deleted,
            extra={"report_id": report_id, "operation": "attendance"},
        )
        return SyncOutcome(ok=True, upserted=upserted, deleted=deleted, ignored_member_ids=ignored)

    def reconcile_sheets(
        self,
        report_id: str,
        sheets: Sequence[MemberAttendanceSheet],
        actor_id: Optional[str],
        *,
        previous: Sequence[MemberAttendanceSheet] = (),
        checked_via: str = CELL_REPORT_CHECKED_VIA,
    ) -> SyncOutcome:
        """Reconcile every sheet of a report.

        `previous` is what the report carried before this edit. Members dropped
        from a roster and whole date/type sheets dropped from the report are
        treated as absent, so their owned rows go away too.
        """
        old_rosters = {(s.attendance_date, s.attendance_type): s.candidate_member_ids for s in previous}

        outcome = SyncOutcome(ok=True)
        for sheet in sheets:
            key = (sheet.attendance_date, sheet.attendance_type)
            candidates = list(sheet.candidate_member_ids) + list(old_rosters.pop(key, ()))
            outcome = outcome.merge(
                self.reconcile(
                    report_id,
                    sheet.attendance_date,
                    sheet.attendance_type,
                    sheet.present_member_ids,
                    candidates,
                    checked_via,
                    actor_id,
                )
            )

        for (attendance_date, attendance_type), roster in old_rosters.items():
            outcome = outcome.merge(
                self.reconcile(report_id, attendance_date, attendance_type, (), roster, checked_via, actor_id)
            )
        return outcome
