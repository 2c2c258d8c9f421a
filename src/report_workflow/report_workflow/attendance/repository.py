from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import AttendanceType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert_owned(self, records: Sequence[AttendanceRecord]) -> int:
        """Insert-or-update keyed on the natural key.

        An existing row is only overwritten when its `checked_via` equals the
        incoming one; rows written through another channel are left as they are.
        """

        raise NotImplementedError

    def delete_where(
        self,
        *,
        member_ids: Sequence[str],
        attendance_date: date,
        attendance_type: AttendanceType,
        checked_via: str,
    ) -> int:
        """Delete rows matching the natural key AND the given provenance."""

        raise NotImplementedError

    def list_for_date(self, *, attendance_date: date, attendance_type: AttendanceType) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
