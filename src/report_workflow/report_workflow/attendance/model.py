from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.enums import AttendanceType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one member's presence for a date and attendance type.

    Natural key: (member_id, attendance_date, attendance_type).
    """

    member_id: str
    attendance_date: date
    attendance_type: AttendanceType
    is_present: bool
    checked_by: Optional[str]
    checked_via: Optional[str]
    report_id: Optional[str] = None

    @property
    def natural_key(self) -> tuple:
        return (self.member_id, self.attendance_date, self.attendance_type)


@dataclass(frozen=True)
class SyncOutcome:
    ok: bool
    upserted: int = 0
    deleted: int = 0
    error: Optional[str] = None
    ignored_member_ids: Tuple[str, ...] = ()

    def merge(self, other: "SyncOutcome") -> "SyncOutcome":
        return SyncOutcome(
            ok=self.ok and other.ok,
            upserted=self.upserted + other.upserted,
            deleted=self.deleted + other.deleted,
            error="; ".join(e for e in (self.error, other.error) if e) or None,
            ignored_member_ids=self.ignored_member_ids + other.ignored_member_ids,
        )
