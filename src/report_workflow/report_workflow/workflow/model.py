from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from ..core.enums import ReportStatus, WorkflowAction
from ..reports.model import Report


@dataclass(frozen=True)
class ActionPermission:
    """What an actor may do with a report in its current status."""

    actions: frozenset
    approve_to: Optional[ReportStatus] = None

    def allows(self, action: WorkflowAction) -> bool:
        return action in self.actions


@dataclass(frozen=True)
class StatusChange:
    """Output of the status machine: the next status and the columns to stamp."""

    action: WorkflowAction
    from_status: ReportStatus
    to_status: ReportStatus
    stamps: Mapping[str, Any]
    comment: Optional[str]
    changed_at: datetime

    @property
    def is_submission(self) -> bool:
        """True when the report (re-)enters review; embedded attendance goes live then."""
        return self.action in (WorkflowAction.SUBMIT, WorkflowAction.RESUBMIT)

    @property
    def fields(self) -> dict:
        return {"status": self.to_status.value, **self.stamps}

    def apply_to(self, report: Report) -> Report:
        return replace(report, status=self.to_status, **self.stamps)


class WorkflowOutcome(str, Enum):
    APPLIED = "applied"
    DENIED = "denied"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class SideEffectResult:
    operation: str
    ok: bool
    error: Optional[str] = None
    detail: Any = None


@dataclass(frozen=True)
class WorkflowResult:
    """Composite result of one workflow request.

    DENIED / INVALID / FAILED mean nothing after the report write happened
    (FAILED: the write itself failed). APPLIED carries one entry per side effect.
    """

    outcome: WorkflowOutcome
    report: Optional[Report] = None
    change: Optional[StatusChange] = None
    message: Optional[str] = None
    side_effects: Tuple[SideEffectResult, ...] = field(default_factory=tuple)

    @property
    def applied(self) -> bool:
        return self.outcome == WorkflowOutcome.APPLIED

    @property
    def degraded(self) -> Tuple[SideEffectResult, ...]:
        return tuple(s for s in self.side_effects if not s.ok)

    def summary(self) -> str:
        if not self.applied:
            return f"{self.outcome.value}: {self.message or ''}".strip()
        return f"applied, {len(self.degraded)}/{len(self.side_effects)} side effects degraded"

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "message": self.message,
            "status": self.report.status.value if self.report else None,
            "summary": self.summary(),
            "side_effects": [
                {"operation": s.operation, "ok": s.ok, "error": s.error} for s in self.side_effects
            ],
        }

    @classmethod
    def denied(cls, report: Report, message: str) -> "WorkflowResult":
        return cls(outcome=WorkflowOutcome.DENIED, report=report, message=message)

    @classmethod
    def invalid(cls, report: Report, message: str) -> "WorkflowResult":
        return cls(outcome=WorkflowOutcome.INVALID, report=report, message=message)

    @classmethod
    def failed(cls, report: Report, message: str) -> "WorkflowResult":
        return cls(outcome=WorkflowOutcome.FAILED, report=report, message=message)
