from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import REPORT_LINK_TEMPLATE, REPORT_TYPE_LABELS
from ..core.enums import ReportStatus
from .model import RenderedMessage


@dataclass(frozen=True)
class MessageTemplate:
    title: str
    body: str


# Keyed by destination status. Statuses absent here produce no notification.
TEMPLATES: dict[ReportStatus, MessageTemplate] = {
    ReportStatus.SUBMITTED: MessageTemplate(
        title="New report submitted",
        body="{dept} {type} report has been submitted.",
    ),
    ReportStatus.COORDINATOR_REVIEWED: MessageTemplate(
        title="Tier-1 review complete",
        body="{dept} report is awaiting tier-2 approval.",
    ),
    ReportStatus.MANAGER_APPROVED: MessageTemplate(
        title="Tier-2 approval complete",
        body="{dept} report is awaiting final confirmation.",
    ),
    ReportStatus.FINAL_APPROVED: MessageTemplate(
        title="Report approved",
        body="The report has been finally approved.",
    ),
    ReportStatus.REJECTED: MessageTemplate(
        title="Report rejected",
        body="The report was rejected. Please review.",
    ),
}


def report_type_label(report_type: str) -> str:
    """Short display label; unknown identifiers pass through unchanged."""
    return REPORT_TYPE_LABELS.get(report_type, report_type)


def report_link(report_id: str) -> str:
    return REPORT_LINK_TEMPLATE.format(report_id=report_id)


def render(status: ReportStatus, *, report_id: str, department_name: str, report_type: str) -> Optional[RenderedMessage]:
    template = TEMPLATES.get(status)
    if template is None:
        return None
    # str.replace, not str.format: department names may contain braces.
    body = template.body.replace("{dept}", department_name).replace("{type}", report_type_label(report_type))
    return RenderedMessage(title=template.title, body=body, link=report_link(report_id))
