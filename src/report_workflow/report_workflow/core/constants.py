"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import ReportType

# Provenance tags written to attendance_records.checked_via
CELL_REPORT_CHECKED_VIA = "cell_report"
MANUAL_CHECKED_VIA = "manual"

REPORT_LINK_TEMPLATE = "/reports/{report_id}"

REPORT_TYPE_LABELS = {
    ReportType.WEEKLY.value: "weekly",
    ReportType.MEETING.value: "meeting",
    ReportType.EDUCATION.value: "education",
    ReportType.CELL_LEADER.value: "cell leader",
    ReportType.PROJECT.value: "project",
}

CELL_BOUND_REPORT_TYPES = frozenset({ReportType.CELL_LEADER})

DEFAULT_PUSH_TIMEOUT_SECONDS = 5.0
DEFAULT_WORKFLOW_MAX_WORKERS = 3
DEFAULT_PUSH_MAX_WORKERS = 4
DEFAULT_PENDING_LIMIT = 200
DEFAULT_COMPLETED_LIMIT = 20
DEFAULT_NOTIFICATION_LIMIT = 50
