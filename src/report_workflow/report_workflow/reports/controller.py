from __future__ import annotations

from functools import wraps
from typing import List

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceType, Role, WorkflowAction
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Actor
from ..workflow.model import WorkflowOutcome
from .model import MemberAttendanceSheet


_OUTCOME_STATUS = {
    WorkflowOutcome.APPLIED: 200,
    WorkflowOutcome.DENIED: 403,
    WorkflowOutcome.INVALID: 400,
    WorkflowOutcome.FAILED: 500,
}


def _current_actor() -> Actor:
    return Actor(user_id=str(session["user_id"]), role=Role(session["role"]))


def _parse_sheets(raw) -> List[MemberAttendanceSheet]:
    if not isinstance(raw, list):
        raise ValidationError("sheets must be a list")
    sheets = []
    for item in raw:
        try:
            sheets.append(
                MemberAttendanceSheet(
                    attendance_date=parse_iso_date(str(item["attendance_date"])),
                    attendance_type=AttendanceType(item["attendance_type"]),
                    present_member_ids=frozenset(str(m) for m in item.get("present_member_ids") or []),
                    candidate_member_ids=tuple(str(m) for m in item.get("candidate_member_ids") or []),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError):
            raise ValidationError("Invalid attendance sheet")
    return sheets


def register(app: Flask, container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session or "role" not in session:
                return jsonify({"error": "Login required"}), 401
            try:
                Role(session["role"])
            except ValueError:
                return jsonify({"error": "Unknown role"}), 403
            return view(*args, **kwargs)

        return wrapper

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(ValidationError)
    def _invalid(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    @app.route("/reports/<report_id>/transitions", methods=["POST"], endpoint="report_transition")
    @login_required
    def report_transition(report_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            action = WorkflowAction(payload.get("action"))
        except ValueError:
            return jsonify({"error": "Unknown action"}), 400
        comment = payload.get("comment")
        if comment is not None and not isinstance(comment, str):
            raise ValidationError("comment must be a string")

        report = container.report_query_service.get_report(report_id)
        result = container.workflow.execute(report, action, _current_actor(), comment)
        return jsonify(result.to_dict()), _OUTCOME_STATUS[result.outcome]

    @app.route("/reports/<report_id>/member-attendance", methods=["PUT"], endpoint="report_member_attendance")
    @login_required
    def report_member_attendance(report_id: str):
        payload = request.get_json(silent=True) or {}
        sheets = _parse_sheets(payload.get("sheets"))

        report = container.report_query_service.get_report(report_id)
        result = container.workflow.save_member_attendance(report, _current_actor(), sheets)
        return jsonify(result.to_dict()), _OUTCOME_STATUS[result.outcome]

    @app.route("/approvals/pending", methods=["GET"], endpoint="approvals_pending")
    @login_required
    def approvals_pending():
        rows = container.report_query_service.pending_for(Role(session["role"]))
        return jsonify({"reports": list(rows)})

    @app.route("/approvals/completed", methods=["GET"], endpoint="approvals_completed")
    @login_required
    def approvals_completed():
        rows = container.report_query_service.completed_for(Role(session["role"]))
        return jsonify({"reports": list(rows)})

    @app.route("/reports/<report_id>/history", methods=["GET"], endpoint="report_history")
    @login_required
    def report_history(report_id: str):
        entries = container.report_query_service.history_for(report_id)
        return jsonify(
            {
                "history": [
                    {
                        "history_id": e.history_id,
                        "approver_id": e.approver_id,
                        "from_status": e.from_status.value,
                        "to_status": e.to_status.value,
                        "comment": e.comment,
                        "created_at": e.created_at.isoformat(),
                    }
                    for e in entries
                ]
            }
        )
