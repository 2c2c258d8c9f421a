from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.exceptions import ValidationError


def register(app: Flask, container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Login required"}), 401
            return view(*args, **kwargs)

        return wrapper

    @app.route("/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def notifications_list():
        unread_only = request.args.get("unread") in {"1", "true", "yes"}
        try:
            limit = int(request.args.get("limit", 50))
        except ValueError:
            raise ValidationError("limit must be an integer")
        items = container.notification_inbox.list_for_user(
            user_id=str(session["user_id"]), unread_only=unread_only, limit=limit
        )
        return jsonify(
            {
                "notifications": [
                    {
                        "id": n.notification_id,
                        "title": n.title,
                        "body": n.body,
                        "link": n.link,
                        "report_id": n.report_id,
                        "is_read": n.is_read,
                        "created_at": n.created_at.isoformat(),
                    }
                    for n in items
                ]
            }
        )

    @app.route("/notifications/unread-count", methods=["GET"], endpoint="notifications_unread_count")
    @login_required
    def notifications_unread_count():
        return jsonify({"count": container.notification_inbox.unread_count(user_id=str(session["user_id"]))})

    @app.route("/notifications/read", methods=["POST"], endpoint="notifications_mark_read")
    @login_required
    def notifications_mark_read():
        payload = request.get_json(silent=True) or {}
        ids = payload.get("ids") or []
        if not isinstance(ids, list):
            raise ValidationError("ids must be a list")
        updated = container.notification_inbox.mark_as_read(user_id=str(session["user_id"]), notification_ids=ids)
        return jsonify({"updated": updated})

    @app.route("/notifications/read-all", methods=["POST"], endpoint="notifications_mark_all_read")
    @login_required
    def notifications_mark_all_read():
        updated = container.notification_inbox.mark_all_as_read(user_id=str(session["user_id"]))
        return jsonify({"updated": updated})
