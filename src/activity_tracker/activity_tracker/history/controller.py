from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_int
from ..common.web import user_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = user_required(container)

    @app.route("/api/history", methods=["GET"], endpoint="history")
    @login_required
    def history():
        raw_date = request.args.get("date")
        work_date = parse_iso_date(raw_date) if raw_date else container.attendance_service.work_date(now_local())
        user_id = optional_int(request.args.get("user_id"), "user_id") or g.user.user_id

        timeline = container.history_service.get_history(user_id, work_date, acting_user_id=g.user.user_id)
        return jsonify(
            {
                "user_id": user_id,
                "date": work_date.isoformat(),
                "entries": [t.to_dict() for t in timeline],
            }
        )
