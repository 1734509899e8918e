from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.validators import optional_int
from ..common.web import json_body, user_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = user_required(container)
    attendance = container.attendance_service

    @app.route("/api/attendance/leave", methods=["POST"], endpoint="leave_for_day")
    @login_required
    def leave_for_day():
        record = attendance.leave(g.user.user_id)
        return jsonify(record.to_dict())

    @app.route("/api/attendance/resume", methods=["POST"], endpoint="resume_day")
    @login_required
    def resume_day():
        record = attendance.resume(g.user.user_id)
        return jsonify(record.to_dict())

    @app.route("/api/attendance/fix", methods=["POST"], endpoint="fix_day")
    @login_required
    def fix_day():
        data = json_body()
        target_user_id = optional_int(data.get("user_id"), "user_id") or g.user.user_id
        record = attendance.fix(
            target_user_id,
            parse_iso_date(data.get("date") or ""),
            parse_iso_datetime(data.get("leave_time") or ""),
            acting_user_id=g.user.user_id,
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/check", methods=["GET"], endpoint="check_daily_status")
    @login_required
    def check_daily_status():
        raw_date = request.args.get("date")
        work_date = parse_iso_date(raw_date) if raw_date else None
        user_id = optional_int(request.args.get("user_id"), "user_id") or g.user.user_id
        status = attendance.check_status(user_id, work_date, acting_user_id=g.user.user_id)
        return jsonify(status.to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="today_status")
    @login_required
    def today_status():
        return jsonify(attendance.today_status(g.user.user_id).to_dict())
