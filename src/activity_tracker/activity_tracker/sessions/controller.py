from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_int
from ..common.web import json_body, user_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = user_required(container)
    sessions = container.session_service

    @app.route("/api/sessions/active", methods=["GET"], endpoint="active_session")
    @login_required
    def active_session():
        entry = sessions.get_active(g.user.user_id)
        return jsonify(entry.to_dict() if entry else None)

    @app.route("/api/sessions/switch", methods=["POST"], endpoint="switch_session")
    @login_required
    def switch_session():
        category_id = require_int(json_body().get("category_id"), "category_id")
        entry = sessions.switch(g.user.user_id, category_id)
        return jsonify(entry.to_dict())

    @app.route("/api/sessions/stop", methods=["POST"], endpoint="stop_session")
    @login_required
    def stop_session():
        entry = sessions.stop(g.user.user_id)
        return jsonify(entry.to_dict())

    @app.route("/api/sessions/manual", methods=["POST"], endpoint="manual_session")
    @login_required
    def manual_session():
        data = json_body()
        category_id = require_int(data.get("category_id"), "category_id")
        start_time = parse_iso_datetime(data.get("start_time") or "")
        entry = sessions.add_manual(g.user.user_id, category_id, start_time)
        return jsonify(entry.to_dict()), 201

    @app.route("/api/sessions/<int:entry_id>", methods=["PATCH"], endpoint="edit_session")
    @login_required
    def edit_session(entry_id: int):
        category_id = require_int(json_body().get("category_id"), "category_id")
        entry = sessions.edit_category(entry_id, category_id, acting_user_id=g.user.user_id)
        return jsonify(entry.to_dict())

    @app.route("/api/sessions/<int:entry_id>", methods=["DELETE"], endpoint="delete_session")
    @login_required
    def delete_session(entry_id: int):
        sessions.delete(entry_id, acting_user_id=g.user.user_id)
        return jsonify({"success": True})

    @app.route("/api/monitor", methods=["GET"], endpoint="monitor")
    @login_required
    def monitor():
        rows = sessions.monitor(acting_user_id=g.user.user_id)
        return jsonify([row.to_dict() for row in rows])
