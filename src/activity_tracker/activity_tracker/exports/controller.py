from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import optional_int
from ..common.web import user_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = user_required(container)
    exports = container.export_service

    @app.route("/api/export", methods=["GET"], endpoint="export_logs")
    @login_required
    def export_logs():
        args = request.args
        rows = exports.export_rows(
            acting_user_id=g.user.user_id,
            target_user_id=optional_int(args.get("user_id"), "user_id"),
            start=parse_iso_datetime(args["start"]) if args.get("start") else None,
            end=parse_iso_datetime(args["end"]) if args.get("end") else None,
        )
        return jsonify([row.to_dict() for row in rows])
