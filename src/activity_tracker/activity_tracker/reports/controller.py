from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import parse_id_list
from ..common.web import user_required
from ..container import Container
from ..core.enums import Granularity, RangePreset
from ..core.exceptions import ValidationError


def _parse_enum(enum_cls, value, field_name: str):
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def register(app: Flask, container: Container) -> None:
    login_required = user_required(container)
    stats = container.stats_service

    @app.route("/api/stats", methods=["GET"], endpoint="stats")
    @login_required
    def get_stats():
        args = request.args
        user_ids = parse_id_list(args.get("user_ids"), "user_ids") or [g.user.user_id]
        preset = _parse_enum(RangePreset, args.get("preset"), "preset")

        if preset:
            result = stats.get_preset_stats(user_ids, preset, acting_user_id=g.user.user_id)
        else:
            if not args.get("start") or not args.get("end"):
                raise ValidationError("start and end are required without a preset")
            result = stats.get_stats(
                user_ids,
                parse_iso_datetime(args["start"]),
                parse_iso_datetime(args["end"]),
                _parse_enum(Granularity, args.get("granularity"), "granularity"),
                acting_user_id=g.user.user_id,
            )
        return jsonify(result.to_dict())
