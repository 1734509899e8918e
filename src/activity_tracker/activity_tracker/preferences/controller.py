from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import json_body, user_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = user_required(container)
    preferences = container.preferences_service

    @app.route("/api/settings", methods=["GET"], endpoint="get_settings")
    @login_required
    def get_settings():
        saved = preferences.get(g.user.user_id)
        return jsonify(saved.to_dict() if saved else None)

    @app.route("/api/settings", methods=["POST"], endpoint="save_settings")
    @login_required
    def save_settings():
        saved = preferences.save(g.user.user_id, json_body().get("preferences"))
        return jsonify(saved.to_dict())
