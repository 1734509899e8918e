from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NoActiveSessionError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

USER_HEADER = "X-User-Id"


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def status_for(error: DomainError) -> int:
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, NoActiveSessionError):
        return 409
    if isinstance(error, ValidationError):
        return 400
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        logger.warning("%s %s rejected (%s): %s", request.method, request.path, type(error).__name__, error)
        return json_error(str(error), status)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return json_error(error.description or error.name, error.code or 500)
        logger.exception("%s %s failed", request.method, request.path)
        return json_error("Internal server error", 500)


def user_required(container):
    """Resolve the caller from the ``X-User-Id`` header into ``g.user``.

    Identity is owned by an upstream gateway; this only maps the forwarded id
    to a user record.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            raw = (request.headers.get(USER_HEADER) or "").strip()
            if not raw.isdigit():
                return json_error("Missing or invalid user header", 401)
            g.user = container.access.resolve_caller(int(raw))
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    return request.get_json(silent=True) or {}
