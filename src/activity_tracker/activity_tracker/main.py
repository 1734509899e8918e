from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_BUSINESS_DAY_CUTOFF_HOUR
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .exports.controller import register as register_exports
from .history.controller import register as register_history
from .preferences.controller import register as register_preferences
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    ``container`` lets tests inject services wired over in-memory storage;
    otherwise everything is built from the settings module chosen by APP_ENV.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    cutoff_hour = int(getattr(settings, "BUSINESS_DAY_CUTOFF_HOUR", DEFAULT_BUSINESS_DAY_CUTOFF_HOUR))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s cutoff_hour=%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
            cutoff_hour,
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)

        container = build_container(db_config=db_config, cutoff_hour=cutoff_hour)

    app.extensions["activity_tracker"] = container
    register_error_handlers(app)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_sessions(app, container)
    register_attendance(app, container)
    register_history(app, container)
    register_reports(app, container)
    register_exports(app, container)
    register_preferences(app, container)

    return app
