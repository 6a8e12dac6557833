from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core.constants import DEFAULT_APP_ID
from .database.bootstrap import apply_schema, list_tables
from .identity.controller import register as register_identity
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["APP_ID"] = getattr(settings, "APP_ID", DEFAULT_APP_ID)

    log_level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=log_level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(log_level)

    store_backend = str(getattr(settings, "STORE_BACKEND", "memory"))
    db_config = getattr(settings, "DB_CONFIG", None)
    app.logger.info("settings=%s store=%s app_id=%s", settings_module, store_backend, app.config["APP_ID"])

    if store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        secret_key=app.secret_key,
        app_id=app.config["APP_ID"],
        store_backend=store_backend,
        db_config=db_config,
        token_max_age=getattr(settings, "TOKEN_MAX_AGE", None),
    )
    app.extensions["class_attendance"] = container

    register_identity(app, container)
    register_roster(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
