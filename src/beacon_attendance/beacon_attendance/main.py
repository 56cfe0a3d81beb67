from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .analytics.controller import register as register_analytics
from .attendance.controller import register as register_attendance
from .common.http import json_error
from .core.exceptions import StorageError
from .container import Container, build_container
from .core.constants import DEFAULT_TOTAL_ENROLLED
from .database.bootstrap import apply_schema, list_tables
from .database.seed import seed_demo_data
from .reports.controller import register as register_reports
from .rooms.controller import register as register_rooms
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings_module: Optional[str] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    storage_backend = getattr(settings, "STORAGE_BACKEND", "mysql")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_TOTAL_ENROLLED"] = int(getattr(settings, "DEFAULT_TOTAL_ENROLLED", DEFAULT_TOTAL_ENROLLED))

    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s storage=%s", settings_module, storage_backend)

    if container is None:
        if storage_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, storage_backend=storage_backend)

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_demo_data(container.users_repo, container.rooms_repo)

    app.extensions["beacon_attendance"] = container

    register_users(app, container)
    register_rooms(app, container)
    register_attendance(app, container)
    register_analytics(app, container)
    register_reports(app, container)

    @app.errorhandler(StorageError)
    def storage_error(e):
        logger.warning("Storage failure on %s: %s", request.path, e)
        return json_error("Storage temporarily unavailable", 503)

    @app.errorhandler(Exception)
    def unhandled_error(e):
        if isinstance(e, HTTPException):
            return json_error(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s", request.path)
        return json_error("Internal server error", 500)

    return app
