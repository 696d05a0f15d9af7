from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .core.constants import DEFAULT_REPORT_DAYS
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig

from .container import Container, build_container
from .payroll.controller import register as register_payroll
from .relationships.controller import register as register_relationships
from .reports.controller import register as register_reports
from .shifts.controller import register as register_shifts
from .timesheets.controller import register as register_timesheets

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StateConflictError, 409),
)


def _status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = _status_for(error)
        if status in (401, 403):
            logger.warning("Rejected request: %s", error)
        return jsonify({"success": False, "error": error.kind, "message": str(error)}), status

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        # Let Flask render routing errors (404/405) as usual.
        code = getattr(error, "code", None)
        if isinstance(code, int) and code < 500:
            return jsonify({"success": False, "error": "http_error", "message": str(error)}), code
        logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "internal_error", "message": "Internal server error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if container is None:
        root = Path(__file__).resolve().parents[3]
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=root / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=root / "database" / "seed.sql")
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            report_default_days=int(getattr(settings, "REPORT_DEFAULT_DAYS", DEFAULT_REPORT_DAYS)),
        )

    app.extensions["shift_payroll"] = container

    register_error_handlers(app)
    register_relationships(app, container)
    register_shifts(app, container)
    register_timesheets(app, container)
    register_payroll(app, container)
    register_reports(app, container)

    return app
