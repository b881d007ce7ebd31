from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from .config import get_settings_module
from .common.http import register_error_handlers
from .container import AuthConfig, Container, build_container
from .database.bootstrap import apply_schema, ensure_admin_profile, list_tables

from .attendance.controller import register as register_attendance
from .employees.controller import register as register_employees
from .health.controller import register as register_health
from .organizations.controller import register as register_organizations
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    seed_email = getattr(settings, "SEED_ADMIN_EMAIL", "")
    seed_password = getattr(settings, "SEED_ADMIN_PASSWORD", "")
    if bool(getattr(settings, "AUTO_SEED_DB", False)) and seed_email and seed_password:
        ensure_admin_profile(db_config, email=seed_email, password=seed_password)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run against pre-built services (tests use in-memory
    repositories); otherwise services are wired over MySQL from settings.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    CORS(app, origins=list(getattr(settings, "ALLOWED_ORIGINS", [])), supports_credentials=True)

    if container is None:
        auth_config = AuthConfig.from_settings(settings)
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings, db_config)
        container = build_container(db_config=db_config, auth_config=auth_config)

    register_error_handlers(app)

    register_health(app, container)
    register_users(app, container)
    register_organizations(app, container)
    register_employees(app, container)
    register_attendance(app, container)

    return app
