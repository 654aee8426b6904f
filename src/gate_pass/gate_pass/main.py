from __future__ import annotations

import atexit
import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.api import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_HOURS, MAX_PHOTO_BYTES
from .database.bootstrap import apply_schema, ensure_default_staff, list_tables
from .notifications.controller import register as register_notifications
from .passes.controller import register as register_passes
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run over already-built services (tests); otherwise
    a MySQL-backed container is built from the settings module and opened.
    """

    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = MAX_PHOTO_BYTES + 1024 * 1024
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))
    app.permanent_session_lifetime = timedelta(hours=int(getattr(settings, "SESSION_HOURS", DEFAULT_SESSION_HOURS)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_default_staff(db_config)

        upload_folder = Path(getattr(settings, "UPLOAD_FOLDER", REPO_ROOT / "uploads" / "profile_photos"))
        container = build_container(db_config=db_config, upload_folder=upload_folder, secret_key=app.secret_key)
        container.open()
        atexit.register(container.close)

    app.extensions["gate_pass"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_passes(app, container)
    register_notifications(app, container)

    return app
