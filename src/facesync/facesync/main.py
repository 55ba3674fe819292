from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .attendance.controller import register as register_attendance
from .common.logging_config import setup_logging
from .container import Container, build_container
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def container_from_settings(settings) -> Container:
    return build_container(
        db_config=getattr(settings, "DB_CONFIG", None),
        backend=getattr(settings, "STORAGE_BACKEND", StorageBackend.MYSQL.value),
        match_threshold=float(getattr(settings, "MATCH_THRESHOLD")),
        landmark_dim=getattr(settings, "LANDMARK_DIM", None),
        landmark_point_dim=int(getattr(settings, "LANDMARK_POINT_DIM")),
        session_update_attempts=int(getattr(settings, "SESSION_UPDATE_ATTEMPTS")),
        session_lock_timeout=float(getattr(settings, "SESSION_LOCK_TIMEOUT")),
        template_cache_seconds=float(getattr(settings, "TEMPLATE_CACHE_SECONDS")),
        rosters=getattr(settings, "MEMORY_ROSTERS", None),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = load_settings()
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(app, getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_DIR", None))

    if container is None:
        backend = getattr(settings, "STORAGE_BACKEND", StorageBackend.MYSQL.value)
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s backend=%s db=%s@%s:%s/%s",
            settings_module, backend,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if backend == StorageBackend.MYSQL.value and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = container_from_settings(settings)

    register_attendance(app, container)
    app.extensions["facesync"] = container

    return app
