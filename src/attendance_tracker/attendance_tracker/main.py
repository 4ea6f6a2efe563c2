from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_hhmm
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LATE_CUTOFF, DEFAULT_RECORDS_LIMIT, DEFAULT_TIMEZONE
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def _container_from_settings(settings) -> Container:
    db_config = getattr(settings, "DB_CONFIG")
    cutoff = getattr(settings, "LATE_CUTOFF", None)
    return build_container(
        db_config=db_config,
        timezone_name=getattr(settings, "ATTENDANCE_TIMEZONE", DEFAULT_TIMEZONE),
        late_cutoff=parse_hhmm(cutoff) if cutoff else DEFAULT_LATE_CUTOFF,
        history_limit=int(getattr(settings, "HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)),
        records_limit=int(getattr(settings, "RECORDS_LIMIT", DEFAULT_RECORDS_LIMIT)),
    )


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = _container_from_settings(settings)

    app.extensions["attendance_container"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_reports(app, container)
    register_dashboard(app, container)

    return app
