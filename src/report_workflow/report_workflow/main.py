from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_config import configure_logging
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    configure_logging(
        getattr(settings, "LOG_LEVEL", "INFO"),
        json_format=bool(getattr(settings, "LOG_JSON", False)),
    )
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
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        push_endpoint_url=getattr(settings, "PUSH_ENDPOINT_URL", None),
        push_api_token=getattr(settings, "PUSH_API_TOKEN", None),
        push_timeout=float(getattr(settings, "PUSH_TIMEOUT_SECONDS", 5)),
        push_max_workers=int(getattr(settings, "PUSH_MAX_WORKERS", 4)),
        workflow_max_workers=int(getattr(settings, "WORKFLOW_MAX_WORKERS", 3)),
    )
    atexit.register(container.shutdown)

    register_reports(app, container)
    register_notifications(app, container)

    return app
