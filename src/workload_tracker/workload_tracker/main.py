from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .analytics.controller import register as register_analytics
from .common.http import register_error_handlers
from .common.logging import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .memberships.controller import register as register_memberships
from .projects.controller import register as register_projects
from .users.controller import register as register_users
from .worklogs.controller import register as register_work_logs

logger = structlog.get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), json=bool(getattr(settings, "LOG_JSON", False)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "app_starting",
            settings=settings_module,
            db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema_ready", tables=len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            enforce_workload_cap=bool(getattr(settings, "ENFORCE_WORKLOAD_CAP", False)),
            top_workload_limit=int(getattr(settings, "TOP_WORKLOAD_LIMIT", 10)),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_projects(app, container)
    register_memberships(app, container)
    register_work_logs(app, container)
    register_analytics(app, container)

    return app
