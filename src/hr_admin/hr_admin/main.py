from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendance.geofence import OfficeLocation
from .common.datetime_utils import parse_hhmm
from .container import Container, build_container
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .database.bootstrap import apply_schema, ensure_demo_employees, list_tables
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .reports.controller import register as register_reports
from .tasks.controller import register as register_tasks


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
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
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_employees(db_config)
            app.logger.info("demo employees ready")

        container = build_container(
            db_config=db_config,
            office=OfficeLocation.from_settings(settings),
            late_after=parse_hhmm(getattr(settings, "LATE_AFTER", None)),
            grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        )

    register_employees(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_tasks(app, container)
    register_reports(app, container)

    return app
