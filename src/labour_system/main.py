from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.log import configure_logging
from .common.web import register_error_handlers
from .core.constants import API_PREFIX
from .database.bootstrap import bootstrap

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .labourers.controller import register as register_labourers
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_salary
from .performance.controller import register as register_performance
from .projects.controller import register as register_projects
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing `container` skips the Mongo wiring and startup bootstrap, which is
    how the API tests run against in-memory repositories.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["COOKIE_SECURE"] = bool(getattr(settings, "COOKIE_SECURE", False))

    if container is None:
        mongo_config = getattr(settings, "MONGO_CONFIG")
        logger.info("settings=%s database=%s", settings_module, mongo_config.get("database"))
        container = build_container(mongo_config=mongo_config, settings=settings)
        bootstrap(
            container.conn,
            init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
            seed_db=bool(getattr(settings, "AUTO_SEED_DB", False)),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_labourers(app, container)
    register_projects(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_performance(app, container)
    register_salary(app, container)
    register_notifications(app, container)

    @app.route(f"{API_PREFIX}/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
