"""
Application factory for the practice planner JSON API.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics

from practice_planner import __version__
from practice_planner.controllers import (
    attendance_bp,
    health_bp,
    practices_bp,
    resources_bp,
    sets_bp,
)
from practice_planner.core.api_utils import STORE_EXTENSION, register_error_handlers
from practice_planner.core.config import load_settings, log_settings
from practice_planner.core.logging_config import setup_logging
from practice_planner.db.session import create_store

logger = logging.getLogger(__name__)


def _init_sentry(environment: str) -> None:
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": environment}},
        )
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=environment,
        release=os.getenv("GIT_SHA", __version__),
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info("Sentry initialized", extra={"context": {"environment": environment}})


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Build the Flask app, its Store and its blueprints.

    Args:
        config_overrides: Settings taking precedence over the environment,
            e.g. ``{"DATABASE_URL": "sqlite:///:memory:"}``. Extra keys
            (``TESTING``, ``PLANNER_CLOCK``...) land in ``app.config``.
    """
    if not os.getenv("DATABASE_URL"):
        load_dotenv()

    settings = load_settings(config_overrides)
    environment = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.update(settings)

    setup_logging(
        app=app,
        log_level=settings["LOG_LEVEL"],
        enable_sql_echo=settings["SQL_ECHO"],
        log_to_file=settings["LOG_TO_FILE"],
        use_json_format=settings["LOG_JSON"],
    )
    log_settings(settings)
    _init_sentry(environment)

    if settings.get("METRICS_ENABLED", True):
        # Registry per app so repeated create_app calls do not collide
        metrics = PrometheusMetrics(app, registry=CollectorRegistry())
        metrics.info("app_info", "Application information", version=__version__)

    store = create_store(settings["DATABASE_URL"], echo=False)
    app.extensions[STORE_EXTENSION] = store

    register_error_handlers(app)
    for blueprint in (resources_bp, practices_bp, sets_bp, attendance_bp, health_bp):
        app.register_blueprint(blueprint)

    logger.info(
        "Application created",
        extra={"context": {"environment": environment, "version": __version__}},
    )
    return app


def main() -> None:
    """Run the development server (PORT, default 5000)."""
    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))


if __name__ == "__main__":
    main()
