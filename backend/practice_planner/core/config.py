"""
Centralized configuration module for application-wide settings.

Every setting is read from the environment. ``create_app`` calls
``load_settings`` once at startup; tests pass overrides instead of mutating
the environment.
"""

import logging
import os
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")

DEFAULT_DATABASE_URL = "sqlite:///./practice_planner.db"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


# ===========================
# Database Configuration
# ===========================


def get_database_url() -> str:
    """
    Get the SQLAlchemy database URL.

    Environment Variables:
        DATABASE_URL: Any SQLAlchemy URL. PostgreSQL in production,
            SQLite for local development and tests.
            Default: 'sqlite:///./practice_planner.db'
    """
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_sql_echo_enabled() -> bool:
    """Whether SQL statements and their timings are logged (SQL_ECHO)."""
    return _env_flag("SQL_ECHO", "false")


# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'Europe/Paris', 'UTC')
            Naive datetimes received from callers are interpreted in this zone.
    """
    tz_name = os.getenv("TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


# Global timezone instance - initialized once at import time
APP_TZ = get_app_timezone()


# ===========================
# Logging Configuration
# ===========================


def get_log_level() -> str:
    """Logging level name (LOG_LEVEL, default INFO)."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_json_enabled() -> bool:
    """Emit console logs as JSON (LOG_JSON, default false)."""
    return _env_flag("LOG_JSON", "false")


def get_log_to_file_enabled() -> bool:
    """Write rotating log files under ./logs (LOG_TO_FILE, default false)."""
    return _env_flag("LOG_TO_FILE", "false")


# ===========================
# Slow Query Alerts
# ===========================


def get_slow_query_threshold_ms() -> int:
    """Threshold above which a query is reported (ALERT_QUERY_MS_THRESHOLD)."""
    try:
        return int(os.getenv("ALERT_QUERY_MS_THRESHOLD", "100"))
    except (TypeError, ValueError):
        return 100


def get_slow_query_alerts_enabled() -> bool:
    return _env_flag("ALERT_SLOW_QUERY_ENABLED", "true")


# ===========================
# Metrics
# ===========================


def get_metrics_enabled() -> bool:
    """
    Whether the Prometheus ``/metrics`` endpoint is exposed.

    Environment Variables:
        METRICS_ENABLED: 'true' or 'false' (default 'true')
    """
    return _env_flag("METRICS_ENABLED", "true")


# ===========================
# Aggregated settings
# ===========================


def load_settings(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Collect every setting into one mapping.

    Args:
        overrides: Values that take precedence over the environment
            (keys use the same upper-case names as the environment).

    Examples:
        >>> settings = load_settings({"DATABASE_URL": "sqlite:///:memory:"})
        >>> settings["DATABASE_URL"]
        'sqlite:///:memory:'
    """
    settings: Dict[str, Any] = {
        "DATABASE_URL": get_database_url(),
        "SQL_ECHO": get_sql_echo_enabled(),
        "LOG_LEVEL": get_log_level(),
        "LOG_JSON": get_log_json_enabled(),
        "LOG_TO_FILE": get_log_to_file_enabled(),
        "APP_TZ": APP_TZ,
        "METRICS_ENABLED": get_metrics_enabled(),
    }
    if overrides:
        settings.update(overrides)
    return settings


def log_settings(settings: Dict[str, Any]) -> None:
    """Log the active configuration without leaking credentials."""
    logger.info(
        "Configuration initialized",
        extra={
            "context": {
                "database_url": mask_url_password(str(settings["DATABASE_URL"])),
                "timezone": str(settings["APP_TZ"]),
                "log_level": settings["LOG_LEVEL"],
                "sql_echo": settings["SQL_ECHO"],
            }
        },
    )


def mask_url_password(url: str) -> str:
    """Mask the password part of a database URL for logging."""
    import re

    return re.sub(r"(://[^:/?#]+):[^@]*@", r"\1:***@", url)
