"""
Health controller - liveness and database connectivity for monitoring.
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from practice_planner.core.api_utils import get_store

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("", methods=["GET"])
def health_check():
    """
    Report whether the service can reach its database.

    Status codes:
        200: Database reachable
        503: Database unreachable

    Note:
        - No authentication required (monitoring endpoint)
    """
    try:
        with get_store().engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(
            "Health check: database unreachable",
            extra={"context": {"endpoint": "/health", "error": str(e)}},
        )
        return jsonify({"status": "unhealthy", "database": "unreachable"}), 503

    return jsonify({"status": "healthy", "database": "ok"}), 200
