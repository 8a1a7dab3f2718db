"""
Common API utilities for consistent response formatting across all controllers.
"""

import logging
from typing import Any, Optional

from flask import Flask, current_app, jsonify

from practice_planner.core.exceptions import PlannerError

logger = logging.getLogger(__name__)


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def error_response(error: PlannerError) -> tuple:
    """Render a typed planner error with its status code."""
    body = {"success": False}
    body.update(error.to_dict())
    return jsonify(body), error.status_code


def register_error_handlers(app: Flask) -> None:
    """Map typed planner errors to JSON responses."""

    @app.errorhandler(PlannerError)
    def handle_planner_error(error: PlannerError):
        log = logger.error if error.status_code >= 500 else logger.info
        log(
            f"Request failed: {error.message}",
            extra={"context": {"kind": error.kind, "field": error.field}},
        )
        return error_response(error)


STORE_EXTENSION = "practice_planner.store"


def get_store():
    """Return the Store attached to the running app by ``create_app``."""
    return current_app.extensions[STORE_EXTENSION]
