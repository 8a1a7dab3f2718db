"""
Practice controller - JSON endpoints for scheduling a club's practices.
"""

import logging

from flask import Blueprint, current_app, request

from practice_planner.core.api_utils import api_response, get_store
from practice_planner.schemas.dtos import (
    PracticeResponse,
    PracticeSummaryResponse,
    json_body,
    practice_patch_from_json,
)
from practice_planner.services.practice_scheduler import PracticeScheduler

logger = logging.getLogger(__name__)

practices_bp = Blueprint("practices", __name__, url_prefix="/clubs/<club_id>/practices")


def _scheduler() -> PracticeScheduler:
    return PracticeScheduler(get_store(), clock=current_app.config.get("PLANNER_CLOCK"))


@practices_bp.route("", methods=["GET"])
def list_practices(club_id):
    practices = _scheduler().list_for_club(club_id)
    return api_response(
        True,
        "Practices retrieved",
        [PracticeResponse.from_domain(p).to_dict() for p in practices],
    )


@practices_bp.route("", methods=["POST"])
def create_practice(club_id):
    """Schedule a practice. Body: ``{"scheduledAt": "2030-05-01T18:00:00Z"}``."""
    data = json_body(request.get_json(silent=True))
    created = _scheduler().create(club_id, data.get("scheduledAt"))
    return api_response(
        True, "Practice created", PracticeResponse.from_domain(created).to_dict(), 201
    )


@practices_bp.route("/<practice_id>", methods=["GET"])
def get_practice(club_id, practice_id):
    practice = _scheduler().get(practice_id, club_id)
    return api_response(
        True, "Practice retrieved", PracticeResponse.from_domain(practice).to_dict()
    )


@practices_bp.route("/<practice_id>", methods=["PATCH"])
def update_practice(club_id, practice_id):
    """Partial update. Body keys: ``scheduledAt``, ``status``."""
    patch = practice_patch_from_json(request.get_json(silent=True))
    updated = _scheduler().update(practice_id, club_id, patch)
    return api_response(
        True, "Practice updated", PracticeResponse.from_domain(updated).to_dict()
    )


@practices_bp.route("/<practice_id>", methods=["DELETE"])
def delete_practice(club_id, practice_id):
    _scheduler().delete(practice_id, club_id)
    return api_response(True, "Practice deleted")


@practices_bp.route("/<practice_id>/summary", methods=["GET"])
def practice_summary(club_id, practice_id):
    summary = _scheduler().summary(practice_id, club_id)
    return api_response(
        True, "Practice summary", PracticeSummaryResponse.from_domain(summary).to_dict()
    )
