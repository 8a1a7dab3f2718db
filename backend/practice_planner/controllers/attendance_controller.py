"""
Attendance controller - JSON endpoints for per-dog practice attendance.
"""

import logging

from flask import Blueprint, request

from practice_planner.core.api_utils import api_response, get_store
from practice_planner.schemas.dtos import AttendanceResponse, json_body, pairs_from_json
from practice_planner.services.attendance_ledger import AttendanceLedger

logger = logging.getLogger(__name__)

attendance_bp = Blueprint(
    "attendance",
    __name__,
    url_prefix="/clubs/<club_id>/practices/<practice_id>/attendance",
)


def _ledger() -> AttendanceLedger:
    return AttendanceLedger(get_store())


@attendance_bp.route("", methods=["GET"])
def get_attendance(club_id, practice_id):
    """Stored statuses keyed by dog id, e.g. ``{"<dog>": "Yes"}``."""
    statuses = _ledger().get_all(practice_id, club_id=club_id)
    return api_response(
        True,
        "Attendance retrieved",
        {dog_id: status.label for dog_id, status in statuses.items()},
    )


@attendance_bp.route("", methods=["PUT"])
def update_attendance_batch(club_id, practice_id):
    """Body: ``{"updates": [{"dogId": "...", "status": "Yes"}, ...]}``. All or nothing."""
    updates = pairs_from_json(request.get_json(silent=True), "updates", "dogId", "status")
    rows = _ledger().upsert_batch(practice_id, updates, club_id=club_id)
    return api_response(
        True,
        "Attendance updated",
        [AttendanceResponse.from_domain(r).to_dict() for r in rows],
    )


@attendance_bp.route("/<dog_id>", methods=["PUT"])
def update_attendance(club_id, practice_id, dog_id):
    """Body: ``{"status": "No"}`` (name or 0-2)."""
    data = json_body(request.get_json(silent=True))
    row = _ledger().upsert_one(practice_id, dog_id, data.get("status"), club_id=club_id)
    return api_response(
        True, "Attendance updated", AttendanceResponse.from_domain(row).to_dict()
    )
