"""
Set controller - JSON endpoints for a practice's sets and their dogs.
"""

import logging

from flask import Blueprint, request

from practice_planner.core.api_utils import api_response, get_store
from practice_planner.schemas.dtos import (
    SetDogResponse,
    SetResponse,
    dog_assignments_from_json,
    json_body,
    pairs_from_json,
)
from practice_planner.services.set_ordering import SetOrderingEngine

logger = logging.getLogger(__name__)

sets_bp = Blueprint("sets", __name__, url_prefix="/practices/<practice_id>/sets")


def _engine() -> SetOrderingEngine:
    return SetOrderingEngine(get_store())


@sets_bp.route("", methods=["GET"])
def list_sets(practice_id):
    sets = _engine().list_sets(practice_id)
    return api_response(
        True, "Sets retrieved", [SetResponse.from_domain(s).to_dict() for s in sets]
    )


@sets_bp.route("", methods=["POST"])
def create_set(practice_id):
    """Create a set.

    Body: ``{"order": 1, "resourceId": "...", "dogs": [{"dogId": "...", "order": 0}]}``.
    ``resourceId`` defaults to the club's default resource.
    """
    data = json_body(request.get_json(silent=True))
    created = _engine().create_set(
        practice_id,
        data.get("order", 0),
        resource_id=data.get("resourceId"),
        dogs=dog_assignments_from_json(data.get("dogs")),
    )
    return api_response(True, "Set created", SetResponse.from_domain(created).to_dict(), 201)


@sets_bp.route("/reorder", methods=["PUT"])
def reorder_sets(practice_id):
    """Body: ``{"sets": [{"setId": "...", "order": 2}, ...]}``."""
    pairs = pairs_from_json(request.get_json(silent=True), "sets", "setId", "order")
    updated = _engine().reorder_sets(practice_id, pairs)
    return api_response(
        True, "Sets reordered", [SetResponse.from_domain(s).to_dict() for s in updated]
    )


@sets_bp.route("/<set_id>", methods=["DELETE"])
def delete_set(practice_id, set_id):
    _engine().delete_set(set_id, practice_id)
    return api_response(True, "Set deleted")


@sets_bp.route("/<set_id>/setdogs", methods=["PUT"])
def assign_set_dogs(practice_id, set_id):
    """Replace the dogs of a set. Body: ``{"dogs": [...]}``."""
    data = json_body(request.get_json(silent=True))
    updated = _engine().assign_dogs(
        set_id, dog_assignments_from_json(data.get("dogs")), practice_id=practice_id
    )
    return api_response(True, "Set dogs assigned", SetResponse.from_domain(updated).to_dict())


@sets_bp.route("/<set_id>/setdogs/reorder", methods=["PUT"])
def reorder_set_dogs(practice_id, set_id):
    """Body: ``{"dogs": [{"dogId": "...", "order": 2}, ...]}``."""
    pairs = pairs_from_json(request.get_json(silent=True), "dogs", "dogId", "order")
    updated = _engine().reorder_set_dogs(set_id, pairs, practice_id=practice_id)
    return api_response(
        True,
        "Set dogs reordered",
        [SetDogResponse.from_domain(d).to_dict() for d in updated],
    )
