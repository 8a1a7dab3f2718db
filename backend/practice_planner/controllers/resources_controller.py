"""
Resource controller - JSON endpoints for a club's resource pool.

Handles HTTP concerns only; every rule lives in ResourcePool.
"""

import logging

from flask import Blueprint, request

from practice_planner.core.api_utils import api_response, get_store
from practice_planner.schemas.dtos import (
    ResourceResponse,
    json_body,
    resource_patch_from_json,
)
from practice_planner.services.resource_pool import ResourcePool

logger = logging.getLogger(__name__)

resources_bp = Blueprint("resources", __name__, url_prefix="/clubs/<club_id>/resources")


def _pool() -> ResourcePool:
    return ResourcePool(get_store())


@resources_bp.route("", methods=["GET"])
def list_resources(club_id):
    resources = _pool().list_resources(club_id)
    return api_response(
        True,
        "Resources retrieved",
        [ResourceResponse.from_domain(r).to_dict() for r in resources],
    )


@resources_bp.route("", methods=["POST"])
def create_resource(club_id):
    """Create a resource. Body: ``{"name": "Main field"}``."""
    data = json_body(request.get_json(silent=True))
    created = _pool().create_resource(club_id, data.get("name"))
    return api_response(
        True, "Resource created", ResourceResponse.from_domain(created).to_dict(), 201
    )


@resources_bp.route("/<resource_id>", methods=["GET"])
def get_resource(club_id, resource_id):
    resource = _pool().get_resource(resource_id, club_id)
    return api_response(
        True, "Resource retrieved", ResourceResponse.from_domain(resource).to_dict()
    )


@resources_bp.route("/<resource_id>", methods=["PATCH"])
def update_resource(club_id, resource_id):
    """Partial update. Body keys: ``name``, ``isDefault``."""
    patch = resource_patch_from_json(request.get_json(silent=True))
    updated = _pool().update(resource_id, club_id, patch)
    return api_response(
        True, "Resource updated", ResourceResponse.from_domain(updated).to_dict()
    )


@resources_bp.route("/<resource_id>/default", methods=["PUT"])
def set_default_resource(club_id, resource_id):
    promoted = _pool().set_as_default(resource_id, club_id)
    return api_response(
        True, "Default resource updated", ResourceResponse.from_domain(promoted).to_dict()
    )


@resources_bp.route("/<resource_id>", methods=["DELETE"])
def delete_resource(club_id, resource_id):
    _pool().delete(resource_id, club_id)
    return api_response(True, "Resource deleted")
