"""
Resource pool service.

Keeps the club's resources consistent with one rule: a club that owns at
least one resource has exactly one default resource. Every write runs in a
single Store transaction with the club row locked, so concurrent promotions
and deletions of the same club are serialized.
"""

import logging
from typing import List, Optional

from practice_planner.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from practice_planner.core.validation import parse_identifier, validate_required_text
from practice_planner.db.session import Store
from practice_planner.domain.entities import Resource, ResourcePatch
from practice_planner.repositories import ClubRepository, ResourceRepository

logger = logging.getLogger(__name__)


class ResourcePool:
    """Application service for a club's resources (locations, rooms).

    Business Rules:
    - The first resource of a club becomes its default
    - Promoting a resource demotes every other resource of the club atomically
    - The default can only change by promoting another resource
    - The last resource and the default resource cannot be deleted
    """

    def __init__(self, store: Store):
        self.store = store

    def _lock_club(self, session, club_id: str) -> None:
        if not ClubRepository(session).lock(club_id):
            raise NotFoundError("Club not found", "club_id")

    def _require_resource(
        self, resources: ResourceRepository, resource_id: str, club_id: str
    ) -> Resource:
        resource = resources.get(resource_id, club_id)
        if not resource:
            raise NotFoundError("Resource not found", "resource_id")
        return resource

    @staticmethod
    def _promote(resources: ResourceRepository, resource_id: str, club_id: str) -> Resource:
        resources.clear_defaults(club_id, except_id=resource_id)
        promoted = resources.update_fields(resource_id, club_id, {"is_default": True})
        if promoted is None:
            raise InternalError("Resource disappeared during promotion", "resource_id")
        return promoted

    def create_resource(self, club_id: str, name: str) -> Resource:
        """Create a resource; it becomes the default when the club has none."""
        club_id = parse_identifier(club_id, "club_id")
        name = validate_required_text(name, "name")

        with self.store.transaction() as session:
            self._lock_club(session, club_id)
            resources = ResourceRepository(session)
            make_default = resources.get_default(club_id) is None
            created = resources.add(club_id, name, make_default)

        logger.info(
            "Resource created",
            extra={
                "context": {
                    "club_id": club_id,
                    "resource_id": created.id,
                    "is_default": created.is_default,
                }
            },
        )
        return created

    def set_as_default(self, resource_id: str, club_id: str) -> Resource:
        """Make the resource the club's only default."""
        resource_id = parse_identifier(resource_id, "resource_id")
        club_id = parse_identifier(club_id, "club_id")

        with self.store.transaction() as session:
            self._lock_club(session, club_id)
            resources = ResourceRepository(session)
            self._require_resource(resources, resource_id, club_id)
            promoted = self._promote(resources, resource_id, club_id)

        logger.info(
            "Default resource changed",
            extra={"context": {"club_id": club_id, "resource_id": resource_id}},
        )
        return promoted

    def update(self, resource_id: str, club_id: str, patch: ResourcePatch) -> Resource:
        """Apply the fields present in ``patch``.

        ``is_default=True`` runs the same promotion as ``set_as_default``.
        ``is_default=False`` is a no-op on a non-default resource and a
        ConflictError on the current default.
        """
        resource_id = parse_identifier(resource_id, "resource_id")
        club_id = parse_identifier(club_id, "club_id")

        values = patch.provided()
        if "name" in values:
            values["name"] = validate_required_text(values["name"], "name")
        if "is_default" in values and not isinstance(values["is_default"], bool):
            raise ValidationError("is_default must be a boolean", "is_default")

        with self.store.transaction() as session:
            self._lock_club(session, club_id)
            resources = ResourceRepository(session)
            current = self._require_resource(resources, resource_id, club_id)

            make_default = values.pop("is_default", None)
            if make_default is True and not current.is_default:
                current = self._promote(resources, resource_id, club_id)
            elif make_default is False and current.is_default:
                raise ConflictError(
                    "A club must keep one default resource; promote another resource instead",
                    "is_default",
                )

            if values:
                updated = resources.update_fields(resource_id, club_id, values)
                if updated is None:
                    raise InternalError("Resource disappeared during update", "resource_id")
                current = updated

        logger.info(
            "Resource updated",
            extra={
                "context": {
                    "club_id": club_id,
                    "resource_id": resource_id,
                    "fields": sorted(patch.provided()),
                }
            },
        )
        return current

    def delete(self, resource_id: str, club_id: str) -> None:
        """Delete a non-default resource of a club that keeps at least one other."""
        resource_id = parse_identifier(resource_id, "resource_id")
        club_id = parse_identifier(club_id, "club_id")

        with self.store.transaction() as session:
            self._lock_club(session, club_id)
            resources = ResourceRepository(session)
            resource = self._require_resource(resources, resource_id, club_id)

            if resources.count_by_club(club_id) <= 1:
                raise ConflictError("Cannot delete the last resource of a club")
            if resource.is_default:
                raise ConflictError(
                    "Cannot delete the default resource; promote another resource first"
                )
            if resources.is_referenced_by_sets(resource_id):
                raise ConflictError("Resource is still used by practice sets")

            resources.delete(resource_id, club_id)

        logger.info(
            "Resource deleted",
            extra={"context": {"club_id": club_id, "resource_id": resource_id}},
        )

    def list_resources(self, club_id: str) -> List[Resource]:
        """Resources of the club ordered by name."""
        club_id = parse_identifier(club_id, "club_id")
        with self.store.transaction() as session:
            if not ClubRepository(session).exists(club_id):
                raise NotFoundError("Club not found", "club_id")
            return ResourceRepository(session).list_by_club(club_id)

    def get_resource(self, resource_id: str, club_id: str) -> Resource:
        resource_id = parse_identifier(resource_id, "resource_id")
        club_id = parse_identifier(club_id, "club_id")
        with self.store.transaction() as session:
            return self._require_resource(ResourceRepository(session), resource_id, club_id)

    def get_default(self, club_id: str) -> Optional[Resource]:
        """The club's default resource, or None for a club without resources."""
        club_id = parse_identifier(club_id, "club_id")
        with self.store.transaction() as session:
            if not ClubRepository(session).exists(club_id):
                raise NotFoundError("Club not found", "club_id")
            return ResourceRepository(session).get_default(club_id)
