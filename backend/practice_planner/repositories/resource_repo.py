"""
Resource repository: typed persistence for the club resource pool.
"""

from typing import Dict, List, Optional

from practice_planner.core.exceptions import InternalError
from practice_planner.db.base import PracticeSet as DbPracticeSet
from practice_planner.db.base import Resource as DbResource
from practice_planner.domain.entities import Resource as DomainResource
from practice_planner.domain.interfaces import IResourceRepository
from practice_planner.repositories.mapping import as_aware_utc

_UPDATABLE_FIELDS = ("name", "is_default")


class ResourceRepository(IResourceRepository):
    """Repository for Resource persistence operations.

    Writes are flushed immediately so later reads in the same transaction
    (counts, default lookups) observe them.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def _query_owned(self, resource_id: str, club_id: str):
        return self.db.query(DbResource).filter_by(id=resource_id, club_id=club_id)

    def get(self, resource_id: str, club_id: str) -> Optional[DomainResource]:
        db_resource = self._query_owned(resource_id, club_id).first()
        return self._to_domain(db_resource) if db_resource else None

    def list_by_club(self, club_id: str) -> List[DomainResource]:
        rows = (
            self.db.query(DbResource)
            .filter_by(club_id=club_id)
            .order_by(DbResource.name.asc(), DbResource.created_at.asc())
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def count_by_club(self, club_id: str) -> int:
        return self.db.query(DbResource).filter_by(club_id=club_id).count()

    def get_default(self, club_id: str) -> Optional[DomainResource]:
        db_resource = (
            self.db.query(DbResource).filter_by(club_id=club_id, is_default=True).first()
        )
        return self._to_domain(db_resource) if db_resource else None

    def is_referenced_by_sets(self, resource_id: str) -> bool:
        row = self.db.query(DbPracticeSet.id).filter_by(resource_id=resource_id).first()
        return row is not None

    def add(self, club_id: str, name: str, is_default: bool) -> DomainResource:
        db_resource = DbResource(club_id=club_id, name=name, is_default=is_default)
        self.db.add(db_resource)
        self.db.flush()
        return self._to_domain(db_resource)

    def clear_defaults(self, club_id: str, except_id: Optional[str] = None) -> int:
        query = self.db.query(DbResource).filter(
            DbResource.club_id == club_id, DbResource.is_default.is_(True)
        )
        if except_id is not None:
            query = query.filter(DbResource.id != except_id)
        touched = query.update({"is_default": False}, synchronize_session="fetch")
        self.db.flush()
        return touched

    def update_fields(
        self, resource_id: str, club_id: str, values: Dict[str, object]
    ) -> Optional[DomainResource]:
        db_resource = self._query_owned(resource_id, club_id).first()
        if not db_resource:
            return None
        for key, value in values.items():
            if key not in _UPDATABLE_FIELDS:
                raise InternalError(f"Resource field '{key}' is not updatable", key)
            setattr(db_resource, key, value)
        self.db.flush()
        return self._to_domain(db_resource)

    def delete(self, resource_id: str, club_id: str) -> bool:
        db_resource = self._query_owned(resource_id, club_id).first()
        if not db_resource:
            return False
        self.db.delete(db_resource)
        self.db.flush()
        return True

    def _to_domain(self, db_resource: DbResource) -> DomainResource:
        return DomainResource(
            id=db_resource.id,
            club_id=db_resource.club_id,
            name=db_resource.name,
            is_default=bool(db_resource.is_default),
            created_at=as_aware_utc(db_resource.created_at),
            updated_at=as_aware_utc(db_resource.updated_at),
        )
