from datetime import datetime
from typing import Dict, List, Optional

from practice_planner.db.base import Practice as DbPractice
from practice_planner.domain.entities import Practice as DomainPractice
from practice_planner.domain.entities import PracticeStatus
from practice_planner.domain.interfaces import IPracticeRepository
from practice_planner.repositories.mapping import as_aware_utc, as_naive_utc


class PracticeRepository(IPracticeRepository):
    """Repository for Practice persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def _query(self, practice_id: str, club_id: Optional[str]):
        query = self.db.query(DbPractice).filter_by(id=practice_id)
        if club_id is not None:
            query = query.filter_by(club_id=club_id)
        return query

    def get(self, practice_id: str, club_id: Optional[str] = None) -> Optional[DomainPractice]:
        db_practice = self._query(practice_id, club_id).first()
        return self._to_domain(db_practice) if db_practice else None

    def lock(self, practice_id: str, club_id: Optional[str] = None) -> Optional[DomainPractice]:
        db_practice = self._query(practice_id, club_id).with_for_update().first()
        return self._to_domain(db_practice) if db_practice else None

    def list_by_club(self, club_id: str) -> List[DomainPractice]:
        rows = (
            self.db.query(DbPractice)
            .filter_by(club_id=club_id)
            .order_by(DbPractice.scheduled_at.asc())
            .all()
        )
        return [self._to_domain(p) for p in rows]

    def add(
        self, club_id: str, scheduled_at: datetime, status: PracticeStatus
    ) -> DomainPractice:
        db_practice = DbPractice(
            club_id=club_id,
            scheduled_at=as_naive_utc(scheduled_at),
            status=status.value,
        )
        self.db.add(db_practice)
        self.db.flush()
        return self._to_domain(db_practice)

    def update_fields(
        self, practice_id: str, club_id: str, values: Dict[str, object]
    ) -> Optional[DomainPractice]:
        db_practice = self._query(practice_id, club_id).first()
        if not db_practice:
            return None
        if "scheduled_at" in values:
            db_practice.scheduled_at = as_naive_utc(values["scheduled_at"])  # type: ignore[arg-type]
        if "status" in values:
            db_practice.status = PracticeStatus(values["status"]).value
        self.db.flush()
        return self._to_domain(db_practice)

    def delete(self, practice_id: str, club_id: str) -> bool:
        db_practice = self._query(practice_id, club_id).first()
        if not db_practice:
            return False
        # ORM cascade removes sets (and their set-dogs) and attendance rows
        self.db.delete(db_practice)
        self.db.flush()
        return True

    def _to_domain(self, db_practice: DbPractice) -> DomainPractice:
        return DomainPractice(
            id=db_practice.id,
            club_id=db_practice.club_id,
            scheduled_at=as_aware_utc(db_practice.scheduled_at),
            status=PracticeStatus(db_practice.status),
            created_at=as_aware_utc(db_practice.created_at),
            updated_at=as_aware_utc(db_practice.updated_at),
        )
