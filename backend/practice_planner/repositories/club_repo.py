from typing import List

from practice_planner.db.base import Club as DbClub
from practice_planner.db.base import Dog as DbDog
from practice_planner.domain.interfaces import IClubRepository, IDogRepository


class ClubRepository(IClubRepository):
    """Club lookups and the per-club row lock used by the resource pool."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def exists(self, club_id: str) -> bool:
        return self.db.query(DbClub.id).filter_by(id=club_id).first() is not None

    def lock(self, club_id: str) -> bool:
        # FOR UPDATE is a no-op on SQLite, where BEGIN IMMEDIATE already serializes
        row = (
            self.db.query(DbClub.id)
            .filter_by(id=club_id)
            .with_for_update()
            .first()
        )
        return row is not None


class DogRepository(IDogRepository):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def exists_in_club(self, dog_id: str, club_id: str) -> bool:
        row = self.db.query(DbDog.id).filter_by(id=dog_id, club_id=club_id).first()
        return row is not None

    def list_ids_by_club(self, club_id: str) -> List[str]:
        rows = self.db.query(DbDog.id).filter_by(club_id=club_id).all()
        return [row.id for row in rows]
