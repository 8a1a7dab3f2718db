"""
Set and set-dog repositories.

Listing follows the display contract: ascending ``order``, ties broken by
insertion sequence. Orders may have gaps or duplicates.
"""

from typing import List, Optional

from sqlalchemy import func

from practice_planner.db.base import PracticeSet as DbPracticeSet
from practice_planner.db.base import SetDog as DbSetDog
from practice_planner.domain.entities import PracticeSet as DomainPracticeSet
from practice_planner.domain.entities import SetDog as DomainSetDog
from practice_planner.domain.interfaces import ISetDogRepository, ISetRepository


class SetRepository(ISetRepository):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def _query(self, set_id: str, practice_id: Optional[str]):
        query = self.db.query(DbPracticeSet).filter_by(id=set_id)
        if practice_id is not None:
            query = query.filter_by(practice_id=practice_id)
        return query

    def get(
        self, set_id: str, practice_id: Optional[str] = None
    ) -> Optional[DomainPracticeSet]:
        db_set = self._query(set_id, practice_id).first()
        return self._to_domain(db_set) if db_set else None

    def lock(
        self, set_id: str, practice_id: Optional[str] = None
    ) -> Optional[DomainPracticeSet]:
        db_set = self._query(set_id, practice_id).with_for_update().first()
        return self._to_domain(db_set) if db_set else None

    def list_by_practice(self, practice_id: str) -> List[DomainPracticeSet]:
        rows = (
            self.db.query(DbPracticeSet)
            .filter_by(practice_id=practice_id)
            .order_by(DbPracticeSet.order.asc(), DbPracticeSet.insertion_seq.asc())
            .all()
        )
        return [self._to_domain(s) for s in rows]

    def count_by_practice(self, practice_id: str) -> int:
        return self.db.query(DbPracticeSet).filter_by(practice_id=practice_id).count()

    def add(self, practice_id: str, resource_id: str, order: int) -> DomainPracticeSet:
        next_seq = (
            self.db.query(func.coalesce(func.max(DbPracticeSet.insertion_seq), 0))
            .filter(DbPracticeSet.practice_id == practice_id)
            .scalar()
        ) + 1
        db_set = DbPracticeSet(
            practice_id=practice_id,
            resource_id=resource_id,
            order=order,
            insertion_seq=next_seq,
        )
        self.db.add(db_set)
        self.db.flush()
        return self._to_domain(db_set)

    def update_order(
        self, set_id: str, practice_id: str, order: int
    ) -> Optional[DomainPracticeSet]:
        db_set = self._query(set_id, practice_id).first()
        if not db_set:
            return None
        db_set.order = order
        self.db.flush()
        return self._to_domain(db_set)

    def delete(self, set_id: str, practice_id: str) -> bool:
        db_set = self._query(set_id, practice_id).first()
        if not db_set:
            return False
        self.db.delete(db_set)
        self.db.flush()
        return True

    def _to_domain(self, db_set: DbPracticeSet) -> DomainPracticeSet:
        return DomainPracticeSet(
            id=db_set.id,
            practice_id=db_set.practice_id,
            resource_id=db_set.resource_id,
            order=db_set.order,
        )


class SetDogRepository(ISetDogRepository):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def list_by_set(self, set_id: str) -> List[DomainSetDog]:
        rows = (
            self.db.query(DbSetDog)
            .filter_by(set_id=set_id)
            .order_by(DbSetDog.order.asc(), DbSetDog.insertion_seq.asc())
            .all()
        )
        return [self._to_domain(sd) for sd in rows]

    def add(
        self, set_id: str, dog_id: str, order: int, lane: Optional[str]
    ) -> DomainSetDog:
        next_seq = (
            self.db.query(func.coalesce(func.max(DbSetDog.insertion_seq), 0))
            .filter(DbSetDog.set_id == set_id)
            .scalar()
        ) + 1
        db_set_dog = DbSetDog(
            set_id=set_id, dog_id=dog_id, order=order, lane=lane, insertion_seq=next_seq
        )
        self.db.add(db_set_dog)
        self.db.flush()
        return self._to_domain(db_set_dog)

    def delete_by_set(self, set_id: str) -> int:
        deleted = (
            self.db.query(DbSetDog)
            .filter_by(set_id=set_id)
            .delete(synchronize_session="fetch")
        )
        self.db.flush()
        return deleted

    def update_order(self, set_id: str, dog_id: str, order: int) -> Optional[DomainSetDog]:
        db_set_dog = self.db.query(DbSetDog).filter_by(set_id=set_id, dog_id=dog_id).first()
        if not db_set_dog:
            return None
        db_set_dog.order = order
        self.db.flush()
        return self._to_domain(db_set_dog)

    def _to_domain(self, db_set_dog: DbSetDog) -> DomainSetDog:
        return DomainSetDog(
            set_id=db_set_dog.set_id,
            dog_id=db_set_dog.dog_id,
            order=db_set_dog.order,
            lane=db_set_dog.lane,
        )
