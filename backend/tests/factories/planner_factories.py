"""
Seed helpers for integration tests.

Clubs and dogs have no service of their own, so tests insert them through
the ORM inside a Store transaction.
"""

from datetime import datetime, timezone
from typing import List

from practice_planner.db.base import Club, Dog
from practice_planner.db.session import Store

FIXED_NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


def create_club(store: Store, name: str = "Agility Club") -> str:
    with store.transaction() as session:
        club = Club(name=name)
        session.add(club)
        session.flush()
        return club.id


def create_dog(store: Store, club_id: str, name: str = "Rex") -> str:
    with store.transaction() as session:
        dog = Dog(club_id=club_id, name=name)
        session.add(dog)
        session.flush()
        return dog.id


def create_dogs(store: Store, club_id: str, names: List[str]) -> List[str]:
    return [create_dog(store, club_id, name) for name in names]
