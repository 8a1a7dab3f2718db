"""
Set ordering service.

Sets of a practice and dogs of a set are displayed ascending by ``order``,
ties broken by insertion. Order values are caller-supplied integers; gaps and
duplicates are allowed. Each reorder call is one transaction: either every
matching pair is applied or none is.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from practice_planner.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from practice_planner.core.validation import parse_identifier, validate_order
from practice_planner.db.session import Store
from practice_planner.domain.entities import DogAssignment, PracticeSet, SetDog
from practice_planner.repositories import (
    DogRepository,
    PracticeRepository,
    ResourceRepository,
    SetDogRepository,
    SetRepository,
)

logger = logging.getLogger(__name__)


def _normalize_pairs(pairs: Iterable[Tuple[Any, Any]], key_name: str) -> List[Tuple[str, int]]:
    """Validate every (id, order) pair up front so nothing is written on bad input."""
    normalized = []
    for index, pair in enumerate(pairs):
        try:
            raw_id, raw_order = pair
        except (TypeError, ValueError):
            raise ValidationError(
                f"Entry {index} must be an ({key_name}, order) pair", key_name
            ) from None
        normalized.append(
            (parse_identifier(raw_id, key_name), validate_order(raw_order, "order"))
        )
    return normalized


def _normalize_assignments(dogs: Iterable[Any]) -> List[DogAssignment]:
    assignments = []
    seen = set()
    for item in dogs:
        if not isinstance(item, DogAssignment):
            raise ValidationError("dogs must be a list of dog assignments", "dogs")
        dog_id = parse_identifier(item.dog_id, "dog_id")
        if dog_id in seen:
            raise ValidationError("A dog can only be assigned once per set", "dog_id")
        seen.add(dog_id)
        if item.lane is not None and not isinstance(item.lane, str):
            raise ValidationError("lane must be a string", "lane")
        assignments.append(
            DogAssignment(dog_id=dog_id, order=validate_order(item.order), lane=item.lane)
        )
    return assignments


class SetOrderingEngine:
    """Application service for sets and their dog assignments."""

    def __init__(self, store: Store):
        self.store = store

    def reorder_sets(
        self, practice_id: str, pairs: Sequence[Tuple[str, int]]
    ) -> List[PracticeSet]:
        """Set ``order`` on each listed set of the practice.

        Pairs naming a set of another practice (or no set at all) are skipped.
        Returns the updated sets in input order.
        """
        practice_id = parse_identifier(practice_id, "practice_id")
        updates = _normalize_pairs(pairs, "set_id")

        updated: List[PracticeSet] = []
        skipped = 0
        with self.store.transaction() as session:
            if not PracticeRepository(session).lock(practice_id):
                raise NotFoundError("Practice not found", "practice_id")
            sets = SetRepository(session)
            for set_id, order in updates:
                practice_set = sets.update_order(set_id, practice_id, order)
                if practice_set is None:
                    skipped += 1
                    continue
                updated.append(practice_set)

        logger.info(
            "Sets reordered",
            extra={
                "context": {
                    "practice_id": practice_id,
                    "updated": len(updated),
                    "skipped": skipped,
                }
            },
        )
        return updated

    @staticmethod
    def _lock_set(session, set_id: str, practice_id: Optional[str]):
        """Lock the set (scoped to ``practice_id`` when given) and load its practice."""
        practice_set = SetRepository(session).lock(set_id, practice_id)
        if not practice_set:
            raise NotFoundError("Set not found", "set_id")
        practice = PracticeRepository(session).get(practice_set.practice_id)
        if practice is None:
            raise InternalError("Set references a missing practice")
        return practice_set, practice

    def reorder_set_dogs(
        self,
        set_id: str,
        pairs: Sequence[Tuple[str, int]],
        practice_id: Optional[str] = None,
    ) -> List[SetDog]:
        """Set ``order`` on each listed dog of the set.

        A dog of the practice's club that is not yet in the set is added on
        its first reorder; dogs of other clubs are skipped. Returns the
        affected assignments in input order.
        """
        set_id = parse_identifier(set_id, "set_id")
        if practice_id is not None:
            practice_id = parse_identifier(practice_id, "practice_id")
        updates = _normalize_pairs(pairs, "dog_id")

        result: List[SetDog] = []
        skipped = 0
        with self.store.transaction() as session:
            _, practice = self._lock_set(session, set_id, practice_id)
            set_dogs = SetDogRepository(session)
            dogs = DogRepository(session)
            for dog_id, order in updates:
                set_dog = set_dogs.update_order(set_id, dog_id, order)
                if set_dog is None:
                    if not dogs.exists_in_club(dog_id, practice.club_id):
                        skipped += 1
                        continue
                    set_dog = set_dogs.add(set_id, dog_id, order, None)
                result.append(set_dog)

        logger.info(
            "Set dogs reordered",
            extra={
                "context": {"set_id": set_id, "updated": len(result), "skipped": skipped}
            },
        )
        return result

    def create_set(
        self,
        practice_id: str,
        order: int,
        resource_id: Optional[str] = None,
        dogs: Iterable[DogAssignment] = (),
    ) -> PracticeSet:
        """Create a set, using the club's default resource when none is given."""
        practice_id = parse_identifier(practice_id, "practice_id")
        order = validate_order(order)
        if resource_id is not None:
            resource_id = parse_identifier(resource_id, "resource_id")
        assignments = _normalize_assignments(dogs)

        with self.store.transaction() as session:
            practice = PracticeRepository(session).lock(practice_id)
            if not practice:
                raise NotFoundError("Practice not found", "practice_id")

            resources = ResourceRepository(session)
            if resource_id is None:
                resource = resources.get_default(practice.club_id)
                if not resource:
                    raise ConflictError(
                        "Club has no default resource; create a resource first",
                        "resource_id",
                    )
            else:
                resource = resources.get(resource_id, practice.club_id)
                if not resource:
                    raise NotFoundError("Resource not found", "resource_id")

            practice_set = SetRepository(session).add(practice_id, resource.id, order)
            practice_set.dogs = self._write_assignments(
                session, practice_set.id, practice.club_id, assignments
            )

        logger.info(
            "Set created",
            extra={
                "context": {
                    "practice_id": practice_id,
                    "set_id": practice_set.id,
                    "resource_id": practice_set.resource_id,
                    "dogs": len(practice_set.dogs),
                }
            },
        )
        return practice_set

    def assign_dogs(
        self,
        set_id: str,
        dogs: Iterable[DogAssignment],
        practice_id: Optional[str] = None,
    ) -> PracticeSet:
        """Replace the dogs of a set in one transaction."""
        set_id = parse_identifier(set_id, "set_id")
        if practice_id is not None:
            practice_id = parse_identifier(practice_id, "practice_id")
        assignments = _normalize_assignments(dogs)

        with self.store.transaction() as session:
            practice_set, practice = self._lock_set(session, set_id, practice_id)
            SetDogRepository(session).delete_by_set(set_id)
            self._write_assignments(session, set_id, practice.club_id, assignments)
            practice_set.dogs = SetDogRepository(session).list_by_set(set_id)

        logger.info(
            "Set dogs assigned",
            extra={"context": {"set_id": set_id, "dogs": len(practice_set.dogs)}},
        )
        return practice_set

    @staticmethod
    def _write_assignments(
        session, set_id: str, club_id: str, assignments: List[DogAssignment]
    ) -> List[SetDog]:
        dogs = DogRepository(session)
        set_dogs = SetDogRepository(session)
        written = []
        for assignment in assignments:
            if not dogs.exists_in_club(assignment.dog_id, club_id):
                raise NotFoundError("Dog not found", "dog_id")
            written.append(
                set_dogs.add(set_id, assignment.dog_id, assignment.order, assignment.lane)
            )
        return written

    def delete_set(self, set_id: str, practice_id: str) -> None:
        set_id = parse_identifier(set_id, "set_id")
        practice_id = parse_identifier(practice_id, "practice_id")
        with self.store.transaction() as session:
            if not SetRepository(session).delete(set_id, practice_id):
                raise NotFoundError("Set not found", "set_id")
        logger.info(
            "Set deleted",
            extra={"context": {"set_id": set_id, "practice_id": practice_id}},
        )

    def list_sets(self, practice_id: str) -> List[PracticeSet]:
        """Sets of the practice in display order, each with its dogs in display order."""
        practice_id = parse_identifier(practice_id, "practice_id")
        with self.store.transaction() as session:
            if not PracticeRepository(session).get(practice_id):
                raise NotFoundError("Practice not found", "practice_id")
            practice_sets = SetRepository(session).list_by_practice(practice_id)
            set_dogs = SetDogRepository(session)
            for practice_set in practice_sets:
                practice_set.dogs = set_dogs.list_by_set(practice_set.id)
        return practice_sets

    def list_set_dogs(self, set_id: str) -> List[SetDog]:
        set_id = parse_identifier(set_id, "set_id")
        with self.store.transaction() as session:
            if not SetRepository(session).get(set_id):
                raise NotFoundError("Set not found", "set_id")
            return SetDogRepository(session).list_by_set(set_id)
