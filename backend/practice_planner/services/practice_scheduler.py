"""
Practice scheduling service following SOLID principles.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from practice_planner.core.exceptions import InternalError, NotFoundError, ValidationError
from practice_planner.core.validation import ensure_future, parse_datetime, parse_identifier
from practice_planner.db.session import Store
from practice_planner.domain.entities import (
    AttendanceStatus,
    Practice,
    PracticePatch,
    PracticeStatus,
    PracticeSummary,
)
from practice_planner.repositories import (
    AttendanceRepository,
    ClubRepository,
    DogRepository,
    PracticeRepository,
    SetRepository,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_status(value: Any) -> PracticeStatus:
    """Accept a PracticeStatus or its name/value ("Draft", "ready"...)."""
    if isinstance(value, PracticeStatus):
        return value
    if isinstance(value, str):
        for status in PracticeStatus:
            if value.strip().lower() == status.value.lower():
                return status
    raise ValidationError("status must be one of: Draft, Ready", "status")


class PracticeScheduler:
    """Application service for practice lifecycle use-cases.

    Business Rules:
    - A practice is always scheduled strictly in the future (at write time)
    - New practices start as Draft; status may move freely between Draft and Ready
    - Deleting a practice deletes its sets, their dogs and its attendance
    """

    def __init__(self, store: Store, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or _utc_now

    def _future_time(self, value: Any) -> datetime:
        if value is None:
            raise ValidationError("scheduled_at is required", "scheduled_at")
        return ensure_future(parse_datetime(value, "scheduled_at"), self.clock(), "scheduled_at")

    def create(self, club_id: str, scheduled_at: Any) -> Practice:
        """Schedule a new Draft practice for the club."""
        club_id = parse_identifier(club_id, "club_id")
        when = self._future_time(scheduled_at)

        with self.store.transaction() as session:
            if not ClubRepository(session).exists(club_id):
                raise NotFoundError("Club not found", "club_id")
            practice = PracticeRepository(session).add(club_id, when, PracticeStatus.DRAFT)

        logger.info(
            "Practice created",
            extra={
                "context": {
                    "club_id": club_id,
                    "practice_id": practice.id,
                    "scheduled_at": when.isoformat(),
                }
            },
        )
        return practice

    def update(self, practice_id: str, club_id: str, patch: PracticePatch) -> Practice:
        """Apply only the fields present in ``patch``.

        A field present with a None value is rejected rather than cleared.
        """
        practice_id = parse_identifier(practice_id, "practice_id")
        club_id = parse_identifier(club_id, "club_id")

        values = patch.provided()
        for key, value in values.items():
            if value is None:
                raise ValidationError(f"{key} cannot be null", key)
        if "scheduled_at" in values:
            values["scheduled_at"] = self._future_time(values["scheduled_at"])
        if "status" in values:
            values["status"] = parse_status(values["status"])

        with self.store.transaction() as session:
            practices = PracticeRepository(session)
            current = practices.lock(practice_id, club_id)
            if not current:
                raise NotFoundError("Practice not found", "practice_id")
            if values:
                updated = practices.update_fields(practice_id, club_id, values)
                if updated is None:
                    raise InternalError("Practice disappeared during update", "practice_id")
                current = updated

        logger.info(
            "Practice updated",
            extra={
                "context": {
                    "practice_id": practice_id,
                    "fields": sorted(values),
                    "status": current.status.value,
                }
            },
        )
        return current

    def delete(self, practice_id: str, club_id: str) -> None:
        """Delete the practice with its sets, set assignments and attendance."""
        practice_id = parse_identifier(practice_id, "practice_id")
        club_id = parse_identifier(club_id, "club_id")

        with self.store.transaction() as session:
            if not PracticeRepository(session).delete(practice_id, club_id):
                raise NotFoundError("Practice not found", "practice_id")

        logger.info(
            "Practice deleted",
            extra={"context": {"practice_id": practice_id, "club_id": club_id}},
        )

    def get(self, practice_id: str, club_id: str) -> Practice:
        practice_id = parse_identifier(practice_id, "practice_id")
        club_id = parse_identifier(club_id, "club_id")
        with self.store.transaction() as session:
            practice = PracticeRepository(session).get(practice_id, club_id)
        if not practice:
            raise NotFoundError("Practice not found", "practice_id")
        return practice

    def list_for_club(self, club_id: str) -> List[Practice]:
        """Practices of the club, earliest first."""
        club_id = parse_identifier(club_id, "club_id")
        with self.store.transaction() as session:
            if not ClubRepository(session).exists(club_id):
                raise NotFoundError("Club not found", "club_id")
            return PracticeRepository(session).list_by_club(club_id)

    def summary(self, practice_id: str, club_id: str) -> PracticeSummary:
        """Set count and attendance counts over every dog of the club.

        Dogs without an attendance row count as unconfirmed.
        """
        practice_id = parse_identifier(practice_id, "practice_id")
        club_id = parse_identifier(club_id, "club_id")

        with self.store.transaction() as session:
            practice = PracticeRepository(session).get(practice_id, club_id)
            if not practice:
                raise NotFoundError("Practice not found", "practice_id")
            sets_count = SetRepository(session).count_by_practice(practice_id)
            dog_ids = DogRepository(session).list_ids_by_club(club_id)
            statuses = {
                row.dog_id: row.attending
                for row in AttendanceRepository(session).list_by_practice(practice_id)
            }

        summary = PracticeSummary(
            id=practice_id,
            club_id=club_id,
            scheduled_at=practice.scheduled_at,
            status=practice.status,
            sets_count=sets_count,
        )
        for dog_id in dog_ids:
            status = statuses.get(dog_id, AttendanceStatus.UNKNOWN)
            if status == AttendanceStatus.YES:
                summary.attending_count += 1
            elif status == AttendanceStatus.NO:
                summary.not_attending_count += 1
            else:
                summary.unconfirmed_count += 1
        return summary
