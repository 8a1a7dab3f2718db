"""
Attendance ledger service.

A dog has at most one attendance row per practice; a dog without a row is
implicitly Unknown. Writes look the row up first and then update or insert.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from practice_planner.core.exceptions import NotFoundError, ValidationError
from practice_planner.core.logging_config import log_performance
from practice_planner.core.validation import parse_identifier
from practice_planner.db.session import Store
from practice_planner.domain.entities import AttendanceStatus, PracticeAttendance
from practice_planner.repositories import (
    AttendanceRepository,
    DogRepository,
    PracticeRepository,
)

logger = logging.getLogger(__name__)


def parse_attendance_status(value: Any) -> AttendanceStatus:
    """Accept an AttendanceStatus, its integer value (0-2) or its name."""
    if isinstance(value, AttendanceStatus):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return AttendanceStatus(value)
        except ValueError:
            pass
    elif isinstance(value, str):
        name = value.strip().upper()
        if name in AttendanceStatus.__members__:
            return AttendanceStatus[name]
    raise ValidationError("status must be one of: Unknown, No, Yes", "status")


class AttendanceLedger:
    """Application service for per-dog practice attendance."""

    def __init__(self, store: Store):
        self.store = store

    @staticmethod
    def _lock_practice(session, practice_id: str, club_id: Optional[str]):
        practice = PracticeRepository(session).lock(practice_id, club_id)
        if not practice:
            raise NotFoundError("Practice not found", "practice_id")
        return practice

    @staticmethod
    def _upsert(
        attendance: AttendanceRepository,
        dogs: DogRepository,
        practice,
        dog_id: str,
        status: AttendanceStatus,
    ) -> PracticeAttendance:
        if not dogs.exists_in_club(dog_id, practice.club_id):
            raise NotFoundError("Dog not found", "dog_id")
        existing = attendance.find(practice.id, dog_id)
        if existing:
            return attendance.update_status(existing.id, status)
        return attendance.add(practice.id, dog_id, status)

    def get_all(
        self, practice_id: str, club_id: Optional[str] = None
    ) -> Dict[str, AttendanceStatus]:
        """Stored statuses of the practice keyed by dog id; dogs without a row are absent."""
        practice_id = parse_identifier(practice_id, "practice_id")
        if club_id is not None:
            club_id = parse_identifier(club_id, "club_id")

        with self.store.transaction() as session:
            if not PracticeRepository(session).get(practice_id, club_id):
                raise NotFoundError("Practice not found", "practice_id")
            rows = AttendanceRepository(session).list_by_practice(practice_id)
        return {row.dog_id: row.attending for row in rows}

    def upsert_one(
        self,
        practice_id: str,
        dog_id: str,
        status: Any,
        club_id: Optional[str] = None,
    ) -> PracticeAttendance:
        """Record one dog's attendance, creating the row on first write."""
        return self.upsert_batch(practice_id, [(dog_id, status)], club_id=club_id)[0]

    def upsert_batch(
        self,
        practice_id: str,
        updates: Sequence[Tuple[str, Any]],
        club_id: Optional[str] = None,
    ) -> List[PracticeAttendance]:
        """Record several statuses atomically.

        Any invalid element aborts the whole batch; nothing is persisted.
        A dog listed twice ends with its last status. Results follow input order.
        """
        practice_id = parse_identifier(practice_id, "practice_id")
        if club_id is not None:
            club_id = parse_identifier(club_id, "club_id")

        normalized = []
        for index, item in enumerate(updates):
            try:
                raw_dog_id, raw_status = item
            except (TypeError, ValueError):
                raise ValidationError(
                    f"Entry {index} must be a (dog_id, status) pair", "updates"
                ) from None
            normalized.append(
                (parse_identifier(raw_dog_id, "dog_id"), parse_attendance_status(raw_status))
            )

        started = time.perf_counter()
        with self.store.transaction() as session:
            practice = self._lock_practice(session, practice_id, club_id)
            attendance = AttendanceRepository(session)
            dogs = DogRepository(session)
            written = [
                self._upsert(attendance, dogs, practice, dog_id, status)
                for dog_id, status in normalized
            ]
            # A repeated dog returns its stored row, not the intermediate write
            final = {row.id: row for row in written}
            results = [final[row.id] for row in written]

        log_performance(
            "attendance.upsert_batch",
            (time.perf_counter() - started) * 1000,
            practice_id=practice_id,
            row_count=len(results),
        )
        return results
