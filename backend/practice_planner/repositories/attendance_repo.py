from typing import List, Optional

from practice_planner.core.exceptions import InternalError
from practice_planner.db.base import PracticeAttendance as DbAttendance
from practice_planner.domain.entities import AttendanceStatus
from practice_planner.domain.entities import PracticeAttendance as DomainAttendance
from practice_planner.domain.interfaces import IAttendanceRepository
from practice_planner.repositories.mapping import as_aware_utc


class AttendanceRepository(IAttendanceRepository):
    """Repository for PracticeAttendance rows.

    Uniqueness of (practice_id, dog_id) is kept by callers looking a row up
    before writing; there is no storage constraint.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def find(self, practice_id: str, dog_id: str) -> Optional[DomainAttendance]:
        db_row = (
            self.db.query(DbAttendance)
            .filter_by(practice_id=practice_id, dog_id=dog_id)
            .first()
        )
        return self._to_domain(db_row) if db_row else None

    def list_by_practice(self, practice_id: str) -> List[DomainAttendance]:
        rows = (
            self.db.query(DbAttendance)
            .filter_by(practice_id=practice_id)
            .order_by(DbAttendance.created_at.asc())
            .all()
        )
        return [self._to_domain(r) for r in rows]

    def add(
        self, practice_id: str, dog_id: str, status: AttendanceStatus
    ) -> DomainAttendance:
        db_row = DbAttendance(
            practice_id=practice_id, dog_id=dog_id, attending=int(status)
        )
        self.db.add(db_row)
        self.db.flush()
        return self._to_domain(db_row)

    def update_status(
        self, attendance_id: str, status: AttendanceStatus
    ) -> DomainAttendance:
        db_row = self.db.query(DbAttendance).filter_by(id=attendance_id).first()
        if not db_row:
            raise InternalError(f"Attendance row {attendance_id} vanished mid-transaction")
        # Only the attending field changes on an existing row
        db_row.attending = int(status)
        self.db.flush()
        return self._to_domain(db_row)

    def _to_domain(self, db_row: DbAttendance) -> DomainAttendance:
        return DomainAttendance(
            id=db_row.id,
            practice_id=db_row.practice_id,
            dog_id=db_row.dog_id,
            attending=AttendanceStatus(db_row.attending),
            created_at=as_aware_utc(db_row.created_at),
            updated_at=as_aware_utc(db_row.updated_at),
        )
