"""
Abstract interfaces for repositories following Interface Segregation Principle.

Each repository is bound to the session of one Store transaction; services
create them inside ``store.transaction()`` so every read and write of an
operation shares that transaction.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from .entities import (
    AttendanceStatus,
    Practice,
    PracticeAttendance,
    PracticeSet,
    PracticeStatus,
    Resource,
    SetDog,
)


class IClubRepository(ABC):
    """Lookups on the club identity root."""

    @abstractmethod
    def exists(self, club_id: str) -> bool:
        """Check whether the club exists."""
        pass

    @abstractmethod
    def lock(self, club_id: str) -> bool:
        """Lock the club row for the rest of the transaction; False if missing."""
        pass


class IDogRepository(ABC):
    @abstractmethod
    def exists_in_club(self, dog_id: str, club_id: str) -> bool:
        pass

    @abstractmethod
    def list_ids_by_club(self, club_id: str) -> List[str]:
        pass


class IResourceReader(ABC):
    """Interface for resource read operations."""

    @abstractmethod
    def get(self, resource_id: str, club_id: str) -> Optional[Resource]:
        """Get a resource only if it belongs to the club."""
        pass

    @abstractmethod
    def list_by_club(self, club_id: str) -> List[Resource]:
        """Resources of a club ordered by name."""
        pass

    @abstractmethod
    def count_by_club(self, club_id: str) -> int:
        pass

    @abstractmethod
    def get_default(self, club_id: str) -> Optional[Resource]:
        pass

    @abstractmethod
    def is_referenced_by_sets(self, resource_id: str) -> bool:
        pass


class IResourceWriter(ABC):
    """Interface for resource write operations."""

    @abstractmethod
    def add(self, club_id: str, name: str, is_default: bool) -> Resource:
        pass

    @abstractmethod
    def clear_defaults(self, club_id: str, except_id: Optional[str] = None) -> int:
        """Unset ``is_default`` on the club's resources; returns rows touched."""
        pass

    @abstractmethod
    def update_fields(
        self, resource_id: str, club_id: str, values: Dict[str, object]
    ) -> Optional[Resource]:
        pass

    @abstractmethod
    def delete(self, resource_id: str, club_id: str) -> bool:
        pass


class IResourceRepository(IResourceReader, IResourceWriter):
    """Complete resource repository interface."""

    pass


class IPracticeRepository(ABC):
    @abstractmethod
    def get(self, practice_id: str, club_id: Optional[str] = None) -> Optional[Practice]:
        pass

    @abstractmethod
    def lock(self, practice_id: str, club_id: Optional[str] = None) -> Optional[Practice]:
        """Lock the practice row for the rest of the transaction."""
        pass

    @abstractmethod
    def list_by_club(self, club_id: str) -> List[Practice]:
        pass

    @abstractmethod
    def add(self, club_id: str, scheduled_at: datetime, status: PracticeStatus) -> Practice:
        pass

    @abstractmethod
    def update_fields(
        self, practice_id: str, club_id: str, values: Dict[str, object]
    ) -> Optional[Practice]:
        pass

    @abstractmethod
    def delete(self, practice_id: str, club_id: str) -> bool:
        """Delete the practice together with its sets, set-dogs and attendance."""
        pass


class ISetRepository(ABC):
    @abstractmethod
    def get(self, set_id: str, practice_id: Optional[str] = None) -> Optional[PracticeSet]:
        pass

    @abstractmethod
    def lock(self, set_id: str, practice_id: Optional[str] = None) -> Optional[PracticeSet]:
        pass

    @abstractmethod
    def list_by_practice(self, practice_id: str) -> List[PracticeSet]:
        """Sets ordered by ``order`` then insertion."""
        pass

    @abstractmethod
    def count_by_practice(self, practice_id: str) -> int:
        pass

    @abstractmethod
    def add(self, practice_id: str, resource_id: str, order: int) -> PracticeSet:
        pass

    @abstractmethod
    def update_order(
        self, set_id: str, practice_id: str, order: int
    ) -> Optional[PracticeSet]:
        """Filtered update; None when no set matches both keys."""
        pass

    @abstractmethod
    def delete(self, set_id: str, practice_id: str) -> bool:
        pass


class ISetDogRepository(ABC):
    @abstractmethod
    def list_by_set(self, set_id: str) -> List[SetDog]:
        pass

    @abstractmethod
    def add(self, set_id: str, dog_id: str, order: int, lane: Optional[str]) -> SetDog:
        pass

    @abstractmethod
    def delete_by_set(self, set_id: str) -> int:
        pass

    @abstractmethod
    def update_order(self, set_id: str, dog_id: str, order: int) -> Optional[SetDog]:
        pass


class IAttendanceReader(ABC):
    """Interface for attendance read operations."""

    @abstractmethod
    def find(self, practice_id: str, dog_id: str) -> Optional[PracticeAttendance]:
        pass

    @abstractmethod
    def list_by_practice(self, practice_id: str) -> List[PracticeAttendance]:
        pass


class IAttendanceWriter(ABC):
    """Interface for attendance write operations."""

    @abstractmethod
    def add(
        self, practice_id: str, dog_id: str, status: AttendanceStatus
    ) -> PracticeAttendance:
        pass

    @abstractmethod
    def update_status(
        self, attendance_id: str, status: AttendanceStatus
    ) -> PracticeAttendance:
        pass


class IAttendanceRepository(IAttendanceReader, IAttendanceWriter):
    """Complete attendance repository interface."""

    pass
