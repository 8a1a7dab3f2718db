"""
Domain entities - Pure business representation, no framework dependencies.

Repositories map ORM rows to these dataclasses; services and the HTTP
boundary only ever see entities.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional


class PracticeStatus(str, Enum):
    """Lifecycle status of a practice; either value may be written at any time."""

    DRAFT = "Draft"
    READY = "Ready"


class AttendanceStatus(IntEnum):
    """Per-dog attendance. A dog without a stored row is implicitly UNKNOWN."""

    UNKNOWN = 0
    NO = 1
    YES = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class _Unset:
    """Marker for a patch field that was not supplied at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    """True when a patch field was supplied, even if its value is None or empty."""
    return value is not UNSET


class _Patch:
    """Base for partial-update payloads built on UNSET defaults."""

    def provided(self) -> Dict[str, Any]:
        """Only the fields that were explicitly supplied."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)  # type: ignore[arg-type]
            if is_set(getattr(self, f.name))
        }

    def is_empty(self) -> bool:
        return not self.provided()


@dataclass
class ResourcePatch(_Patch):
    """Partial update of a resource; omitted fields stay untouched."""

    name: Any = UNSET
    is_default: Any = UNSET


@dataclass
class PracticePatch(_Patch):
    """Partial update of a practice; omitted fields stay untouched."""

    scheduled_at: Any = UNSET
    status: Any = UNSET


@dataclass
class Resource:
    """Location or room of a club."""

    id: Optional[str] = None
    club_id: str = ""
    name: str = ""
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Practice:
    """Scheduled practice of a club. ``scheduled_at`` is aware UTC."""

    id: Optional[str] = None
    club_id: str = ""
    scheduled_at: Optional[datetime] = None
    status: PracticeStatus = PracticeStatus.DRAFT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class SetDog:
    """Assignment of a dog to a set, ordered within that set."""

    set_id: str = ""
    dog_id: str = ""
    order: int = 0
    lane: Optional[str] = None


@dataclass
class PracticeSet:
    """Ordered grouping of dog assignments within a practice."""

    id: Optional[str] = None
    practice_id: str = ""
    resource_id: str = ""
    order: int = 0
    dogs: List[SetDog] = field(default_factory=list)


@dataclass
class DogAssignment:
    """Requested placement of a dog when building a set."""

    dog_id: str
    order: int = 0
    lane: Optional[str] = None


@dataclass
class PracticeAttendance:
    """Attendance row for one dog at one practice."""

    id: Optional[str] = None
    practice_id: str = ""
    dog_id: str = ""
    attending: AttendanceStatus = AttendanceStatus.UNKNOWN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class PracticeSummary:
    """Headline numbers of a practice, counted over the club's dogs."""

    id: str
    club_id: str
    scheduled_at: Optional[datetime]
    status: PracticeStatus
    sets_count: int = 0
    attending_count: int = 0
    not_attending_count: int = 0
    unconfirmed_count: int = 0
