"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities, status enums and patch payloads
- interfaces.py: Repository contracts
"""

from .entities import (
    UNSET,
    AttendanceStatus,
    DogAssignment,
    Practice,
    PracticeAttendance,
    PracticePatch,
    PracticeSet,
    PracticeStatus,
    PracticeSummary,
    Resource,
    ResourcePatch,
    SetDog,
    is_set,
)
from .interfaces import (
    IAttendanceReader,
    IAttendanceRepository,
    IAttendanceWriter,
    IClubRepository,
    IDogRepository,
    IPracticeRepository,
    IResourceReader,
    IResourceRepository,
    IResourceWriter,
    ISetDogRepository,
    ISetRepository,
)

__all__ = [
    # Domain entities
    "Resource",
    "Practice",
    "PracticeSet",
    "SetDog",
    "DogAssignment",
    "PracticeAttendance",
    "PracticeSummary",
    "PracticeStatus",
    "AttendanceStatus",
    # Patches
    "ResourcePatch",
    "PracticePatch",
    "UNSET",
    "is_set",
    # Repository interfaces
    "IClubRepository",
    "IDogRepository",
    "IResourceRepository",
    "IPracticeRepository",
    "ISetRepository",
    "ISetDogRepository",
    "IAttendanceRepository",
    # Segregated interfaces
    "IResourceReader",
    "IResourceWriter",
    "IAttendanceReader",
    "IAttendanceWriter",
]
