# Repositories package: one typed repository per entity, bound to a session

from .attendance_repo import AttendanceRepository
from .club_repo import ClubRepository, DogRepository
from .practice_repo import PracticeRepository
from .resource_repo import ResourceRepository
from .set_repo import SetDogRepository, SetRepository

__all__ = [
    "AttendanceRepository",
    "ClubRepository",
    "DogRepository",
    "PracticeRepository",
    "ResourceRepository",
    "SetDogRepository",
    "SetRepository",
]
