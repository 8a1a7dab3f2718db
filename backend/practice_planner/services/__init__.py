# Services package: business rules over a shared Store

from .attendance_ledger import AttendanceLedger
from .practice_scheduler import PracticeScheduler
from .resource_pool import ResourcePool
from .set_ordering import SetOrderingEngine

__all__ = [
    "AttendanceLedger",
    "PracticeScheduler",
    "ResourcePool",
    "SetOrderingEngine",
]
