"""
Data Transfer Objects (DTOs) for the JSON boundary.

Request helpers turn camelCase JSON bodies into the typed inputs of the
services; a key that is present becomes a set patch field even when its
value is null. Response DTOs render domain entities back to camelCase.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from practice_planner.core.exceptions import ValidationError
from practice_planner.domain.entities import (
    DogAssignment,
    PracticePatch,
    ResourcePatch,
)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _require_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _require_list(data: Any, key: str) -> List[Any]:
    value = _require_object(data).get(key)
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list", key)
    return value


# ===========================
# Requests
# ===========================


def json_body(data: Any) -> Dict[str, Any]:
    """A missing body reads as ``{}``; anything but an object is rejected."""
    if data is None:
        return {}
    return _require_object(data)


def resource_patch_from_json(data: Any) -> ResourcePatch:
    body = _require_object(data)
    patch = ResourcePatch()
    if "name" in body:
        patch.name = body["name"]
    if "isDefault" in body:
        patch.is_default = body["isDefault"]
    return patch


def practice_patch_from_json(data: Any) -> PracticePatch:
    body = _require_object(data)
    patch = PracticePatch()
    if "scheduledAt" in body:
        patch.scheduled_at = body["scheduledAt"]
    if "status" in body:
        patch.status = body["status"]
    return patch


def dog_assignments_from_json(items: Any) -> List[DogAssignment]:
    """``[{"dogId": ..., "order": 0, "lane": "A"}]`` to DogAssignment list."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValidationError("dogs must be a list", "dogs")
    assignments = []
    for item in items:
        if not isinstance(item, dict) or "dogId" not in item:
            raise ValidationError("Each dog entry needs a dogId", "dogs")
        assignments.append(
            DogAssignment(
                dog_id=item["dogId"], order=item.get("order", 0), lane=item.get("lane")
            )
        )
    return assignments


def pairs_from_json(data: Any, list_key: str, id_key: str, value_key: str) -> List[Tuple[Any, Any]]:
    """Extract ``(id, value)`` pairs from ``{list_key: [{id_key, value_key}, ...]}``."""
    pairs = []
    for item in _require_list(data, list_key):
        if not isinstance(item, dict) or id_key not in item or value_key not in item:
            raise ValidationError(
                f"Each {list_key} entry needs {id_key} and {value_key}", list_key
            )
        pairs.append((item[id_key], item[value_key]))
    return pairs


# ===========================
# Responses
# ===========================


@dataclass
class ResourceResponse:
    id: str
    clubId: str
    name: str
    isDefault: bool
    createdAt: Optional[str]
    updatedAt: Optional[str]

    @classmethod
    def from_domain(cls, resource) -> "ResourceResponse":
        return cls(
            id=resource.id,
            clubId=resource.club_id,
            name=resource.name,
            isDefault=resource.is_default,
            createdAt=_iso(resource.created_at),
            updatedAt=_iso(resource.updated_at),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PracticeResponse:
    id: str
    clubId: str
    scheduledAt: Optional[str]
    status: str
    createdAt: Optional[str]
    updatedAt: Optional[str]

    @classmethod
    def from_domain(cls, practice) -> "PracticeResponse":
        return cls(
            id=practice.id,
            clubId=practice.club_id,
            scheduledAt=_iso(practice.scheduled_at),
            status=practice.status.value,
            createdAt=_iso(practice.created_at),
            updatedAt=_iso(practice.updated_at),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PracticeSummaryResponse:
    id: str
    clubId: str
    scheduledAt: Optional[str]
    status: str
    setsCount: int
    attendingCount: int
    notAttendingCount: int
    unconfirmedCount: int

    @classmethod
    def from_domain(cls, summary) -> "PracticeSummaryResponse":
        return cls(
            id=summary.id,
            clubId=summary.club_id,
            scheduledAt=_iso(summary.scheduled_at),
            status=summary.status.value,
            setsCount=summary.sets_count,
            attendingCount=summary.attending_count,
            notAttendingCount=summary.not_attending_count,
            unconfirmedCount=summary.unconfirmed_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SetDogResponse:
    setId: str
    dogId: str
    order: int
    lane: Optional[str]

    @classmethod
    def from_domain(cls, set_dog) -> "SetDogResponse":
        return cls(
            setId=set_dog.set_id,
            dogId=set_dog.dog_id,
            order=set_dog.order,
            lane=set_dog.lane,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SetResponse:
    id: str
    practiceId: str
    resourceId: str
    order: int
    dogs: List[SetDogResponse] = field(default_factory=list)

    @classmethod
    def from_domain(cls, practice_set) -> "SetResponse":
        return cls(
            id=practice_set.id,
            practiceId=practice_set.practice_id,
            resourceId=practice_set.resource_id,
            order=practice_set.order,
            dogs=[SetDogResponse.from_domain(d) for d in practice_set.dogs],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AttendanceResponse:
    id: str
    practiceId: str
    dogId: str
    status: str
    attending: int
    updatedAt: Optional[str]

    @classmethod
    def from_domain(cls, attendance) -> "AttendanceResponse":
        return cls(
            id=attendance.id,
            practiceId=attendance.practice_id,
            dogId=attendance.dog_id,
            status=attendance.attending.label,
            attending=int(attendance.attending),
            updatedAt=_iso(attendance.updated_at),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
