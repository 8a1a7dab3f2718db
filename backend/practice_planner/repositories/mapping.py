"""Datetime conversions between the storage format and domain entities."""

from datetime import datetime, timezone
from typing import Optional


def as_aware_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive stored datetime."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to the naive UTC form stored in the database."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
