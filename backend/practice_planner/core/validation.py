"""
Common validation utilities shared by the services and the HTTP boundary.

Helpers raise ``ValidationError`` carrying the offending field name so the
boundary can report it back.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from practice_planner.core.config import APP_TZ
from practice_planner.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def parse_identifier(value: Any, field_name: str) -> str:
    """Return the canonical string form of a UUID identifier."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid {field_name}", field_name)
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError:
        raise ValidationError(f"Invalid {field_name}", field_name) from None


def validate_required_text(value: Any, field_name: str, max_length: int = 255) -> str:
    """Validate that a text field is present, non-blank and not too long."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", field_name)
    cleaned = value.strip()
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{field_name} must be at most {max_length} characters", field_name
        )
    return cleaned


def validate_order(value: Any, field_name: str = "order") -> int:
    """Orders are plain integers; booleans are rejected even though bool is an int."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer", field_name)
    return value


def to_utc(value: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """Normalize a datetime to aware UTC; naive values are read in the app timezone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz or APP_TZ)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Any, field_name: str) -> datetime:
    """Parse an ISO-8601 datetime (a trailing ``Z`` is accepted) into aware UTC."""
    if isinstance(value, datetime):
        return to_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be an ISO-8601 datetime", field_name)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(
            f"{field_name} must be an ISO-8601 datetime", field_name
        ) from None
    return to_utc(parsed)


def ensure_future(value: datetime, now: datetime, field_name: str) -> datetime:
    """Require ``value`` to be strictly after ``now``; both are compared in UTC."""
    value = to_utc(value)
    if value <= to_utc(now):
        logger.info(
            "Rejected past scheduling time",
            extra={"context": {"field": field_name, "value": value.isoformat()}},
        )
        raise ValidationError(f"{field_name} must be in the future", field_name)
    return value
