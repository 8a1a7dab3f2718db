"""
Custom exceptions for the practice planner.

Every core operation either returns a domain result or raises exactly one
PlannerError subclass. The HTTP boundary maps ``status_code`` to the
response and ``kind`` to the error label.
"""

from typing import Optional


class PlannerError(Exception):
    """Base class for typed domain errors."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        payload = {"error": self.kind, "message": self.message}
        if self.field:
            payload["field"] = self.field
        return payload


class ValidationError(PlannerError):
    """Malformed input value, past-dated scheduling time or bad patch."""

    kind = "validation"
    status_code = 400


class NotFoundError(PlannerError):
    """Referenced entity is missing or does not belong to the stated parent."""

    kind = "not_found"
    status_code = 404


class ConflictError(PlannerError):
    """Rejected to protect an invariant (last resource, default resource...)."""

    kind = "conflict"
    status_code = 409


class InternalError(PlannerError):
    """Underlying storage failure unrelated to caller input."""

    kind = "internal"
    status_code = 500
