from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    validation = "validation"
    not_found = "not_found"
    policy_violation = "policy_violation"
    conflict = "conflict"
    invalid_transition = "invalid_transition"
    forbidden = "forbidden"


class BookingError(Exception):
    """Base for booking domain errors. Carries a stable `kind` for callers."""

    kind: ErrorKind = ErrorKind.validation

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


class BookingValidationError(BookingError):
    """Malformed input, missing field or mismatched derived end time."""

    kind = ErrorKind.validation


class NotFoundError(BookingError):
    """Referenced entity is missing or belongs to another salon."""

    kind = ErrorKind.not_found


class PolicyViolation(BookingError):
    """Salon closed or unavailable, slot outside hours, past date, cancellation window."""

    kind = ErrorKind.policy_violation


class ForbiddenError(BookingError):
    """Actor may not see or change this booking or salon."""

    kind = ErrorKind.forbidden


class ConflictError(BookingError):
    """Staff member or customer would be double-booked."""

    kind = ErrorKind.conflict


class InvalidTransition(BookingError):
    kind = ErrorKind.invalid_transition

    def __init__(self, from_status: str, to_status: str) -> None:
        super().__init__(f"Cannot transition from '{from_status}' to '{to_status}'")
        self.from_status = from_status
        self.to_status = to_status
