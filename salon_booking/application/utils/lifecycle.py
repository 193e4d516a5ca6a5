"""
Booking status state machine.

pending -> confirmed | cancelled
confirmed -> completed | cancelled | no_show
completed, cancelled, no_show are terminal.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from salon_booking.application.exceptions import InvalidTransition, PolicyViolation
from salon_booking.domain.entities.actor import ActorRole
from salon_booking.domain.entities.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.pending: frozenset({BookingStatus.confirmed, BookingStatus.cancelled}),
    BookingStatus.confirmed: frozenset(
        {BookingStatus.completed, BookingStatus.cancelled, BookingStatus.no_show}
    ),
    BookingStatus.completed: frozenset(),
    BookingStatus.cancelled: frozenset(),
    BookingStatus.no_show: frozenset(),
}

# Status -> Booking field stamped when the status is entered.
TIMESTAMP_FIELDS: dict[BookingStatus, str] = {
    BookingStatus.confirmed: "confirmed_at",
    BookingStatus.cancelled: "cancelled_at",
    BookingStatus.completed: "completed_at",
}


def can_transition(from_status: BookingStatus, to_status: BookingStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS[from_status]


def transition(booking: Booking, new_status: BookingStatus, now: datetime) -> Booking:
    """
    Return a copy of `booking` in `new_status`.

    Raises:
        InvalidTransition: If the table does not allow the move.
    """
    if not can_transition(booking.status, new_status):
        raise InvalidTransition(booking.status.value, new_status.value)

    changes: dict[str, object] = {"status": new_status, "updated_at": now}
    stamp_field = TIMESTAMP_FIELDS.get(new_status)
    if stamp_field:
        changes[stamp_field] = now

    logger.debug(
        "Booking status transition: %s -> %s",
        booking.status.value,
        new_status.value,
        extra={"booking_id": booking.id},
    )
    return replace(booking, **changes)


def reset_to_pending(booking: Booking, now: datetime) -> Booking:
    """Date/time/service/staff changes need the salon to confirm again."""
    return replace(booking, status=BookingStatus.pending, confirmed_at=None, updated_at=now)


def starts_at(booking: Booking) -> datetime:
    day = booking.date.astimezone(timezone.utc)
    return day + timedelta(minutes=booking.time_slot.start)


def ensure_cancellable(
    booking: Booking,
    actor_role: ActorRole,
    now: datetime,
    window_hours: float = 2,
) -> None:
    if booking.status == BookingStatus.cancelled:
        raise PolicyViolation("Booking is already cancelled")
    if booking.status == BookingStatus.completed:
        raise PolicyViolation("Cannot cancel a completed booking")
    if booking.status == BookingStatus.no_show:
        raise PolicyViolation("Cannot cancel a no-show booking")

    if actor_role == ActorRole.customer:
        hours_left = (starts_at(booking) - now).total_seconds() / 3600
        if hours_left < window_hours:
            raise PolicyViolation(
                f"Bookings can only be cancelled at least {window_hours:g} hours before the appointment"
            )
