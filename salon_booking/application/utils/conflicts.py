from __future__ import annotations

from collections.abc import Iterable

from salon_booking.domain.entities.booking import Booking, BookingStatus
from salon_booking.domain.entities.schedule import TimeSlot


def overlaps(candidate: TimeSlot, existing: TimeSlot) -> bool:
    # Touching endpoints (10:00-11:00 vs 11:00-12:00) do not overlap.
    return candidate.start < existing.end and candidate.end > existing.start


def find_conflicts(
    candidate: TimeSlot,
    bookings: Iterable[Booking],
    exclude_booking_id: str | None = None,
) -> list[Booking]:
    """Non-cancelled bookings overlapping `candidate`, ignoring `exclude_booking_id`."""
    return [
        booking
        for booking in bookings
        if booking.status != BookingStatus.cancelled
        and (exclude_booking_id is None or booking.id != exclude_booking_id)
        and overlaps(candidate, booking.time_slot)
    ]
