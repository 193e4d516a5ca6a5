from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from salon_booking.application.exceptions import BookingError, BookingValidationError, NotFoundError
from salon_booking.application.ports.booking_store import BookingQuery, BookingStorePort
from salon_booking.application.ports.clock import ClockPort
from salon_booking.application.result import OperationResult
from salon_booking.application.utils.time_utils import is_valid_date_format, parse_date_utc, today_utc
from salon_booking.domain.entities.actor import Actor, ActorRole
from salon_booking.domain.entities.booking import TERMINAL_STATUSES, Booking, BookingStatus

ONE_DAY = timedelta(days=1)
ACTIVE_STATUSES = frozenset({BookingStatus.pending, BookingStatus.confirmed})


def _chronological(bookings: list[Booking], newest_first: bool = False) -> list[Booking]:
    return sorted(bookings, key=lambda b: (b.date, b.time_slot.start), reverse=newest_first)


def _scope(actor: Actor) -> dict[str, Any]:
    """Restrict a listing to what the actor's role may see."""
    if actor.role == ActorRole.customer:
        return {"user_id": actor.user_id}
    if actor.role == ActorRole.salon_owner:
        # An owner without a salon sees nothing rather than everything.
        return {"salon_id": actor.salon_id or ""}
    if actor.role == ActorRole.staff:
        return {"staff_id": actor.user_id}
    return {}


@dataclass
class BookingQueryUseCase:
    bookings: BookingStorePort
    clock: ClockPort

    def get_booking(self, booking_id: str) -> OperationResult[Booking]:
        booking = self.bookings.get(booking_id)
        if booking is None:
            return OperationResult.failure(NotFoundError("Booking not found"))
        return OperationResult.success(booking)

    def list_user_bookings(self, user_id: str) -> list[Booking]:
        return _chronological(self.bookings.search(BookingQuery(user_id=user_id)))

    def list_salon_bookings(self, salon_id: str) -> list[Booking]:
        return _chronological(self.bookings.search(BookingQuery(salon_id=salon_id)))

    def list_upcoming(self, actor: Actor) -> list[Booking]:
        query = BookingQuery(
            date_from=today_utc(self.clock.now()),
            statuses=ACTIVE_STATUSES,
            **_scope(actor),
        )
        return _chronological(self.bookings.search(query))

    def list_past(self, actor: Actor) -> list[Booking]:
        """Bookings before today, plus any that already reached a terminal status."""
        query = BookingQuery(
            date_to=today_utc(self.clock.now()),
            or_statuses=TERMINAL_STATUSES,
            **_scope(actor),
        )
        return _chronological(self.bookings.search(query), newest_first=True)

    def list_today(self, actor: Actor) -> list[Booking]:
        today = today_utc(self.clock.now())
        query = BookingQuery(
            date_from=today,
            date_to=today + ONE_DAY,
            exclude_statuses=frozenset({BookingStatus.cancelled}),
            **_scope(actor),
        )
        return _chronological(self.bookings.search(query))

    def list_calendar(
        self,
        actor: Actor,
        salon_id: str,
        start_date: str | None,
        end_date: str | None,
    ) -> OperationResult[list[Booking]]:
        try:
            if not start_date or not end_date:
                raise BookingValidationError("start_date and end_date are required")
            if not is_valid_date_format(start_date) or not is_valid_date_format(end_date):
                raise BookingValidationError("start_date and end_date must be in YYYY-MM-DD format")
            start = parse_date_utc(start_date)
            end = parse_date_utc(end_date)
            if start > end:
                raise BookingValidationError("start_date must not be after end_date")
        except BookingError as e:
            return OperationResult.failure(e)

        query = BookingQuery(
            salon_id=salon_id,
            staff_id=actor.user_id if actor.role == ActorRole.staff else None,
            date_from=start,
            date_to=end + ONE_DAY,
            exclude_statuses=frozenset({BookingStatus.cancelled}),
        )
        return OperationResult.success(_chronological(self.bookings.search(query)))
