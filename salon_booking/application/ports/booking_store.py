from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime

from salon_booking.domain.entities.booking import Booking, BookingStatus


@dataclass(frozen=True)
class BookingQuery:
    """Filter for listing bookings. Unset fields do not constrain the result."""

    user_id: str | None = None
    salon_id: str | None = None
    staff_id: str | None = None
    date_from: datetime | None = None  # inclusive
    date_to: datetime | None = None  # exclusive
    statuses: frozenset[BookingStatus] | None = None
    exclude_statuses: frozenset[BookingStatus] = frozenset()
    # Bookings matching this clause are returned even if outside the date range.
    or_statuses: frozenset[BookingStatus] | None = None

    def matches(self, booking: Booking) -> bool:
        if self.user_id is not None and booking.user_id != self.user_id:
            return False
        if self.salon_id is not None and booking.salon_id != self.salon_id:
            return False
        if self.staff_id is not None and booking.staff_id != self.staff_id:
            return False
        if booking.status in self.exclude_statuses:
            return False
        if self.statuses is not None and booking.status not in self.statuses:
            return False
        if self.or_statuses is not None and booking.status in self.or_statuses:
            return True
        if self.date_from is not None and booking.date < self.date_from:
            return False
        if self.date_to is not None and booking.date >= self.date_to:
            return False
        return True


class BookingStorePort(ABC):
    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def find_by_staff_and_date(
        self,
        staff_id: str,
        date: datetime,
        exclude_statuses: Collection[BookingStatus] = (),
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_by_user_and_date(
        self,
        user_id: str,
        date: datetime,
        exclude_statuses: Collection[BookingStatus] = (),
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        """Persist a new booking. Returns it with its assigned id."""
        raise NotImplementedError

    @abstractmethod
    def update(self, booking: Booking) -> Booking:
        """Replace the stored booking with the same id."""
        raise NotImplementedError

    @abstractmethod
    def search(self, query: BookingQuery) -> list[Booking]:
        """Bookings matching `query`, unordered."""
        raise NotImplementedError
