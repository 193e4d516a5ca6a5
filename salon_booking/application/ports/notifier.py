from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from salon_booking.domain.entities.booking import Booking


class BookingEvent(str, Enum):
    created = "booking.created"
    updated = "booking.updated"
    rescheduled = "booking.rescheduled"
    cancelled = "booking.cancelled"
    status_changed = "booking.status_changed"


class NotificationPort(ABC):
    @abstractmethod
    def notify(self, event: BookingEvent, booking: Booking) -> None:
        """Deliver a booking notification. May raise; callers treat failures as non-fatal."""
        raise NotImplementedError
