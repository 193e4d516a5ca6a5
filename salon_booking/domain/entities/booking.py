from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from salon_booking.domain.entities.schedule import TimeSlot


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"


TERMINAL_STATUSES = frozenset({BookingStatus.completed, BookingStatus.cancelled, BookingStatus.no_show})


@dataclass(frozen=True)
class Booking:
    user_id: str
    salon_id: str
    staff_id: str
    service_id: str
    date: datetime  # UTC midnight
    time_slot: TimeSlot
    price: Decimal  # snapshot of the service price at write time
    status: BookingStatus = BookingStatus.pending
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
