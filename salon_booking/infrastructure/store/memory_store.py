from __future__ import annotations

import threading
import uuid
from collections.abc import Collection
from dataclasses import replace
from datetime import datetime

from salon_booking.application.ports.booking_store import BookingQuery, BookingStorePort
from salon_booking.domain.entities.booking import Booking, BookingStatus


class MemoryBookingStore(BookingStorePort):
    def __init__(self, bookings: list[Booking] | None = None) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()
        for booking in bookings or []:
            self._bookings[booking.id or self._new_id()] = booking

    @staticmethod
    def _new_id() -> str:
        return f"bk_{uuid.uuid4().hex[:12]}"

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def find_by_staff_and_date(
        self,
        staff_id: str,
        date: datetime,
        exclude_statuses: Collection[BookingStatus] = (),
    ) -> list[Booking]:
        with self._lock:
            return [
                b
                for b in self._bookings.values()
                if b.staff_id == staff_id and b.date == date and b.status not in exclude_statuses
            ]

    def find_by_user_and_date(
        self,
        user_id: str,
        date: datetime,
        exclude_statuses: Collection[BookingStatus] = (),
    ) -> list[Booking]:
        with self._lock:
            return [
                b
                for b in self._bookings.values()
                if b.user_id == user_id and b.date == date and b.status not in exclude_statuses
            ]

    def create(self, booking: Booking) -> Booking:
        with self._lock:
            stored = replace(booking, id=self._new_id())
            self._bookings[stored.id] = stored
            try:
                self._on_change()
            except Exception:
                del self._bookings[stored.id]
                raise
            return stored

    def update(self, booking: Booking) -> Booking:
        with self._lock:
            if booking.id not in self._bookings:
                raise KeyError(f"Booking {booking.id} does not exist")
            previous = self._bookings[booking.id]
            self._bookings[booking.id] = booking
            try:
                self._on_change()
            except Exception:
                self._bookings[booking.id] = previous
                raise
            return booking

    def search(self, query: BookingQuery) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if query.matches(b)]

    def _on_change(self) -> None:
        """Hook for persistent subclasses. Called with the store lock held; raising rolls the change back."""
