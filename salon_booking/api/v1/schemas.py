from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from salon_booking.application.utils.time_utils import format_date, minutes_to_time
from salon_booking.domain.entities.booking import Booking, BookingStatus


class TimeSlotSchema(BaseModel):
    start: str
    end: str


class BookingSchema(BaseModel):
    id: str
    user_id: str
    salon_id: str
    staff_id: str
    service_id: str
    date: str
    time_slot: TimeSlotSchema
    status: BookingStatus
    price: Decimal
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None

    @staticmethod
    def from_entity(booking: Booking) -> "BookingSchema":
        return BookingSchema(
            id=booking.id or "",
            user_id=booking.user_id,
            salon_id=booking.salon_id,
            staff_id=booking.staff_id,
            service_id=booking.service_id,
            date=format_date(booking.date),
            time_slot=TimeSlotSchema(
                start=minutes_to_time(booking.time_slot.start),
                end=minutes_to_time(booking.time_slot.end),
            ),
            status=booking.status,
            price=booking.price,
            notes=booking.notes,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            confirmed_at=booking.confirmed_at,
            cancelled_at=booking.cancelled_at,
            completed_at=booking.completed_at,
        )


class BookingResponseSchema(BaseModel):
    message: str
    booking: BookingSchema


class BookingListResponseSchema(BaseModel):
    count: int
    data: list[BookingSchema]

    @staticmethod
    def from_entities(bookings: list[Booking]) -> "BookingListResponseSchema":
        return BookingListResponseSchema(
            count=len(bookings),
            data=[BookingSchema.from_entity(b) for b in bookings],
        )


class StatusUpdateSchema(BaseModel):
    status: str


class AvailabilityResponseSchema(BaseModel):
    slots: list[str]


class CheckAvailabilityResponseSchema(BaseModel):
    available: bool
