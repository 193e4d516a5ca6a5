from __future__ import annotations

from pydantic import BaseModel

# Fields stay loosely typed: format checks and their error messages belong to the
# booking use case so that validation runs in one well-defined order.


class TimeSlotInput(BaseModel):
    start: str | None = None
    end: str | None = None


class CreateBookingRequest(BaseModel):
    salon_id: str | None = None
    staff_id: str | None = None
    service_id: str | None = None
    date: str | None = None
    time_slot: TimeSlotInput | None = None
    notes: str | None = None


class UpdateBookingRequest(BaseModel):
    staff_id: str | None = None
    service_id: str | None = None
    date: str | None = None
    time_slot: TimeSlotInput | None = None
    notes: str | None = None

    @property
    def notes_provided(self) -> bool:
        return "notes" in self.model_fields_set


class RescheduleBookingRequest(BaseModel):
    date: str | None = None
    time_slot: TimeSlotInput | None = None


class CheckAvailabilityRequest(BaseModel):
    salon_id: str | None = None
    staff_id: str | None = None
    date: str | None = None
    time_slot: TimeSlotInput | None = None
