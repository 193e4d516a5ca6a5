from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import TypeVar

from salon_booking.application.dto.booking_requests import (
    CreateBookingRequest,
    RescheduleBookingRequest,
    TimeSlotInput,
    UpdateBookingRequest,
)
from salon_booking.application.exceptions import (
    BookingError,
    BookingValidationError,
    ConflictError,
    NotFoundError,
    PolicyViolation,
)
from salon_booking.application.ports.booking_store import BookingStorePort
from salon_booking.application.ports.clock import ClockPort
from salon_booking.application.ports.notifier import BookingEvent, NotificationPort
from salon_booking.application.ports.salon_repository import SalonRepositoryPort
from salon_booking.application.ports.service_catalog import ServiceCatalogPort
from salon_booking.application.ports.staff_directory import StaffDirectoryPort
from salon_booking.application.result import OperationResult
from salon_booking.application.utils import lifecycle
from salon_booking.application.utils.availability import compute_slots, effective_schedule
from salon_booking.application.utils.conflicts import find_conflicts
from salon_booking.application.utils.slot_locks import KeyedLocks
from salon_booking.application.utils.time_utils import (
    format_date,
    get_day_of_week,
    is_valid_date_format,
    is_valid_time_format,
    minutes_of_day,
    minutes_to_time,
    parse_date_utc,
    time_to_minutes,
    today_utc,
)
from salon_booking.domain.entities.actor import Actor
from salon_booking.domain.entities.booking import Booking, BookingStatus
from salon_booking.domain.entities.salon import Salon
from salon_booking.domain.entities.salon_service import SalonService
from salon_booking.domain.entities.schedule import DaySchedule, TimeSlot
from salon_booking.domain.entities.staff import Staff

T = TypeVar("T")

NOT_CANCELLED = (BookingStatus.cancelled,)


class BookingUseCase:
    """
    Create, update, reschedule, cancel and inspect bookings.

    Every public operation returns an OperationResult; domain errors raised by the
    checks below are caught at that boundary. Checks short-circuit on the first
    failure and nothing is written until all of them pass.
    """

    def __init__(
        self,
        salons: SalonRepositoryPort,
        services: ServiceCatalogPort,
        staff: StaffDirectoryPort,
        bookings: BookingStorePort,
        clock: ClockPort,
        notifier: NotificationPort | None = None,
        slot_interval_minutes: int = 30,
        cancellation_window_hours: float = 2,
        notes_max_length: int = 500,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._salons = salons
        self._services = services
        self._staff = staff
        self._bookings = bookings
        self._clock = clock
        self._notifier = notifier
        self._slot_interval = slot_interval_minutes
        self._cancellation_window_hours = cancellation_window_hours
        self._notes_max_length = notes_max_length
        self._locks = locks or KeyedLocks()
        self._logger = logging.getLogger(__name__)

    # -- public operations -------------------------------------------------

    def create_booking(self, actor: Actor, request: CreateBookingRequest) -> OperationResult[Booking]:
        return self._run("create", lambda: self._create(actor, request))

    def update_booking(self, booking_id: str, request: UpdateBookingRequest) -> OperationResult[Booking]:
        return self._run("update", lambda: self._update(booking_id, request))

    def reschedule_booking(
        self, booking_id: str, request: RescheduleBookingRequest
    ) -> OperationResult[Booking]:
        return self._run("reschedule", lambda: self._reschedule(booking_id, request))

    def cancel_booking(self, booking_id: str, actor: Actor) -> OperationResult[Booking]:
        return self._run("cancel", lambda: self._cancel(booking_id, actor))

    def update_booking_status(
        self, booking_id: str, new_status: BookingStatus | str
    ) -> OperationResult[Booking]:
        return self._run("status", lambda: self._update_status(booking_id, new_status))

    def get_availability(
        self, staff_id: str | None, service_id: str | None, date: str | None
    ) -> OperationResult[list[str]]:
        return self._run("availability", lambda: self._availability(staff_id, service_id, date))

    def check_availability(
        self, staff_id: str | None, date: str | None, time_slot: TimeSlotInput | None
    ) -> OperationResult[bool]:
        return self._run("check_availability", lambda: self._check(staff_id, date, time_slot))

    # -- flows -------------------------------------------------------------

    def _create(self, actor: Actor, request: CreateBookingRequest) -> Booking:
        start = request.time_slot.start if request.time_slot else None
        missing = [
            name
            for name, value in (
                ("salon_id", request.salon_id),
                ("staff_id", request.staff_id),
                ("service_id", request.service_id),
                ("date", request.date),
                ("time_slot.start", start),
            )
            if not value
        ]
        if missing:
            raise BookingValidationError(f"Missing required fields: {', '.join(missing)}")
        if not actor.user_id:
            raise BookingValidationError("user_id is required")

        self._validate_date(request.date)
        self._validate_start(start)
        notes = self._clean_notes(request.notes)

        requested_date = parse_date_utc(request.date)
        now = self._clock.now()
        self._ensure_not_past(requested_date, now, "Booking date cannot be in the past")

        salon = self._load_salon(request.salon_id)
        service = self._load_service(request.service_id, salon.id)
        staff = self._load_staff(request.staff_id, salon.id)

        slot = self._derive_slot(start, request.time_slot.end, service)
        self._ensure_within_schedule(salon, staff, request.date, requested_date, slot)

        booking = Booking(
            user_id=actor.user_id,
            salon_id=salon.id,
            staff_id=staff.id,
            service_id=service.id,
            date=requested_date,
            time_slot=slot,
            price=service.price,
            status=BookingStatus.pending,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        with self._locks.hold(self._lock_keys(staff.id, actor.user_id, requested_date)):
            self._ensure_no_conflicts(slot, staff.id, actor.user_id, requested_date)
            created = self._bookings.create(booking)

        self._logger.info(
            "Booking created",
            extra={"booking_id": created.id, "staff_id": staff.id, "user_id": actor.user_id},
        )
        self._notify(BookingEvent.created, created)
        return created

    def _update(self, booking_id: str, request: UpdateBookingRequest) -> Booking:
        start = request.time_slot.start if request.time_slot else None
        end = request.time_slot.end if request.time_slot else None
        if not (request.staff_id or request.service_id or request.date or start or request.notes_provided):
            raise BookingValidationError("Nothing to update. Provide at least one field to change")
        if request.date:
            self._validate_date(request.date)
        if start:
            self._validate_start(start)
        notes = self._clean_notes(request.notes) if request.notes_provided else None

        booking = self._load_booking(booking_id)
        _ensure_open(booking, "update")

        final_staff_id = request.staff_id or booking.staff_id
        final_service_id = request.service_id or booking.service_id
        final_date = request.date or format_date(booking.date)
        final_start = start or minutes_to_time(booking.time_slot.start)

        requested_date = parse_date_utc(final_date)
        now = self._clock.now()
        self._ensure_not_past(requested_date, now, "Booking date cannot be in the past")

        salon = self._load_salon(booking.salon_id)
        service = self._load_service(final_service_id, booking.salon_id)
        staff = self._load_staff(final_staff_id, booking.salon_id)

        slot = self._derive_slot(final_start, end if start else None, service)
        self._ensure_within_schedule(salon, staff, final_date, requested_date, slot)

        changed = replace(
            booking,
            staff_id=staff.id,
            service_id=service.id,
            date=requested_date,
            time_slot=slot,
            price=service.price,
            notes=notes if request.notes_provided else booking.notes,
        )
        changed = lifecycle.reset_to_pending(changed, now)

        keys = [_booking_key(booking.id), *self._lock_keys(staff.id, booking.user_id, requested_date)]
        with self._locks.hold(keys):
            self._ensure_unchanged(booking, "update")
            self._ensure_no_conflicts(slot, staff.id, booking.user_id, requested_date, booking.id)
            saved = self._bookings.update(changed)

        self._logger.info("Booking updated", extra={"booking_id": saved.id, "staff_id": staff.id})
        self._notify(BookingEvent.updated, saved)
        return saved

    def _reschedule(self, booking_id: str, request: RescheduleBookingRequest) -> Booking:
        start = request.time_slot.start if request.time_slot else None
        if not request.date or not start:
            raise BookingValidationError("date and time_slot.start are required to reschedule")
        self._validate_date(request.date)
        self._validate_start(start)

        booking = self._load_booking(booking_id)
        _ensure_open(booking, "reschedule")

        new_date = parse_date_utc(request.date)
        now = self._clock.now()
        self._ensure_not_past(new_date, now, "Reschedule date cannot be in the past")

        if request.date == format_date(booking.date) and start == minutes_to_time(booking.time_slot.start):
            raise BookingValidationError("New date and time are the same as the current booking")

        salon = self._load_salon(booking.salon_id)
        service = self._load_service(booking.service_id, booking.salon_id)
        staff = self._load_staff(booking.staff_id, booking.salon_id)

        slot = self._derive_slot(start, request.time_slot.end, service)
        self._ensure_within_schedule(salon, staff, request.date, new_date, slot)

        moved = lifecycle.reset_to_pending(replace(booking, date=new_date, time_slot=slot), now)

        keys = [_booking_key(booking.id), *self._lock_keys(staff.id, booking.user_id, new_date)]
        with self._locks.hold(keys):
            self._ensure_unchanged(booking, "reschedule")
            self._ensure_no_conflicts(slot, staff.id, booking.user_id, new_date, booking.id)
            saved = self._bookings.update(moved)

        self._logger.info(
            "Booking rescheduled",
            extra={"booking_id": saved.id, "staff_id": staff.id, "status": saved.status.value},
        )
        self._notify(BookingEvent.rescheduled, saved)
        return saved

    def _cancel(self, booking_id: str, actor: Actor) -> Booking:
        with self._locks.hold([_booking_key(booking_id)]):
            booking = self._load_booking(booking_id)
            now = self._clock.now()
            lifecycle.ensure_cancellable(booking, actor.role, now, self._cancellation_window_hours)
            saved = self._bookings.update(lifecycle.transition(booking, BookingStatus.cancelled, now))

        self._logger.info("Booking cancelled", extra={"booking_id": saved.id, "user_id": actor.user_id})
        self._notify(BookingEvent.cancelled, saved)
        return saved

    def _update_status(self, booking_id: str, new_status: BookingStatus | str) -> Booking:
        try:
            target = BookingStatus(new_status)
        except ValueError:
            allowed = ", ".join(s.value for s in BookingStatus if s != BookingStatus.pending)
            raise BookingValidationError(f"Invalid status. Must be one of: {allowed}") from None

        with self._locks.hold([_booking_key(booking_id)]):
            booking = self._load_booking(booking_id)
            saved = self._bookings.update(lifecycle.transition(booking, target, self._clock.now()))

        self._logger.info("Booking status changed", extra={"booking_id": saved.id, "status": target.value})
        self._notify(BookingEvent.status_changed, saved)
        return saved

    def _availability(self, staff_id: str | None, service_id: str | None, date: str | None) -> list[str]:
        if not staff_id or not service_id or not date:
            raise BookingValidationError("staff_id, service_id and date are required")
        self._validate_date(date)

        day = parse_date_utc(date)
        now = self._clock.now()
        self._ensure_not_past(day, now, "Cannot check availability for a past date")

        staff = self._load_staff(staff_id)
        service = self._load_service(service_id, staff.salon_id)
        salon = self._load_salon(staff.salon_id)

        if salon.is_holiday(day):
            return []

        weekday = get_day_of_week(date)
        window = effective_schedule(
            salon.working_hours.for_day(weekday),
            staff.working_hours.for_day(weekday),
        )
        busy = [
            b.time_slot
            for b in self._bookings.find_by_staff_and_date(staff.id, day, exclude_statuses=NOT_CANCELLED)
        ]
        now_minutes = minutes_of_day(now) if day == today_utc(now) else None
        return compute_slots(window, busy, service.duration_minutes, self._slot_interval, now_minutes)

    def _check(self, staff_id: str | None, date: str | None, time_slot: TimeSlotInput | None) -> bool:
        start = time_slot.start if time_slot else None
        end = time_slot.end if time_slot else None
        if not staff_id or not date or not start or not end:
            raise BookingValidationError("staff_id, date, time_slot.start and time_slot.end are required")
        self._validate_date(date)
        self._validate_start(start)
        if not is_valid_time_format(end):
            raise BookingValidationError("time_slot.end must be in HH:MM format")
        if time_to_minutes(start) >= time_to_minutes(end):
            raise BookingValidationError("time_slot.start must be before time_slot.end")

        self._load_staff(staff_id)
        slot = TimeSlot(start=time_to_minutes(start), end=time_to_minutes(end))
        existing = self._bookings.find_by_staff_and_date(
            staff_id, parse_date_utc(date), exclude_statuses=NOT_CANCELLED
        )
        return not find_conflicts(slot, existing)

    # -- checks ------------------------------------------------------------

    def _run(self, operation: str, func: Callable[[], T]) -> OperationResult[T]:
        try:
            return OperationResult.success(func())
        except BookingError as e:
            self._logger.info(
                "Booking %s rejected: %s",
                operation,
                e.message,
                extra={"reason": e.kind.value},
            )
            return OperationResult.failure(e)

    @staticmethod
    def _validate_date(value: str) -> None:
        if not is_valid_date_format(value):
            raise BookingValidationError("date must be in YYYY-MM-DD format")

    @staticmethod
    def _validate_start(value: str) -> None:
        if not is_valid_time_format(value):
            raise BookingValidationError("time_slot.start must be in HH:MM format")

    def _clean_notes(self, notes: str | None) -> str | None:
        if notes is None:
            return None
        cleaned = notes.strip()
        if len(cleaned) > self._notes_max_length:
            raise BookingValidationError(f"notes must be at most {self._notes_max_length} characters")
        return cleaned or None

    @staticmethod
    def _ensure_not_past(day: datetime, now: datetime, message: str) -> None:
        if day < today_utc(now):
            raise PolicyViolation(message)

    def _load_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def _load_salon(self, salon_id: str) -> Salon:
        salon = self._salons.get_salon(salon_id)
        if salon is None:
            raise NotFoundError("Salon not found")
        if not salon.is_available:
            raise PolicyViolation("Salon is not accepting bookings")
        return salon

    def _load_service(self, service_id: str, salon_id: str) -> SalonService:
        service = self._services.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        if service.salon_id != salon_id:
            raise NotFoundError("Service does not belong to this salon")
        return service

    def _load_staff(self, staff_id: str, salon_id: str | None = None) -> Staff:
        staff = self._staff.get_staff(staff_id)
        if staff is None:
            raise NotFoundError("Staff member not found")
        if salon_id is not None and staff.salon_id != salon_id:
            raise NotFoundError("Staff does not belong to this salon")
        return staff

    @staticmethod
    def _derive_slot(start: str, supplied_end: str | None, service: SalonService) -> TimeSlot:
        slot = TimeSlot.from_duration(time_to_minutes(start), service.duration_minutes)
        derived_end = minutes_to_time(slot.end)
        if supplied_end and supplied_end != derived_end:
            raise BookingValidationError(
                f"time_slot.end does not match service duration of {service.duration_minutes} mins. "
                f"Expected {derived_end}"
            )
        return slot

    @staticmethod
    def _ensure_within_schedule(
        salon: Salon,
        staff: Staff,
        date: str,
        day: datetime,
        slot: TimeSlot,
    ) -> None:
        # Both the salon's and the staff member's hours must permit the slot.
        weekday = get_day_of_week(date)
        salon_day = salon.working_hours.for_day(weekday)
        if salon_day is None or salon_day.is_closed:
            raise PolicyViolation(f"Salon is closed on {weekday}")
        if salon.is_holiday(day):
            raise PolicyViolation("Salon is closed on this date")
        if not salon_day.contains(slot):
            raise PolicyViolation(f"Requested time is outside salon working hours ({_hours(salon_day)})")

        staff_day = staff.working_hours.for_day(weekday)
        if staff_day is None or staff_day.is_closed:
            raise PolicyViolation(f"Staff is not working on {weekday}")
        if not staff_day.contains(slot):
            raise PolicyViolation(f"Requested time is outside staff working hours ({_hours(staff_day)})")

    def _ensure_unchanged(self, loaded: Booking, operation: str) -> None:
        # Re-read under the booking lock; another request may have moved or closed it since.
        current = self._load_booking(loaded.id)
        _ensure_open(current, operation)
        if current != loaded:
            raise ConflictError("Booking was changed by another request. Please retry")

    def _ensure_no_conflicts(
        self,
        slot: TimeSlot,
        staff_id: str,
        user_id: str,
        day: datetime,
        exclude_booking_id: str | None = None,
    ) -> None:
        staff_bookings = self._bookings.find_by_staff_and_date(staff_id, day, exclude_statuses=NOT_CANCELLED)
        if find_conflicts(slot, staff_bookings, exclude_booking_id):
            raise ConflictError("Staff is not available at the requested time slot")

        user_bookings = self._bookings.find_by_user_and_date(user_id, day, exclude_statuses=NOT_CANCELLED)
        if find_conflicts(slot, user_bookings, exclude_booking_id):
            raise ConflictError("You already have a booking that overlaps with this time slot")

    @staticmethod
    def _lock_keys(staff_id: str, user_id: str, day: datetime) -> list[str]:
        day_key = format_date(day)
        return [f"staff:{staff_id}:{day_key}", f"user:{user_id}:{day_key}"]

    def _notify(self, event: BookingEvent, booking: Booking) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(event, booking)
        except Exception as e:
            # Notification delivery never fails the booking operation.
            self._logger.warning(
                "Booking notification failed",
                extra={"event": event.value, "booking_id": booking.id, "error": str(e)},
            )


def _booking_key(booking_id: str) -> str:
    return f"booking:{booking_id}"


def _ensure_open(booking: Booking, operation: str) -> None:
    if booking.is_terminal:
        raise PolicyViolation(f"Cannot {operation} a booking that is already {booking.status.value}")


def _hours(day: DaySchedule) -> str:
    return f"{minutes_to_time(day.open)} - {minutes_to_time(day.close)}"
