"""Shared fixtures: a small salon catalog, in-memory store and a frozen clock."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from salon_booking.application.dto.booking_requests import CreateBookingRequest, TimeSlotInput
from salon_booking.application.ports.notifier import BookingEvent, NotificationPort
from salon_booking.application.use_cases.booking import BookingUseCase
from salon_booking.application.utils.time_utils import parse_date_utc
from salon_booking.domain.entities.actor import Actor, ActorRole
from salon_booking.domain.entities.booking import Booking
from salon_booking.domain.entities.salon import Salon
from salon_booking.domain.entities.salon_service import SalonService
from salon_booking.domain.entities.schedule import DaySchedule, WorkingHours
from salon_booking.domain.entities.staff import Staff
from salon_booking.infrastructure.catalog.memory_catalog import MemoryCatalog
from salon_booking.infrastructure.catalog.seed_data import day, week
from salon_booking.infrastructure.clock import FixedClock
from salon_booking.infrastructure.store.memory_store import MemoryBookingStore

# Monday 2026-02-23, 08:00 UTC
NOW = datetime(2026, 2, 23, 8, 0, tzinfo=timezone.utc)
TOMORROW = "2026-02-24"  # Tuesday
HOLIDAY = "2026-02-25"  # Wednesday
SUNDAY = "2026-03-01"

CUSTOMER = Actor(user_id="user-1", role=ActorRole.customer)
OTHER_CUSTOMER = Actor(user_id="user-2", role=ActorRole.customer)
OWNER = Actor(user_id="owner-1", role=ActorRole.salon_owner, salon_id="salon-1")


class RecordingNotifier(NotificationPort):
    def __init__(self) -> None:
        self.events: list[tuple[BookingEvent, Booking]] = []

    def notify(self, event: BookingEvent, booking: Booking) -> None:
        self.events.append((event, booking))


class FailingNotifier(NotificationPort):
    def notify(self, event: BookingEvent, booking: Booking) -> None:
        raise RuntimeError("smtp unreachable")


def build_test_catalog(service_price: Decimal = Decimal("25.00")) -> MemoryCatalog:
    salons = [
        Salon(
            id="salon-1",
            name="Test Salon",
            owner_id="owner-1",
            working_hours=week(day("09:00", "18:00"), saturday=day("10:00", "16:00")),
            holidays=(parse_date_utc(HOLIDAY),),
        ),
        Salon(id="salon-2", name="Other Salon", owner_id="owner-2"),
        Salon(id="salon-closed", name="Closed Salon", owner_id="owner-3", is_available=False),
    ]
    services = [
        SalonService(id="svc-30", salon_id="salon-1", name="Haircut", duration_minutes=30, price=service_price),
        SalonService(id="svc-60", salon_id="salon-1", name="Color", duration_minutes=60, price=Decimal("50.00")),
        SalonService(id="svc-other", salon_id="salon-2", name="Shave", duration_minutes=30, price=Decimal("15.00")),
        SalonService(id="svc-closed", salon_id="salon-closed", name="Wash", duration_minutes=30, price=Decimal("10.00")),
    ]
    staff = [
        Staff(id="staff-1", salon_id="salon-1", name="Anna", working_hours=WorkingHours()),
        Staff(id="staff-2", salon_id="salon-1", name="Ben", working_hours=week(day("12:00", "18:00"))),
        Staff(id="staff-other", salon_id="salon-2", name="Carl"),
        Staff(id="staff-closed", salon_id="salon-closed", name="Dora"),
    ]
    return MemoryCatalog(salons=salons, services=services, staff=staff)


def make_request(**overrides) -> CreateBookingRequest:
    """CreateBookingRequest for staff-1 / svc-30 tomorrow at 10:00, with overrides."""
    start = overrides.pop("start", "10:00")
    end = overrides.pop("end", None)
    fields = {
        "salon_id": "salon-1",
        "staff_id": "staff-1",
        "service_id": "svc-30",
        "date": TOMORROW,
        "time_slot": TimeSlotInput(start=start, end=end),
    }
    fields.update(overrides)
    return CreateBookingRequest(**fields)


def build_use_case(catalog, store, clock, notifier=None) -> BookingUseCase:
    return BookingUseCase(
        salons=catalog,
        services=catalog,
        staff=catalog,
        bookings=store,
        clock=clock,
        notifier=notifier,
    )


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def catalog():
    return build_test_catalog()


@pytest.fixture
def store():
    return MemoryBookingStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def use_case(catalog, store, clock, notifier):
    return build_use_case(catalog, store, clock, notifier)


@pytest.fixture
def booked(use_case):
    """A pending booking for CUSTOMER with staff-1 tomorrow 10:00-10:30."""
    result = use_case.create_booking(CUSTOMER, make_request())
    assert result.ok, result.error
    return result.value
