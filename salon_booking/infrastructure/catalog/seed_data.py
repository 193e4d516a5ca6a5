from __future__ import annotations

from decimal import Decimal

from salon_booking.application.utils.time_utils import parse_date_utc, time_to_minutes
from salon_booking.domain.entities.salon import Salon
from salon_booking.domain.entities.salon_service import SalonService
from salon_booking.domain.entities.schedule import CLOSED_DAY, WEEKDAYS, DaySchedule, WorkingHours
from salon_booking.domain.entities.staff import Staff
from salon_booking.infrastructure.catalog.memory_catalog import MemoryCatalog


def day(open_: str, close: str) -> DaySchedule:
    return DaySchedule(open=time_to_minutes(open_), close=time_to_minutes(close))


def week(weekdays: DaySchedule, saturday: DaySchedule | None = None, sunday: DaySchedule | None = None) -> WorkingHours:
    days = {name: weekdays for name in WEEKDAYS[:5]}
    days["saturday"] = saturday or CLOSED_DAY
    days["sunday"] = sunday or CLOSED_DAY
    return WorkingHours(days=days)


SALONS = [
    Salon(
        id="salon-glow",
        name="Glow Hair & Beauty",
        owner_id="user-owner-1",
        working_hours=week(day("09:00", "18:00"), saturday=day("10:00", "16:00")),
        holidays=(parse_date_utc("2026-12-25"), parse_date_utc("2027-01-01")),
    ),
    Salon(
        id="salon-urban",
        name="Urban Cuts",
        owner_id="user-owner-2",
        working_hours=week(day("10:00", "20:00"), saturday=day("10:00", "18:00")),
    ),
]

SERVICES = [
    SalonService(id="svc-haircut", salon_id="salon-glow", name="Haircut", duration_minutes=30, price=Decimal("35.00")),
    SalonService(id="svc-color", salon_id="salon-glow", name="Full Color", duration_minutes=120, price=Decimal("140.00")),
    SalonService(id="svc-manicure", salon_id="salon-glow", name="Manicure", duration_minutes=45, price=Decimal("30.00")),
    SalonService(id="svc-fade", salon_id="salon-urban", name="Skin Fade", duration_minutes=45, price=Decimal("28.00")),
]

STAFF = [
    Staff(
        id="staff-anna",
        salon_id="salon-glow",
        name="Anna",
        specialties=("haircut", "color"),
        working_hours=week(day("09:00", "17:00"), saturday=day("10:00", "14:00")),
    ),
    Staff(
        id="staff-ben",
        salon_id="salon-glow",
        name="Ben",
        specialties=("manicure",),
        working_hours=week(day("12:00", "18:00")),
    ),
    Staff(
        id="staff-carl",
        salon_id="salon-urban",
        name="Carl",
        specialties=("fade",),
        working_hours=week(day("10:00", "20:00"), saturday=day("10:00", "18:00")),
    ),
]


def build_catalog() -> MemoryCatalog:
    return MemoryCatalog(salons=SALONS, services=SERVICES, staff=STAFF)
