"""Conversions between "HH:MM" / "YYYY-MM-DD" strings and minutes / UTC dates.

Parsing helpers do not validate; call is_valid_time_format / is_valid_date_format first.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timezone

from salon_booking.domain.entities.schedule import WEEKDAYS

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_time_format(value: object) -> bool:
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def is_valid_date_format(value: object) -> bool:
    """Strict YYYY-MM-DD that also names a real calendar day."""
    if not isinstance(value, str) or DATE_PATTERN.match(value) is None:
        return False
    year, month, day = _split_date(value)
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _split_date(value: str) -> tuple[int, int, int]:
    year, month, day = value.split("-")
    return int(year), int(month), int(day)


def parse_date_utc(value: str) -> datetime:
    """Build the UTC-midnight instant for a YYYY-MM-DD string, independent of local timezone."""
    year, month, day = _split_date(value)
    return datetime(year, month, day, tzinfo=timezone.utc)


def get_day_of_week(value: str) -> str:
    year, month, day = _split_date(value)
    return WEEKDAYS[date(year, month, day).weekday()]


def format_date(day: datetime) -> str:
    return day.astimezone(timezone.utc).strftime("%Y-%m-%d")


def today_utc(now: datetime) -> datetime:
    current = now.astimezone(timezone.utc)
    return datetime(current.year, current.month, current.day, tzinfo=timezone.utc)


def minutes_of_day(now: datetime) -> int:
    current = now.astimezone(timezone.utc)
    return current.hour * 60 + current.minute
