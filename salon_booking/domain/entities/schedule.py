from __future__ import annotations

from dataclasses import dataclass, field

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True)
class TimeSlot:
    """Half-open interval [start, end) in minutes since midnight."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"TimeSlot start must be before end, got {self.start} >= {self.end}")

    @staticmethod
    def from_duration(start: int, duration_minutes: int) -> "TimeSlot":
        return TimeSlot(start=start, end=start + duration_minutes)


@dataclass(frozen=True)
class DaySchedule:
    open: int = 9 * 60
    close: int = 18 * 60
    is_closed: bool = False

    def contains(self, slot: TimeSlot) -> bool:
        if self.is_closed:
            return False
        return self.open <= slot.start and slot.end <= self.close


CLOSED_DAY = DaySchedule(open=0, close=0, is_closed=True)


def _default_days() -> dict[str, DaySchedule]:
    days = {name: DaySchedule() for name in WEEKDAYS[:5]}
    days["saturday"] = DaySchedule(open=10 * 60, close=16 * 60)
    days["sunday"] = CLOSED_DAY
    return days


@dataclass(frozen=True)
class WorkingHours:
    days: dict[str, DaySchedule] = field(default_factory=_default_days)

    def for_day(self, weekday: str) -> DaySchedule | None:
        return self.days.get(weekday)
