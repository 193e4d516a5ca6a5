from __future__ import annotations

from collections.abc import Iterable

from salon_booking.application.utils.conflicts import overlaps
from salon_booking.application.utils.time_utils import minutes_to_time
from salon_booking.domain.entities.schedule import CLOSED_DAY, DaySchedule, TimeSlot

DEFAULT_INTERVAL_MINUTES = 30


def effective_schedule(salon_day: DaySchedule | None, staff_day: DaySchedule | None) -> DaySchedule:
    """Window in which both the salon and the staff member are working."""
    if salon_day is None or staff_day is None or salon_day.is_closed or staff_day.is_closed:
        return CLOSED_DAY
    open_ = max(salon_day.open, staff_day.open)
    close = min(salon_day.close, staff_day.close)
    if open_ >= close:
        return CLOSED_DAY
    return DaySchedule(open=open_, close=close)


def compute_slots(
    schedule: DaySchedule,
    busy: Iterable[TimeSlot],
    duration: int,
    interval_step: int = DEFAULT_INTERVAL_MINUTES,
    now: int | None = None,
) -> list[str]:
    """
    Start times ("HH:MM") of every free slot of `duration` minutes.

    Walks from open to close in `interval_step` increments. A slot is dropped when it
    runs past close, starts before `now` (pass `now` only when the date is today),
    or overlaps a busy interval.
    """
    if schedule.is_closed:
        return []
    if duration <= 0 or interval_step <= 0:
        raise ValueError("duration and interval_step must be positive")

    busy_slots = list(busy)
    slots: list[str] = []
    current = schedule.open
    while current < schedule.close:
        slot_end = current + duration
        if slot_end > schedule.close:
            break
        if now is not None and current < now:
            current += interval_step
            continue
        candidate = TimeSlot(start=current, end=slot_end)
        if not any(overlaps(candidate, taken) for taken in busy_slots):
            slots.append(minutes_to_time(current))
        current += interval_step
    return slots
