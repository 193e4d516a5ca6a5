"""
Tests for free-slot generation and schedule intersection.
"""

from __future__ import annotations

import pytest

from salon_booking.application.utils.availability import compute_slots, effective_schedule
from salon_booking.domain.entities.schedule import CLOSED_DAY, DaySchedule, TimeSlot


def hours(open_: int, close: int) -> DaySchedule:
    return DaySchedule(open=open_ * 60, close=close * 60)


def test_duration_exactly_fills_window():
    """Test that a 60-min service fits a 09:00-10:00 window exactly once and a 61-min one never."""
    assert compute_slots(hours(9, 10), [], duration=60, interval_step=30) == ["09:00"]
    assert compute_slots(hours(9, 10), [], duration=61, interval_step=30) == []


def test_busy_interval_is_excluded_half_open():
    """Test that slots touching a busy interval stay free while overlapping ones are dropped."""
    busy = [TimeSlot(start=10 * 60, end=11 * 60)]
    slots = compute_slots(hours(9, 18), busy, duration=30, interval_step=30)

    assert "09:00" in slots
    assert "09:30" in slots  # ends exactly when the busy interval starts
    assert "10:00" not in slots
    assert "10:30" not in slots
    assert "11:00" in slots
    assert slots[-1] == "17:30"
    assert len(slots) == 16


def test_longer_service_blocked_by_later_booking():
    busy = [TimeSlot(start=10 * 60, end=11 * 60)]
    slots = compute_slots(hours(9, 12), busy, duration=60, interval_step=30)
    assert slots == ["09:00", "11:00"]


def test_closed_day_has_no_slots():
    assert compute_slots(CLOSED_DAY, [], duration=30) == []


def test_slots_before_now_are_skipped():
    """Test that with a 'today' cutoff at 10:10 the first offered slot is 10:30."""
    slots = compute_slots(hours(9, 12), [], duration=30, interval_step=30, now=10 * 60 + 10)
    assert slots == ["10:30", "11:00", "11:30"]


def test_custom_interval_step():
    slots = compute_slots(hours(9, 10), [], duration=30, interval_step=15)
    assert slots == ["09:00", "09:15", "09:30"]


def test_slot_generation_is_restartable():
    busy = [TimeSlot(start=600, end=630)]
    first = compute_slots(hours(9, 12), busy, duration=30)
    second = compute_slots(hours(9, 12), busy, duration=30)
    assert first == second


def test_results_are_ascending():
    busy = [TimeSlot(start=700, end=760), TimeSlot(start=600, end=615)]
    slots = compute_slots(hours(9, 18), busy, duration=45, interval_step=15)
    assert slots == sorted(slots)


@pytest.mark.parametrize("duration,step", [(0, 30), (30, 0), (-5, 30)])
def test_non_positive_duration_or_step_rejected(duration, step):
    with pytest.raises(ValueError):
        compute_slots(hours(9, 10), [], duration=duration, interval_step=step)


def test_effective_schedule_is_intersection():
    assert effective_schedule(hours(9, 18), hours(12, 20)) == hours(12, 18)
    assert effective_schedule(hours(10, 16), hours(9, 17)) == hours(10, 16)


def test_effective_schedule_closed_when_either_side_closed():
    assert effective_schedule(CLOSED_DAY, hours(9, 17)).is_closed
    assert effective_schedule(hours(9, 17), CLOSED_DAY).is_closed
    assert effective_schedule(hours(9, 17), None).is_closed
    assert effective_schedule(hours(9, 12), hours(13, 17)).is_closed
