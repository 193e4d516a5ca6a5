"""
Tests for cancellation and staff-driven status changes.
"""

from __future__ import annotations

from datetime import datetime, timezone

from conftest import CUSTOMER, OWNER, make_request
from salon_booking.application.exceptions import ErrorKind
from salon_booking.application.ports.notifier import BookingEvent
from salon_booking.domain.entities.booking import BookingStatus


def test_customer_cancel_one_hour_before_is_refused(use_case, clock, booked):
    """Test that a customer cannot cancel inside the two-hour window."""
    clock.set(datetime(2026, 2, 24, 9, 0, tzinfo=timezone.utc))  # appointment at 10:00

    result = use_case.cancel_booking(booked.id, CUSTOMER)

    assert result.error.kind == ErrorKind.policy_violation
    assert "2 hours" in result.error.message
    assert use_case.update_booking_status(booked.id, "confirmed").ok


def test_owner_cancel_inside_window_succeeds(use_case, clock, store, booked, notifier):
    clock.set(datetime(2026, 2, 24, 9, 0, tzinfo=timezone.utc))

    result = use_case.cancel_booking(booked.id, OWNER)

    assert result.ok
    assert result.value.status == BookingStatus.cancelled
    assert result.value.cancelled_at == clock.now()
    assert store.get(booked.id).status == BookingStatus.cancelled
    assert notifier.events[-1] == (BookingEvent.cancelled, result.value)


def test_customer_cancel_well_ahead(use_case, booked):
    result = use_case.cancel_booking(booked.id, CUSTOMER)
    assert result.ok


def test_cancel_twice(use_case, booked):
    use_case.cancel_booking(booked.id, CUSTOMER).unwrap()
    result = use_case.cancel_booking(booked.id, CUSTOMER)
    assert result.error.kind == ErrorKind.policy_violation
    assert result.error.message == "Booking is already cancelled"


def test_cancel_completed_booking(use_case, booked):
    use_case.update_booking_status(booked.id, "confirmed").unwrap()
    use_case.update_booking_status(booked.id, "completed").unwrap()
    result = use_case.cancel_booking(booked.id, OWNER)
    assert result.error.message == "Cannot cancel a completed booking"


def test_cancel_missing_booking(use_case):
    assert use_case.cancel_booking("bk_missing", OWNER).error.kind == ErrorKind.not_found


def test_confirm_stamps_timestamp(use_case, clock, booked, notifier):
    result = use_case.update_booking_status(booked.id, BookingStatus.confirmed)
    assert result.ok
    assert result.value.status == BookingStatus.confirmed
    assert result.value.confirmed_at == clock.now()
    assert notifier.events[-1][0] == BookingEvent.status_changed


def test_pending_cannot_jump_to_completed(use_case, booked):
    result = use_case.update_booking_status(booked.id, "completed")
    assert result.error.kind == ErrorKind.invalid_transition
    assert result.error.message == "Cannot transition from 'pending' to 'completed'"


def test_no_show_after_confirmation(use_case, booked):
    use_case.update_booking_status(booked.id, "confirmed").unwrap()
    result = use_case.update_booking_status(booked.id, "no_show")
    assert result.ok
    assert result.value.is_terminal


def test_unknown_status(use_case, booked):
    result = use_case.update_booking_status(booked.id, "done")
    assert result.error.kind == ErrorKind.validation
    assert "confirmed, completed, cancelled, no_show" in result.error.message


def test_status_of_missing_booking(use_case):
    assert use_case.update_booking_status("bk_missing", "confirmed").error.kind == ErrorKind.not_found


def test_cancel_status_path_is_not_subject_to_window(use_case, clock):
    """Test that staff marking a booking cancelled via status change skips the customer window."""
    booking = use_case.create_booking(CUSTOMER, make_request(date="2026-02-23", start="09:00")).unwrap()
    clock.set(datetime(2026, 2, 23, 8, 45, tzinfo=timezone.utc))
    assert use_case.update_booking_status(booking.id, "cancelled").ok
