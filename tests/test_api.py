"""
Tests for the HTTP surface: status codes, error bodies and actor headers.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import TOMORROW
from salon_booking.application.use_cases.booking_access import BookingAccessPolicy
from salon_booking.application.use_cases.booking_queries import BookingQueryUseCase
from salon_booking.main import app
from salon_booking.wiring.dependencies import (
    get_booking_access_policy,
    get_booking_query_use_case,
    get_booking_use_case,
)

CUSTOMER_HEADERS = {"X-User-Id": "user-1"}
OWNER_HEADERS = {"X-User-Id": "owner-1", "X-User-Role": "salon-owner", "X-Salon-Id": "salon-1"}

BOOKING_BODY = {
    "salon_id": "salon-1",
    "staff_id": "staff-1",
    "service_id": "svc-30",
    "date": TOMORROW,
    "time_slot": {"start": "10:00"},
}


@pytest.fixture
def client(use_case, catalog, store, clock):
    app.dependency_overrides[get_booking_use_case] = lambda: use_case
    app.dependency_overrides[get_booking_query_use_case] = lambda: BookingQueryUseCase(bookings=store, clock=clock)
    app.dependency_overrides[get_booking_access_policy] = lambda: BookingAccessPolicy(
        salons=catalog, staff=catalog, bookings=store
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_booking(client):
    resp = client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS)

    assert resp.status_code == 201
    booking = resp.json()["booking"]
    assert booking["status"] == "pending"
    assert booking["time_slot"] == {"start": "10:00", "end": "10:30"}
    assert booking["user_id"] == "user-1"


def test_create_conflict_is_409(client):
    client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS)
    resp = client.post("/api/v1/bookings", json=BOOKING_BODY, headers={"X-User-Id": "user-2"})

    assert resp.status_code == 409
    assert resp.json()["detail"]["kind"] == "conflict"


def test_validation_error_is_400(client):
    body = dict(BOOKING_BODY, date="tomorrow")
    resp = client.post("/api/v1/bookings", json=body, headers=CUSTOMER_HEADERS)
    assert resp.status_code == 400
    assert resp.json()["detail"] == {"kind": "validation", "message": "date must be in YYYY-MM-DD format"}


def test_missing_identity_is_401(client):
    assert client.post("/api/v1/bookings", json=BOOKING_BODY).status_code == 401


def test_unknown_role_is_403(client):
    headers = {"X-User-Id": "user-1", "X-User-Role": "janitor"}
    assert client.get("/api/v1/bookings/upcoming", headers=headers).status_code == 403


def test_get_missing_booking_is_404(client):
    assert client.get("/api/v1/bookings/bk_missing", headers=CUSTOMER_HEADERS).status_code == 404


def test_status_lifecycle_over_http(client):
    created = client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS).json()["booking"]
    url = f"/api/v1/bookings/{created['id']}/status"

    bad = client.patch(url, json={"status": "completed"}, headers=OWNER_HEADERS)
    assert bad.status_code == 400
    assert bad.json()["detail"]["kind"] == "invalid_transition"

    ok = client.patch(url, json={"status": "confirmed"}, headers=OWNER_HEADERS)
    assert ok.status_code == 200
    assert ok.json()["booking"]["status"] == "confirmed"


def test_reschedule_and_cancel(client):
    created = client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS).json()["booking"]

    moved = client.post(
        f"/api/v1/bookings/{created['id']}/reschedule",
        json={"date": TOMORROW, "time_slot": {"start": "11:00"}},
        headers=CUSTOMER_HEADERS,
    )
    assert moved.status_code == 200
    assert moved.json()["booking"]["time_slot"]["start"] == "11:00"

    cancelled = client.delete(f"/api/v1/bookings/{created['id']}", headers=CUSTOMER_HEADERS)
    assert cancelled.status_code == 200
    assert cancelled.json()["booking"]["status"] == "cancelled"


def test_staff_availability(client):
    client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS)
    resp = client.get("/api/v1/staff/staff-1/availability", params={"date": TOMORROW, "service_id": "svc-30"})

    assert resp.status_code == 200
    slots = resp.json()["slots"]
    assert "10:00" not in slots
    assert "10:30" in slots


def test_check_availability(client):
    client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS)
    body = {"staff_id": "staff-1", "date": TOMORROW, "time_slot": {"start": "10:00", "end": "10:30"}}
    resp = client.post("/api/v1/bookings/check-availability", json=body)
    assert resp.json() == {"available": False}


def test_listings(client):
    client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS)

    upcoming = client.get("/api/v1/bookings/upcoming", headers=CUSTOMER_HEADERS).json()
    assert upcoming["count"] == 1

    calendar = client.get(
        "/api/v1/bookings/calendar/salon-1",
        params={"start_date": "2026-02-23", "end_date": "2026-02-28"},
        headers=OWNER_HEADERS,
    )
    assert calendar.status_code == 200
    assert calendar.json()["count"] == 1

    bad_range = client.get("/api/v1/bookings/calendar/salon-1", headers=OWNER_HEADERS)
    assert bad_range.status_code == 400


def test_salon_routes_refuse_customers(client):
    assert client.get("/api/v1/bookings/today", headers=CUSTOMER_HEADERS).status_code == 403
    assert client.get("/api/v1/bookings/today", headers=OWNER_HEADERS).status_code == 200


STRANGER_HEADERS = {"X-User-Id": "stranger"}
OTHER_OWNER_HEADERS = {"X-User-Id": "owner-2", "X-User-Role": "salon-owner", "X-Salon-Id": "salon-2"}


def _create(client) -> str:
    return client.post("/api/v1/bookings", json=BOOKING_BODY, headers=CUSTOMER_HEADERS).json()["booking"]["id"]


def test_stranger_cannot_touch_someone_elses_booking(client):
    """Test that another customer can neither read, move nor cancel the booking."""
    booking_id = _create(client)

    assert client.get(f"/api/v1/bookings/{booking_id}", headers=STRANGER_HEADERS).status_code == 403
    assert client.delete(f"/api/v1/bookings/{booking_id}", headers=STRANGER_HEADERS).status_code == 403
    moved = client.post(
        f"/api/v1/bookings/{booking_id}/reschedule",
        json={"date": TOMORROW, "time_slot": {"start": "11:00"}},
        headers=STRANGER_HEADERS,
    )
    assert moved.status_code == 403
    assert moved.json()["detail"]["kind"] == "forbidden"
    updated = client.put(f"/api/v1/bookings/{booking_id}", json={"notes": "mine now"}, headers=STRANGER_HEADERS)
    assert updated.status_code == 403

    still = client.get(f"/api/v1/bookings/{booking_id}", headers=CUSTOMER_HEADERS).json()["booking"]
    assert still["status"] == "pending"
    assert still["time_slot"]["start"] == "10:00"


def test_owner_of_another_salon_is_refused(client):
    booking_id = _create(client)

    assert client.delete(f"/api/v1/bookings/{booking_id}", headers=OTHER_OWNER_HEADERS).status_code == 403
    status = client.patch(
        f"/api/v1/bookings/{booking_id}/status", json={"status": "confirmed"}, headers=OTHER_OWNER_HEADERS
    )
    assert status.status_code == 403


def test_user_and_salon_listings_are_scoped(client):
    _create(client)

    assert client.get("/api/v1/bookings/user/user-1", headers=STRANGER_HEADERS).status_code == 403
    assert client.get("/api/v1/bookings/user/user-1", headers=CUSTOMER_HEADERS).json()["count"] == 1
    assert client.get("/api/v1/bookings/salon/salon-1", headers=CUSTOMER_HEADERS).status_code == 403
    assert client.get("/api/v1/bookings/salon/salon-1", headers=OTHER_OWNER_HEADERS).status_code == 403
    assert client.get("/api/v1/bookings/salon/salon-1", headers=OWNER_HEADERS).json()["count"] == 1
    calendar = client.get(
        "/api/v1/bookings/calendar/salon-1",
        params={"start_date": "2026-02-23", "end_date": "2026-02-28"},
        headers=OTHER_OWNER_HEADERS,
    )
    assert calendar.status_code == 403


def test_salon_staff_can_change_status(client):
    booking_id = _create(client)
    staff_headers = {"X-User-Id": "staff-1", "X-User-Role": "staff", "X-Salon-Id": "salon-1"}

    resp = client.patch(f"/api/v1/bookings/{booking_id}/status", json={"status": "confirmed"}, headers=staff_headers)
    assert resp.status_code == 200
    assert client.delete(f"/api/v1/bookings/{booking_id}", headers=staff_headers).status_code == 403
