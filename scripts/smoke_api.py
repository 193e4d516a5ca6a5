#!/usr/bin/env python3
"""Smoke test for a running booking API, using the seeded demo catalog."""

import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"
HEADERS = {"X-User-Id": "smoke-user"}
OWNER_HEADERS = {"X-User-Id": "user-owner-1", "X-User-Role": "salon-owner", "X-Salon-Id": "salon-glow"}


def next_weekday() -> str:
    day = date.today() + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day.isoformat()


def check_availability(day: str) -> str | None:
    """Fetch free slots for Anna's haircut and return the first one."""
    print("=" * 60)
    print(f"GET /api/v1/staff/staff-anna/availability?date={day}")
    print("=" * 60)

    try:
        response = httpx.get(
            f"{BASE_URL}/api/v1/staff/staff-anna/availability",
            params={"date": day, "service_id": "svc-haircut"},
            timeout=10.0,
        )
        response.raise_for_status()
        slots = response.json()["slots"]
        print(f"✅ {len(slots)} free slots: {', '.join(slots[:8])}{' ...' if len(slots) > 8 else ''}")
        return slots[0] if slots else None
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None


def create_booking(day: str, start: str) -> str | None:
    print("=" * 60)
    print("POST /api/v1/bookings")
    print("=" * 60)

    payload = {
        "salon_id": "salon-glow",
        "staff_id": "staff-anna",
        "service_id": "svc-haircut",
        "date": day,
        "time_slot": {"start": start},
        "notes": "smoke test",
    }
    try:
        response = httpx.post(f"{BASE_URL}/api/v1/bookings", json=payload, headers=HEADERS, timeout=10.0)
        response.raise_for_status()
        booking = response.json()["booking"]
        print(f"✅ Created {booking['id']} {booking['date']} {booking['time_slot']['start']}-{booking['time_slot']['end']}")

        again = httpx.post(f"{BASE_URL}/api/v1/bookings", json=payload, headers=HEADERS, timeout=10.0)
        print(f"{'✅' if again.status_code == 409 else '❌'} Duplicate request -> {again.status_code}")
        return booking["id"]
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None


def confirm_and_cancel(booking_id: str) -> bool:
    print("=" * 60)
    print(f"PATCH + DELETE /api/v1/bookings/{booking_id}")
    print("=" * 60)

    try:
        confirmed = httpx.patch(
            f"{BASE_URL}/api/v1/bookings/{booking_id}/status",
            json={"status": "confirmed"},
            headers=OWNER_HEADERS,
            timeout=10.0,
        )
        confirmed.raise_for_status()
        print(f"✅ Status: {confirmed.json()['booking']['status']}")

        cancelled = httpx.delete(f"{BASE_URL}/api/v1/bookings/{booking_id}", headers=OWNER_HEADERS, timeout=10.0)
        cancelled.raise_for_status()
        print(f"✅ Status: {cancelled.json()['booking']['status']}")
        return True
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False


def main():
    print("\n🚀 Smoke testing booking API\n")

    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
        print("✅ Server is running\n")
    except httpx.HTTPError:
        print("❌ Server is not running!")
        print("   Please start it with: uvicorn salon_booking.main:app --reload --port 8001")
        sys.exit(1)

    day = next_weekday()
    start = check_availability(day)
    if start is None:
        sys.exit(1)
    booking_id = create_booking(day, start)
    if booking_id is None or not confirm_and_cancel(booking_id):
        sys.exit(1)

    print("\n" + "=" * 60)
    print("✅ Smoke test complete!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
