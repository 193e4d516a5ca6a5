from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from salon_booking.domain.entities.booking import Booking, BookingStatus
from salon_booking.domain.entities.schedule import TimeSlot
from salon_booking.infrastructure.store.memory_store import MemoryBookingStore

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("created_at", "updated_at", "confirmed_at", "cancelled_at", "completed_at")


class JsonBookingStore(MemoryBookingStore):
    """Memory store mirrored to a single JSON file, rewritten atomically on every change."""

    def __init__(self, path: str = "./data/bookings.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self._load())

    def _load(self) -> list[Booking]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            # Refuse to start over a corrupted file; the next write would erase it.
            raise RuntimeError(f"Cannot read booking data from {self._path}: {e}") from e
        return [self._deserialize(item) for item in data.get("bookings", [])]

    def _on_change(self) -> None:
        data = {"version": 1, "bookings": [self._serialize(b) for b in self._bookings.values()]}
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError:
            logger.exception("Failed to persist bookings", extra={"path": str(self._path)})
            if temp_path.exists():
                temp_path.unlink()
            raise

    @staticmethod
    def _serialize(booking: Booking) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": booking.id,
            "user_id": booking.user_id,
            "salon_id": booking.salon_id,
            "staff_id": booking.staff_id,
            "service_id": booking.service_id,
            "date": booking.date.isoformat(),
            "time_slot": {"start": booking.time_slot.start, "end": booking.time_slot.end},
            "price": str(booking.price),
            "status": booking.status.value,
            "notes": booking.notes,
        }
        for name in TIMESTAMP_FIELDS:
            value = getattr(booking, name)
            data[name] = value.isoformat() if value else None
        return data

    @staticmethod
    def _deserialize(data: dict[str, Any]) -> Booking:
        timestamps = {
            name: datetime.fromisoformat(data[name]) if data.get(name) else None
            for name in TIMESTAMP_FIELDS
        }
        return Booking(
            id=data["id"],
            user_id=data["user_id"],
            salon_id=data["salon_id"],
            staff_id=data["staff_id"],
            service_id=data["service_id"],
            date=datetime.fromisoformat(data["date"]),
            time_slot=TimeSlot(start=data["time_slot"]["start"], end=data["time_slot"]["end"]),
            price=Decimal(data["price"]),
            status=BookingStatus(data["status"]),
            notes=data.get("notes"),
            **timestamps,
        )
