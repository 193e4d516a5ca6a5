from __future__ import annotations

import logging
from typing import Any

import httpx

from salon_booking.application.ports.notifier import BookingEvent, NotificationPort
from salon_booking.application.utils.time_utils import format_date, minutes_to_time
from salon_booking.domain.entities.booking import Booking


class WebhookNotifier(NotificationPort):
    """POSTs booking events as JSON to an endpoint that handles email/SMS delivery."""

    def __init__(self, endpoint: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self._endpoint = endpoint
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def notify(self, event: BookingEvent, booking: Booking) -> None:
        resp = self._client.post(self._endpoint, json=self.build_payload(event, booking))
        if resp.status_code >= 400:
            self._logger.error(
                "Booking webhook failed",
                extra={
                    "status": resp.status_code,
                    "event": event.value,
                    "booking_id": booking.id,
                    "error": resp.text[:200],
                },
            )
            resp.raise_for_status()

    @staticmethod
    def build_payload(event: BookingEvent, booking: Booking) -> dict[str, Any]:
        return {
            "event": event.value,
            "booking": {
                "id": booking.id,
                "user_id": booking.user_id,
                "salon_id": booking.salon_id,
                "staff_id": booking.staff_id,
                "service_id": booking.service_id,
                "date": format_date(booking.date),
                "start": minutes_to_time(booking.time_slot.start),
                "end": minutes_to_time(booking.time_slot.end),
                "status": booking.status.value,
                "price": str(booking.price),
            },
        }
