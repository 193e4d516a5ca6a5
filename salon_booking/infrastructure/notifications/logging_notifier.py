from __future__ import annotations

import logging

from salon_booking.application.ports.notifier import BookingEvent, NotificationPort
from salon_booking.domain.entities.booking import Booking


class LoggingNotifier(NotificationPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def notify(self, event: BookingEvent, booking: Booking) -> None:
        self._logger.info(
            "Booking notification",
            extra={
                "event": event.value,
                "booking_id": booking.id,
                "user_id": booking.user_id,
                "status": booking.status.value,
            },
        )
