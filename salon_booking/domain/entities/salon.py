from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from salon_booking.domain.entities.schedule import WorkingHours


@dataclass(frozen=True)
class Salon:
    id: str
    name: str
    owner_id: str
    working_hours: WorkingHours = field(default_factory=WorkingHours)
    holidays: tuple[datetime, ...] = ()  # UTC-midnight dates
    is_available: bool = True

    def is_holiday(self, day: datetime) -> bool:
        return any(holiday == day for holiday in self.holidays)
