from __future__ import annotations

from dataclasses import dataclass, field

from salon_booking.domain.entities.schedule import WorkingHours


@dataclass(frozen=True)
class Staff:
    id: str
    salon_id: str
    name: str
    specialties: tuple[str, ...] = ()
    working_hours: WorkingHours = field(default_factory=WorkingHours)
