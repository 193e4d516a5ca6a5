from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SalonService:
    id: str
    salon_id: str
    name: str
    duration_minutes: int
    price: Decimal
    description: str | None = None
