from __future__ import annotations

from abc import ABC, abstractmethod

from salon_booking.domain.entities.salon import Salon


class SalonRepositoryPort(ABC):
    @abstractmethod
    def get_salon(self, salon_id: str) -> Salon | None:
        """Get salon by id. Returns None if missing."""
        raise NotImplementedError
