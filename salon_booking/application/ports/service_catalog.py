from __future__ import annotations

from abc import ABC, abstractmethod

from salon_booking.domain.entities.salon_service import SalonService


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: str) -> SalonService | None:
        """Get service by id. Returns None if missing."""
        raise NotImplementedError
