from __future__ import annotations

from abc import ABC, abstractmethod

from salon_booking.domain.entities.staff import Staff


class StaffDirectoryPort(ABC):
    @abstractmethod
    def get_staff(self, staff_id: str) -> Staff | None:
        """Get staff member by id. Returns None if missing."""
        raise NotImplementedError
