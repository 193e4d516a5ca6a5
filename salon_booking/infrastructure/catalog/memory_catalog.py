from __future__ import annotations

from collections.abc import Iterable

from salon_booking.application.ports.salon_repository import SalonRepositoryPort
from salon_booking.application.ports.service_catalog import ServiceCatalogPort
from salon_booking.application.ports.staff_directory import StaffDirectoryPort
from salon_booking.domain.entities.salon import Salon
from salon_booking.domain.entities.salon_service import SalonService
from salon_booking.domain.entities.staff import Staff


class MemoryCatalog(SalonRepositoryPort, ServiceCatalogPort, StaffDirectoryPort):
    """Read-only salons, services and staff held in dicts keyed by id."""

    def __init__(
        self,
        salons: Iterable[Salon] = (),
        services: Iterable[SalonService] = (),
        staff: Iterable[Staff] = (),
    ) -> None:
        self._salons = {s.id: s for s in salons}
        self._services = {s.id: s for s in services}
        self._staff = {s.id: s for s in staff}

    def get_salon(self, salon_id: str) -> Salon | None:
        return self._salons.get(salon_id)

    def get_service(self, service_id: str) -> SalonService | None:
        return self._services.get(service_id)

    def get_staff(self, staff_id: str) -> Staff | None:
        return self._staff.get(staff_id)
