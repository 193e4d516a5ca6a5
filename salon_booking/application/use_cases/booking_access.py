from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from salon_booking.application.exceptions import BookingError, ForbiddenError, NotFoundError
from salon_booking.application.ports.booking_store import BookingStorePort
from salon_booking.application.ports.salon_repository import SalonRepositoryPort
from salon_booking.application.ports.staff_directory import StaffDirectoryPort
from salon_booking.application.result import OperationResult
from salon_booking.domain.entities.actor import Actor, ActorRole
from salon_booking.domain.entities.booking import Booking
from salon_booking.domain.entities.salon import Salon

T = TypeVar("T")


class BookingAccessPolicy:
    """
    Who may read or change a booking, and who may see a salon's bookings.

    - view: the booking's customer, the salon owner, staff of the salon, super-admin
    - modify (update, reschedule, cancel): customer, salon owner, super-admin
    - manage (status changes): salon owner, staff of the salon, super-admin

    Staff actors are identified by their staff id.
    """

    def __init__(
        self,
        salons: SalonRepositoryPort,
        staff: StaffDirectoryPort,
        bookings: BookingStorePort,
    ) -> None:
        self._salons = salons
        self._staff = staff
        self._bookings = bookings
        self._logger = logging.getLogger(__name__)

    def view_booking(self, actor: Actor, booking_id: str) -> OperationResult[Booking]:
        def check() -> Booking:
            booking, salon = self._load(booking_id)
            if not (self._is_customer(actor, booking) or self._belongs_to_salon(actor, salon)):
                raise ForbiddenError("Forbidden")
            return booking

        return self._run(actor, check)

    def modify_booking(self, actor: Actor, booking_id: str) -> OperationResult[Booking]:
        def check() -> Booking:
            booking, salon = self._load(booking_id)
            if not (self._is_customer(actor, booking) or self._is_owner(actor, salon) or _is_super_admin(actor)):
                raise ForbiddenError("Forbidden")
            return booking

        return self._run(actor, check)

    def manage_booking(self, actor: Actor, booking_id: str) -> OperationResult[Booking]:
        def check() -> Booking:
            booking, salon = self._load(booking_id)
            if not self._belongs_to_salon(actor, salon):
                raise ForbiddenError("Forbidden: not your salon")
            return booking

        return self._run(actor, check)

    def salon_access(self, actor: Actor, salon_id: str) -> OperationResult[None]:
        def check() -> None:
            if _is_super_admin(actor):
                return None
            salon = self._salons.get_salon(salon_id)
            if salon is None:
                raise NotFoundError("Salon not found")
            if not self._belongs_to_salon(actor, salon):
                raise ForbiddenError("Forbidden: you do not belong to this salon")
            return None

        return self._run(actor, check)

    def self_access(self, actor: Actor, user_id: str) -> OperationResult[None]:
        def check() -> None:
            if actor.user_id != user_id and not _is_super_admin(actor):
                raise ForbiddenError("Access denied")
            return None

        return self._run(actor, check)

    def _load(self, booking_id: str) -> tuple[Booking, Salon]:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        salon = self._salons.get_salon(booking.salon_id)
        if salon is None:
            raise NotFoundError("Salon not found")
        return booking, salon

    @staticmethod
    def _is_customer(actor: Actor, booking: Booking) -> bool:
        return booking.user_id == actor.user_id

    @staticmethod
    def _is_owner(actor: Actor, salon: Salon) -> bool:
        return actor.role == ActorRole.salon_owner and salon.owner_id == actor.user_id

    def _is_staff(self, actor: Actor, salon: Salon) -> bool:
        if actor.role != ActorRole.staff:
            return False
        member = self._staff.get_staff(actor.user_id)
        return member is not None and member.salon_id == salon.id

    def _belongs_to_salon(self, actor: Actor, salon: Salon) -> bool:
        return _is_super_admin(actor) or self._is_owner(actor, salon) or self._is_staff(actor, salon)

    def _run(self, actor: Actor, check: Callable[[], T]) -> OperationResult[T]:
        try:
            return OperationResult.success(check())
        except BookingError as e:
            self._logger.info(
                "Booking access check failed: %s",
                e.message,
                extra={"user_id": actor.user_id, "reason": e.kind.value},
            )
            return OperationResult.failure(e)


def _is_super_admin(actor: Actor) -> bool:
    return actor.role == ActorRole.super_admin
