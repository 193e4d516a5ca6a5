from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from salon_booking.api.v1.schemas import (
    AvailabilityResponseSchema,
    BookingListResponseSchema,
    BookingResponseSchema,
    BookingSchema,
    CheckAvailabilityResponseSchema,
    StatusUpdateSchema,
)
from salon_booking.application.dto.booking_requests import (
    CheckAvailabilityRequest,
    CreateBookingRequest,
    RescheduleBookingRequest,
    UpdateBookingRequest,
)
from salon_booking.application.exceptions import BookingError, ErrorKind
from salon_booking.application.result import OperationResult
from salon_booking.application.use_cases.booking import BookingUseCase
from salon_booking.application.use_cases.booking_access import BookingAccessPolicy
from salon_booking.application.use_cases.booking_queries import BookingQueryUseCase
from salon_booking.domain.entities.actor import Actor, ActorRole
from salon_booking.wiring.dependencies import (
    get_booking_access_policy,
    get_booking_query_use_case,
    get_booking_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)

STATUS_CODES = {
    ErrorKind.validation: 400,
    ErrorKind.not_found: 404,
    ErrorKind.policy_violation: 400,
    ErrorKind.conflict: 409,
    ErrorKind.invalid_transition: 400,
    ErrorKind.forbidden: 403,
}


def get_actor(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
    x_salon_id: str | None = Header(None),
) -> Actor:
    # Authentication happens upstream; the gateway forwards the verified identity as headers.
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    try:
        role = ActorRole(x_user_role or ActorRole.customer.value)
    except ValueError:
        raise HTTPException(status_code=403, detail=f"Unknown role: {x_user_role}")
    return Actor(user_id=x_user_id, role=role, salon_id=x_salon_id)


def get_salon_actor(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_privileged:
        raise HTTPException(status_code=403, detail="Salon staff access required")
    return actor


def _raise_for(error: BookingError) -> None:
    raise HTTPException(status_code=STATUS_CODES[error.kind], detail=error.to_dict())


def _authorize(result: OperationResult) -> None:
    if not result.ok:
        _raise_for(result.error)


def _booking_response(result: OperationResult, message: str) -> BookingResponseSchema:
    if not result.ok:
        _raise_for(result.error)
    return BookingResponseSchema(message=message, booking=BookingSchema.from_entity(result.value))


@router.post("/bookings/check-availability", response_model=CheckAvailabilityResponseSchema)
def check_availability(
    req: CheckAvailabilityRequest,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    result = uc.check_availability(req.staff_id, req.date, req.time_slot)
    if not result.ok:
        _raise_for(result.error)
    return CheckAvailabilityResponseSchema(available=result.value)


@router.get("/bookings/upcoming", response_model=BookingListResponseSchema)
def upcoming_bookings(
    actor: Actor = Depends(get_actor),
    uc: BookingQueryUseCase = Depends(get_booking_query_use_case),
):
    return BookingListResponseSchema.from_entities(uc.list_upcoming(actor))


@router.get("/bookings/past", response_model=BookingListResponseSchema)
def past_bookings(
    actor: Actor = Depends(get_actor),
    uc: BookingQueryUseCase = Depends(get_booking_query_use_case),
):
    return BookingListResponseSchema.from_entities(uc.list_past(actor))


@router.get("/bookings/today", response_model=BookingListResponseSchema)
def today_bookings(
    actor: Actor = Depends(get_salon_actor),
    uc: BookingQueryUseCase = Depends(get_booking_query_use_case),
):
    return BookingListResponseSchema.from_entities(uc.list_today(actor))


@router.get("/bookings/calendar/{salon_id}", response_model=BookingListResponseSchema)
def calendar_bookings(
    salon_id: str,
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    actor: Actor = Depends(get_salon_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingQueryUseCase = Depends(get_booking_query_use_case),
):
    _authorize(access.salon_access(actor, salon_id))
    result = uc.list_calendar(actor, salon_id, start_date, end_date)
    if not result.ok:
        _raise_for(result.error)
    return BookingListResponseSchema.from_entities(result.value)


@router.get("/bookings/user/{user_id}", response_model=BookingListResponseSchema)
def user_bookings(
    user_id: str,
    actor: Actor = Depends(get_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingQueryUseCase = Depends(get_booking_query_use_case),
):
    _authorize(access.self_access(actor, user_id))
    return BookingListResponseSchema.from_entities(uc.list_user_bookings(user_id))


@router.get("/bookings/salon/{salon_id}", response_model=BookingListResponseSchema)
def salon_bookings(
    salon_id: str,
    actor: Actor = Depends(get_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingQueryUseCase = Depends(get_booking_query_use_case),
):
    _authorize(access.salon_access(actor, salon_id))
    return BookingListResponseSchema.from_entities(uc.list_salon_bookings(salon_id))


@router.get("/bookings/{booking_id}", response_model=BookingResponseSchema)
def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingQueryUseCase = Depends(get_booking_query_use_case),
):
    _authorize(access.view_booking(actor, booking_id))
    return _booking_response(uc.get_booking(booking_id), "Booking retrieved successfully")


@router.post("/bookings", response_model=BookingResponseSchema, status_code=201)
def create_booking(
    req: CreateBookingRequest,
    actor: Actor = Depends(get_actor),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    return _booking_response(uc.create_booking(actor, req), "Booking created successfully")


@router.put("/bookings/{booking_id}", response_model=BookingResponseSchema)
def update_booking(
    booking_id: str,
    req: UpdateBookingRequest,
    actor: Actor = Depends(get_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    _authorize(access.modify_booking(actor, booking_id))
    return _booking_response(uc.update_booking(booking_id, req), "Booking updated successfully")


@router.delete("/bookings/{booking_id}", response_model=BookingResponseSchema)
def cancel_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    _authorize(access.modify_booking(actor, booking_id))
    return _booking_response(uc.cancel_booking(booking_id, actor), "Booking cancelled successfully")


@router.post("/bookings/{booking_id}/reschedule", response_model=BookingResponseSchema)
def reschedule_booking(
    booking_id: str,
    req: RescheduleBookingRequest,
    actor: Actor = Depends(get_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    _authorize(access.modify_booking(actor, booking_id))
    return _booking_response(uc.reschedule_booking(booking_id, req), "Booking rescheduled successfully")


@router.patch("/bookings/{booking_id}/status", response_model=BookingResponseSchema)
def update_booking_status(
    booking_id: str,
    req: StatusUpdateSchema,
    actor: Actor = Depends(get_salon_actor),
    access: BookingAccessPolicy = Depends(get_booking_access_policy),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    _authorize(access.manage_booking(actor, booking_id))
    result = uc.update_booking_status(booking_id, req.status)
    return _booking_response(result, f"Booking marked as {req.status}")


@router.get("/staff/{staff_id}/availability", response_model=AvailabilityResponseSchema)
def staff_availability(
    staff_id: str,
    date: str | None = Query(None),
    service_id: str | None = Query(None),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    result = uc.get_availability(staff_id, service_id, date)
    if not result.ok:
        _raise_for(result.error)
    return AvailabilityResponseSchema(slots=result.value)
