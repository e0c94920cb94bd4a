"""
Booking and payment endpoints
=============================

POST  /api/v1/hotel-bookings                  -- book a hotel room
GET   /api/v1/hotel-bookings/mine             -- current user's hotel bookings
GET   /api/v1/hotel-bookings/{id}             -- hotel booking detail
PUT   /api/v1/hotel-bookings/{id}             -- change dates or guests of a stay
PATCH /api/v1/hotel-bookings/{id}/cancel      -- cancel a hotel booking
GET   /api/v1/car-bookings/mine               -- current user's car bookings
GET   /api/v1/car-bookings/driver             -- current driver's car bookings
GET   /api/v1/car-bookings/{id}               -- car booking detail
PATCH /api/v1/car-bookings/{id}/cancel        -- cancel a car booking
POST  /api/v1/bookings/cancellation-preview   -- refund under a cancellation policy
GET   /api/v1/payments                        -- current user's payments
POST  /api/v1/payments                        -- record a payment for a booking
GET   /api/v1/payments/{id}                   -- payment detail
POST  /api/v1/payments/checkout               -- start a Stripe checkout session
"""

from datetime import datetime, timezone
from decimal import Decimal
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from tripverse.api.dependencies import get_backend, get_session
from tripverse.api.middleware import RATE_LIMIT, limiter
from tripverse.api.presenters import (
    decorate_booking,
    decorate_bookings,
    decorate_payment,
    unwrap_list,
)
from tripverse.api.schemas import (
    CancellationPreviewRequest,
    CancellationPreviewResponse,
    CheckoutRequest,
    HotelBookingRequest,
    HotelBookingUpdateRequest,
    PaymentCreateRequest,
)
from tripverse.config import settings
from tripverse.domain.cancellation import can_cancel_booking, hours_until, refund_amount
from tripverse.domain.entities import Booking, HotelBooking
from tripverse.domain.enums import BookingStatus, BookingType, HotelBookingStatus
from tripverse.domain.validation import ensure_valid, validate_hotel_booking
from tripverse.infrastructure.gateways import BookingsGateway, PaymentsGateway
from tripverse.infrastructure.http_client import BackendClient
from tripverse.infrastructure.session_store import Session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


async def _cancel(
    backend: BackendClient, booking_id: str, session: Session, booking_type: BookingType
):
    """Refuse locally when the booking is already past the point of cancelling."""
    session.require_booking_action("cancel", booking_type)
    gateway = BookingsGateway(backend, booking_type.value)
    current = await gateway.get_by_id(booking_id)
    if isinstance(current, dict):
        try:
            if booking_type is BookingType.HOTEL:
                HotelBooking.from_api(current).transition_to(HotelBookingStatus.CANCELLED)
            else:
                Booking.from_api(current).transition_to(BookingStatus.CANCELLED)
        except ValueError as exc:
            logger.warning("Booking %s: %s; leaving the check to the backend", booking_id, exc)

    result = await gateway.cancel(booking_id)
    logger.info("%s booking %s cancelled", booking_type.value.capitalize(), booking_id)
    if isinstance(result, dict) and "status" in result:
        return decorate_booking(result, session.role, booking_type)
    return result


# ── Hotel bookings ────────────────────────────────────────────────────


@router.post("/hotel-bookings", status_code=201, summary="Book a hotel room")
@limiter.limit(RATE_LIMIT)
async def create_hotel_booking(
    request: Request,
    body: HotelBookingRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("hotel:book")
    ensure_valid(validate_hotel_booking(body.check_in, body.check_out, body.guests, body.rooms))
    result = await BookingsGateway(backend, "hotel").create(
        {
            "hotelId": body.hotel_id,
            "roomTypeId": body.room_type_id,
            "checkInDate": body.check_in,
            "checkOutDate": body.check_out,
            "guests": body.guests,
            "rooms": body.rooms,
        }
    )
    if isinstance(result, dict) and "status" in result:
        return decorate_booking(result, session.role, BookingType.HOTEL)
    return result


@router.get("/hotel-bookings/mine", summary="Current user's hotel bookings")
@limiter.limit(RATE_LIMIT)
async def my_hotel_bookings(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    body = await BookingsGateway(backend, "hotel").for_user()
    return decorate_bookings(unwrap_list(body, "bookings"), session.role, BookingType.HOTEL)


@router.get("/hotel-bookings/{booking_id}", summary="Hotel booking detail")
@limiter.limit(RATE_LIMIT)
async def get_hotel_booking(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    result = await BookingsGateway(backend, "hotel").get_by_id(booking_id)
    if isinstance(result, dict):
        return decorate_booking(result, session.role, BookingType.HOTEL)
    return result


@router.put(
    "/hotel-bookings/{booking_id}",
    summary="Change the dates or guests of a hotel booking",
    responses={409: {"description": "Booking can no longer be changed"}},
)
@limiter.limit(RATE_LIMIT)
async def update_hotel_booking(
    request: Request,
    booking_id: str,
    body: HotelBookingUpdateRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("hotel:book")
    ensure_valid(validate_hotel_booking(body.check_in, body.check_out, body.guests, body.rooms))

    gateway = BookingsGateway(backend, "hotel")
    current = await gateway.get_by_id(booking_id)
    if isinstance(current, dict):
        try:
            booking = HotelBooking.from_api(current)
        except ValueError as exc:
            logger.warning("Booking %s: %s; leaving the check to the backend", booking_id, exc)
        else:
            if not booking.is_modifiable:
                raise HTTPException(
                    status_code=409,
                    detail=f"Cannot change a booking in status {booking.status.value}",
                )

    result = await gateway.update(
        booking_id,
        {
            "checkInDate": body.check_in,
            "checkOutDate": body.check_out,
            "guests": body.guests,
            "rooms": body.rooms,
        },
    )
    logger.info("Hotel booking %s updated", booking_id)
    if isinstance(result, dict) and "status" in result:
        return decorate_booking(result, session.role, BookingType.HOTEL)
    return result


@router.patch(
    "/hotel-bookings/{booking_id}/cancel",
    summary="Cancel a hotel booking",
    responses={409: {"description": "Booking can no longer be cancelled"}},
)
@limiter.limit(RATE_LIMIT)
async def cancel_hotel_booking(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    return await _cancel(backend, booking_id, session, BookingType.HOTEL)


# ── Car bookings ──────────────────────────────────────────────────────


@router.get("/car-bookings/mine", summary="Current user's car bookings")
@limiter.limit(RATE_LIMIT)
async def my_car_bookings(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    body = await BookingsGateway(backend, "car").for_user()
    return decorate_bookings(unwrap_list(body, "bookings"), session.role)


@router.get("/car-bookings/driver", summary="Current driver's car bookings")
@limiter.limit(RATE_LIMIT)
async def driver_car_bookings(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("booking:update:own")
    body = await BookingsGateway(backend, "car").for_driver()
    return decorate_bookings(unwrap_list(body, "bookings"), session.role)


@router.get("/car-bookings/{booking_id}", summary="Car booking detail")
@limiter.limit(RATE_LIMIT)
async def get_car_booking(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    result = await BookingsGateway(backend, "car").get_by_id(booking_id)
    return decorate_booking(result, session.role) if isinstance(result, dict) else result


@router.patch(
    "/car-bookings/{booking_id}/cancel",
    summary="Cancel a car booking",
    responses={409: {"description": "Booking can no longer be cancelled"}},
)
@limiter.limit(RATE_LIMIT)
async def cancel_car_booking(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    return await _cancel(backend, booking_id, session, BookingType.CAR)


# ── Cancellation policy ───────────────────────────────────────────────


@router.post(
    "/bookings/cancellation-preview",
    response_model=CancellationPreviewResponse,
    summary="Whether a booking can still be cancelled, and the refund",
)
@limiter.limit(RATE_LIMIT)
async def cancellation_preview(request: Request, body: CancellationPreviewRequest):
    now = datetime.now(timezone.utc)
    allowed = can_cancel_booking(body.start, body.policy, now)
    refund = refund_amount(body.total_amount, body.policy) if allowed else Decimal("0.00")
    return CancellationPreviewResponse(
        can_cancel=allowed,
        refund_amount=refund,
        hours_until_start=round(hours_until(body.start, now), 2),
    )


# ── Payments ──────────────────────────────────────────────────────────


@router.get("/payments", summary="Current user's payments")
@limiter.limit(RATE_LIMIT)
async def list_payments(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    body = await PaymentsGateway(backend).list()
    return [decorate_payment(p) for p in unwrap_list(body, "payments") if isinstance(p, dict)]


@router.post("/payments", status_code=201, summary="Record a payment for a booking")
@limiter.limit(RATE_LIMIT)
async def create_payment(
    request: Request,
    body: PaymentCreateRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("payment:create")
    payload = {
        "bookingId": body.booking_id,
        "amount": body.amount,
        "currency": body.currency or settings.currency,
        "method": body.method,
        "returnUrl": body.return_url,
    }
    result = await PaymentsGateway(backend).create(
        {key: value for key, value in payload.items() if value is not None}
    )
    logger.info("Payment recorded for booking %s", body.booking_id)
    return decorate_payment(result) if isinstance(result, dict) else result


@router.post("/payments/checkout", summary="Start a Stripe checkout for a booking")
@limiter.limit(RATE_LIMIT)
async def checkout(
    request: Request,
    body: CheckoutRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("payment:create")
    return await PaymentsGateway(backend).stripe_checkout(
        body.booking_id, body.booking_type.value
    )


@router.get("/payments/{payment_id}", summary="Payment detail")
@limiter.limit(RATE_LIMIT)
async def get_payment(
    request: Request,
    payment_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    result = await PaymentsGateway(backend).get_by_id(payment_id)
    return decorate_payment(result) if isinstance(result, dict) else result
