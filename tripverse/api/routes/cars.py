"""
Car rental endpoints
====================

GET  /api/v1/cars                              -- search cars (filters + sort)
GET  /api/v1/cars/{car_id}                     -- car detail
POST /api/v1/cars/{car_id}/quote               -- backend price with commission split
POST /api/v1/cars/{car_id}/estimate            -- local breakdown incl. extras
POST /api/v1/cars/bookings                     -- send a booking request to the driver
GET  /api/v1/cars/bookings/mine                -- customer's bookings
GET  /api/v1/cars/bookings/driver              -- driver's bookings
POST /api/v1/cars/bookings/{id}/respond        -- driver accepts / rejects
POST /api/v1/cars/bookings/{id}/confirm        -- customer confirms
POST /api/v1/cars/bookings/{id}/start          -- driver starts the trip
POST /api/v1/cars/bookings/{id}/complete       -- driver completes the trip
GET  /api/v1/cars/bookings/{id}/chat           -- chat history
POST /api/v1/cars/bookings/{id}/chat/messages  -- send a chat message
"""

from datetime import date
import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from tripverse.api.dependencies import get_backend, get_session
from tripverse.api.middleware import RATE_LIMIT, limiter
from tripverse.api.presenters import decorate_booking, decorate_bookings, unwrap_list
from tripverse.api.schemas import (
    CarBookingRequest,
    ChatMessageRequest,
    CommissionResponse,
    DriverResponseRequest,
    PriceQuoteRequest,
    RentalEstimateRequest,
    RentalEstimateResponse,
)
from tripverse.config import settings
from tripverse.domain.commission import commission_split, estimate_rental
from tripverse.domain.filters import CarFilters, apply_car_filters, car_price
from tripverse.domain.validation import ensure_valid, sanitize_input, validate_car_booking
from tripverse.infrastructure.gateways import CarsGateway
from tripverse.infrastructure.http_client import BackendClient
from tripverse.infrastructure.session_store import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["cars"])

_QUOTE_TOTAL_KEYS = ("total_price", "totalPrice", "total", "totalAmount")


def _decorated(result: Any, session: Session) -> Any:
    if isinstance(result, dict) and "status" in result:
        return decorate_booking(result, session.role)
    return result


# ── Catalog ───────────────────────────────────────────────────────────


@router.get("", summary="Search cars")
@limiter.limit(RATE_LIMIT)
async def search_cars(
    request: Request,
    filters: Annotated[CarFilters, Query()],
    backend: BackendClient = Depends(get_backend),
):
    body = await CarsGateway(backend).search(filters.to_query_params())
    cars = [c for c in unwrap_list(body, "cars") if isinstance(c, dict)]
    matched = apply_car_filters(cars, filters)
    return {"cars": matched, "total": len(matched)}


# ── Bookings ──────────────────────────────────────────────────────────


@router.post(
    "/bookings",
    status_code=201,
    summary="Send a booking request to the car's driver",
    responses={401: {"description": "Login required for this action"}},
)
@limiter.limit(RATE_LIMIT)
async def request_booking(
    request: Request,
    body: CarBookingRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("car:book")
    ensure_valid(validate_car_booking(body.pickup_date, body.dropoff_date, today=date.today()))

    payload = {
        "car_id": body.car_id,
        "pickup_location": body.pickup_location,
        "dropoff_location": body.dropoff_location,
        "start_date": body.pickup_date,
        "end_date": body.dropoff_date,
        "pickup_time": body.pickup_time,
        "dropoff_time": body.dropoff_time,
        "customer_notes": sanitize_input(body.customer_notes) if body.customer_notes else None,
        "extras": {name: name in body.extras for name in ("gps", "insurance", "child_seat")},
    }
    result = await CarsGateway(backend).request_booking(
        {key: value for key, value in payload.items() if value is not None}
    )
    logger.info("Booking request sent for car %s", body.car_id)
    return _decorated(result, session)


@router.get("/bookings/mine", summary="Bookings made by the current customer")
@limiter.limit(RATE_LIMIT)
async def my_bookings(
    request: Request,
    status: Optional[str] = None,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    body = await CarsGateway(backend).my_bookings(status)
    return decorate_bookings(unwrap_list(body, "bookings"), session.role)


@router.get("/bookings/driver", summary="Booking requests for the current driver")
@limiter.limit(RATE_LIMIT)
async def driver_bookings(
    request: Request,
    status: Optional[str] = None,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("booking:update:own")
    body = await CarsGateway(backend).driver_bookings(status)
    return decorate_bookings(unwrap_list(body, "bookings"), session.role)


@router.post("/bookings/{booking_id}/respond", summary="Driver accepts or rejects a request")
@limiter.limit(RATE_LIMIT)
async def respond_to_booking(
    request: Request,
    booking_id: str,
    body: DriverResponseRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("booking:update:own")
    reason = sanitize_input(body.reason) if body.reason else None
    result = await CarsGateway(backend).respond(booking_id, body.action.value, reason)
    return _decorated(result, session)


@router.post("/bookings/{booking_id}/confirm", summary="Customer confirms an accepted booking")
@limiter.limit(RATE_LIMIT)
async def confirm_booking(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("car:book")
    return _decorated(await CarsGateway(backend).confirm(booking_id), session)


@router.post("/bookings/{booking_id}/start", summary="Driver starts the trip")
@limiter.limit(RATE_LIMIT)
async def start_trip(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("booking:update:own")
    return _decorated(await CarsGateway(backend).start(booking_id), session)


@router.post("/bookings/{booking_id}/complete", summary="Driver completes the trip")
@limiter.limit(RATE_LIMIT)
async def complete_trip(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("booking:update:own")
    return _decorated(await CarsGateway(backend).complete(booking_id), session)


@router.get("/bookings/{booking_id}/chat", summary="Chat history for a booking")
@limiter.limit(RATE_LIMIT)
async def get_chat(
    request: Request,
    booking_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    return await CarsGateway(backend).chat(booking_id)


@router.post(
    "/bookings/{booking_id}/chat/messages",
    status_code=201,
    summary="Send a chat message",
)
@limiter.limit(RATE_LIMIT)
async def send_chat_message(
    request: Request,
    booking_id: str,
    body: ChatMessageRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_auth()
    return await CarsGateway(backend).send_message(booking_id, sanitize_input(body.message))


# ── Single car ────────────────────────────────────────────────────────


@router.get("/{car_id}", summary="Car detail")
@limiter.limit(RATE_LIMIT)
async def get_car(
    request: Request,
    car_id: str,
    backend: BackendClient = Depends(get_backend),
):
    return await CarsGateway(backend).get_by_id(car_id)


@router.post(
    "/{car_id}/quote",
    summary="Backend price calculation with the platform commission split",
)
@limiter.limit(RATE_LIMIT)
async def quote_price(
    request: Request,
    car_id: str,
    body: PriceQuoteRequest,
    backend: BackendClient = Depends(get_backend),
):
    ensure_valid(validate_car_booking(body.start_date, body.end_date))
    quote = await CarsGateway(backend).calculate_price(
        car_id,
        {
            "start_date": body.start_date.isoformat(),
            "end_date": body.end_date.isoformat(),
            "pickup_location": body.pickup_location,
            "dropoff_location": body.dropoff_location,
        },
    )
    total = None
    if isinstance(quote, dict):
        total = next((quote[k] for k in _QUOTE_TOTAL_KEYS if quote.get(k) is not None), None)
    if not isinstance(total, (int, float)) or total < 0:
        logger.warning("Price quote for car %s has no usable total", car_id)
        return {"quote": quote, "commission": None}
    split = commission_split(total)
    return {"quote": quote, "commission": CommissionResponse.from_split(split)}


@router.post(
    "/{car_id}/estimate",
    response_model=RentalEstimateResponse,
    summary="Local price breakdown: days, extras, taxes, platform fee",
)
@limiter.limit(RATE_LIMIT)
async def estimate_price(
    request: Request,
    car_id: str,
    body: RentalEstimateRequest,
    backend: BackendClient = Depends(get_backend),
):
    ensure_valid(validate_car_booking(body.pickup_date, body.dropoff_date))
    car = await CarsGateway(backend).get_by_id(car_id)
    price = car_price(car) if isinstance(car, dict) else None
    if price is None:
        raise HTTPException(status_code=502, detail="Car listing has no daily price")

    estimate = estimate_rental(
        price,
        date.fromisoformat(body.pickup_date.strip()[:10]),
        date.fromisoformat(body.dropoff_date.strip()[:10]),
        extras=body.extras,
        taxes=body.taxes,
    )
    return RentalEstimateResponse.build(car_id, price, estimate, settings.currency)
