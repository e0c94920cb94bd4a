"""
Admin endpoints
===============

GET   /api/v1/admin/dashboard                    -- platform overview
GET   /api/v1/admin/drivers                      -- drivers with verification documents
PATCH /api/v1/admin/drivers/{driver_id}/verify   -- approve a driver
PATCH /api/v1/admin/drivers/{driver_id}/reject   -- reject a driver
GET   /api/v1/admin/bookings?type=car|hotel      -- every booking of one kind
GET   /api/v1/admin/payments                     -- all payments
POST  /api/v1/admin/payments/{payment_id}/refund -- refund a payment
GET   /api/v1/admin/disputes                     -- all disputes
PATCH /api/v1/admin/disputes/{dispute_id}/resolve -- resolve a dispute
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from tripverse.api.dependencies import get_backend, get_session
from tripverse.api.middleware import RATE_LIMIT, limiter
from tripverse.api.presenters import (
    decorate_bookings,
    decorate_dispute,
    decorate_driver,
    decorate_payment,
    unwrap_list,
)
from tripverse.api.schemas import DisputeResolutionRequest
from tripverse.domain.entities import Payment
from tripverse.domain.enums import BookingType
from tripverse.domain.validation import sanitize_input
from tripverse.infrastructure.gateways import AdminGateway, BookingsGateway, PaymentsGateway
from tripverse.infrastructure.http_client import BackendClient
from tripverse.infrastructure.session_store import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard", summary="Platform overview")
@limiter.limit(RATE_LIMIT)
async def dashboard(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("user:read")
    return await AdminGateway(backend).dashboard()


# ── Drivers ───────────────────────────────────────────────────────────


@router.get("/drivers", summary="Drivers and their verification documents")
@limiter.limit(RATE_LIMIT)
async def list_drivers(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("driver:verify")
    body = await AdminGateway(backend).drivers()
    return [decorate_driver(d) for d in unwrap_list(body, "drivers") if isinstance(d, dict)]


@router.patch("/drivers/{driver_id}/verify", summary="Approve a driver")
@limiter.limit(RATE_LIMIT)
async def verify_driver(
    request: Request,
    driver_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("driver:verify")
    result = await AdminGateway(backend).verify_driver(driver_id)
    logger.info("Driver %s verified", driver_id)
    return result


@router.patch("/drivers/{driver_id}/reject", summary="Reject a driver")
@limiter.limit(RATE_LIMIT)
async def reject_driver(
    request: Request,
    driver_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("driver:verify")
    result = await AdminGateway(backend).reject_driver(driver_id)
    logger.info("Driver %s rejected", driver_id)
    return result


# ── Bookings ──────────────────────────────────────────────────────────


@router.get("/bookings", summary="Every booking of one kind")
@limiter.limit(RATE_LIMIT)
async def list_bookings(
    request: Request,
    booking_type: BookingType = Query(BookingType.CAR, alias="type"),
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("booking:read")
    body = await BookingsGateway(backend, booking_type.value).list()
    return decorate_bookings(unwrap_list(body, "bookings"), session.role, booking_type)


# ── Payments ──────────────────────────────────────────────────────────


@router.get("/payments", summary="All payments")
@limiter.limit(RATE_LIMIT)
async def list_payments(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("payment:read")
    body = await AdminGateway(backend).payments()
    return [decorate_payment(p) for p in unwrap_list(body, "payments") if isinstance(p, dict)]


@router.post(
    "/payments/{payment_id}/refund",
    summary="Refund a completed payment",
    responses={409: {"description": "Payment is not refundable"}},
)
@limiter.limit(RATE_LIMIT)
async def refund_payment(
    request: Request,
    payment_id: str,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("payment:refund")
    current = await PaymentsGateway(backend).get_by_id(payment_id)
    if isinstance(current, dict) and not Payment.from_api(current).is_refundable:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot refund payment in status {current.get('status')}",
        )

    result = await AdminGateway(backend).refund_payment(payment_id)
    logger.info("Payment %s refunded", payment_id)
    return decorate_payment(result) if isinstance(result, dict) else result


# ── Disputes ──────────────────────────────────────────────────────────


@router.get("/disputes", summary="All disputes")
@limiter.limit(RATE_LIMIT)
async def list_disputes(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("dispute:read")
    body = await AdminGateway(backend).disputes()
    return [decorate_dispute(d) for d in unwrap_list(body, "disputes") if isinstance(d, dict)]


@router.patch("/disputes/{dispute_id}/resolve", summary="Resolve a dispute")
@limiter.limit(RATE_LIMIT)
async def resolve_dispute(
    request: Request,
    dispute_id: str,
    body: DisputeResolutionRequest,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("dispute:resolve")
    result = await AdminGateway(backend).resolve_dispute(
        dispute_id, sanitize_input(body.resolution)
    )
    return decorate_dispute(result) if isinstance(result, dict) else result

