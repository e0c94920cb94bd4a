"""
Driver endpoints
================

GET /api/v1/driver/earnings -- payouts summary over the driver's bookings
"""

import logging

from fastapi import APIRouter, Depends, Request

from tripverse.api.dependencies import get_backend, get_session
from tripverse.api.middleware import RATE_LIMIT, limiter
from tripverse.api.presenters import unwrap_list
from tripverse.api.schemas import EarningsSummaryResponse
from tripverse.config import settings
from tripverse.domain.commission import summarize_earnings
from tripverse.domain.entities import Booking
from tripverse.infrastructure.gateways import CarsGateway
from tripverse.infrastructure.http_client import BackendClient
from tripverse.infrastructure.session_store import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/driver", tags=["driver"])


@router.get(
    "/earnings",
    response_model=EarningsSummaryResponse,
    summary="Gross, platform fee and net payout over completed trips",
)
@limiter.limit(RATE_LIMIT)
async def earnings(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    session: Session = Depends(get_session),
):
    session.require_permission("payout:read:own")
    body = await CarsGateway(backend).driver_bookings()

    bookings: list[Booking] = []
    for raw in unwrap_list(body, "bookings"):
        if not isinstance(raw, dict):
            continue
        try:
            bookings.append(Booking.from_api(raw))
        except ValueError as exc:
            logger.warning("Skipping booking %s in earnings: %s", raw.get("id"), exc)

    summary = summarize_earnings(bookings)
    return EarningsSummaryResponse.build(summary, settings.currency)
