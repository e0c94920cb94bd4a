"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from tripverse.domain.commission import CommissionSplit, EarningsSummary, RentalEstimate
from tripverse.domain.enums import BookingType, CancellationPolicy, DriverAction


# ── Requests ──────────────────────────────────────────────────────────


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    full_name: str
    email: str
    password: str
    confirm_password: str
    role: Literal["client", "driver"] = "client"
    city_id: Optional[int] = None
    phone: Optional[str] = None


ExtraName = Literal["gps", "insurance", "child_seat"]


class CarBookingRequest(BaseModel):
    car_id: str
    pickup_date: Optional[str] = None
    dropoff_date: Optional[str] = None
    pickup_time: str = "10:00"
    dropoff_time: str = "10:00"
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None
    customer_notes: Optional[str] = Field(None, max_length=1000)
    extras: list[ExtraName] = []


class PriceQuoteRequest(BaseModel):
    start_date: date
    end_date: date
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None


class RentalEstimateRequest(BaseModel):
    pickup_date: Optional[str] = None
    dropoff_date: Optional[str] = None
    extras: list[ExtraName] = []
    taxes: float = Field(0, ge=0)


class DriverResponseRequest(BaseModel):
    action: DriverAction
    reason: Optional[str] = Field(None, max_length=500)


class ChatMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class HotelBookingRequest(BaseModel):
    hotel_id: str
    room_type_id: str
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    guests: int = 1
    rooms: int = 1


class HotelBookingUpdateRequest(BaseModel):
    check_in: str
    check_out: str
    guests: int = 1
    rooms: int = 1


class PaymentCreateRequest(BaseModel):
    booking_id: str
    amount: float = Field(..., gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    method: Literal["stripe", "paypal", "bank_transfer"] = "stripe"
    return_url: Optional[str] = None


class CheckoutRequest(BaseModel):
    booking_id: str
    booking_type: BookingType


class CancellationPreviewRequest(BaseModel):
    start: datetime
    policy: CancellationPolicy
    total_amount: float = Field(..., ge=0)


class DisputeResolutionRequest(BaseModel):
    resolution: str = Field(..., min_length=1, max_length=2000)


# ── Responses ─────────────────────────────────────────────────────────


class CommissionResponse(BaseModel):
    gross: float
    platform_fee: float
    net: float
    rate: float

    @classmethod
    def from_split(cls, split: CommissionSplit) -> "CommissionResponse":
        return cls(
            gross=float(split.gross),
            platform_fee=float(split.fee),
            net=float(split.net),
            rate=float(split.rate),
        )


class RentalEstimateResponse(BaseModel):
    car_id: str
    days: int
    price_per_day: float
    subtotal: float
    extras_total: float
    taxes: float
    platform_fee: float
    total: float
    driver_earnings: float
    currency: str

    @classmethod
    def build(
        cls, car_id: str, price_per_day: float, estimate: RentalEstimate, currency: str
    ) -> "RentalEstimateResponse":
        return cls(
            car_id=car_id,
            days=estimate.days,
            price_per_day=price_per_day,
            subtotal=float(estimate.subtotal),
            extras_total=float(estimate.extras_total),
            taxes=float(estimate.taxes),
            platform_fee=float(estimate.platform_fee),
            total=float(estimate.total),
            driver_earnings=float(estimate.driver_earnings),
            currency=currency,
        )


class EarningsSummaryResponse(BaseModel):
    total_bookings: int
    completed_bookings: int
    upcoming_bookings: int
    gross_total: float
    platform_fee_total: float
    net_total: float
    currency: str

    @classmethod
    def build(cls, summary: EarningsSummary, currency: str) -> "EarningsSummaryResponse":
        return cls(
            total_bookings=summary.total_bookings,
            completed_bookings=summary.completed_bookings,
            upcoming_bookings=summary.upcoming_bookings,
            gross_total=float(summary.gross_total),
            platform_fee_total=float(summary.platform_fee_total),
            net_total=float(summary.net_total),
            currency=currency,
        )


class CancellationPreviewResponse(BaseModel):
    can_cancel: bool
    refund_amount: Decimal
    hours_until_start: float


class SessionResponse(BaseModel):
    authenticated: bool
    user: Optional[dict[str, Any]] = None
    role: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
