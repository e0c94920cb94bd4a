"""
Platform Commission & Rental Estimates
======================================

Formula
-------
Platform_Fee = round_half_up(Gross x Commission_Rate)     (whole currency units)
Net_Amount   = Gross - Platform_Fee

* **Commission_Rate** comes from ``settings.commission_rate`` (5 % by default)
  so every screen (driver dashboard, payouts, booking quote) agrees.
* Arithmetic is done in ``Decimal`` so ``fee + net == gross`` holds exactly.

Rental estimate
---------------
Subtotal = Price_Per_Day x Days          (Days = whole days, rounded up)
Total    = Subtotal + Extras + Taxes + Platform_Fee(Subtotal + Extras)
Driver   = Net_Amount(Subtotal)

Complexity: O(1) per split, O(n) for an earnings summary over n bookings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from tripverse.config import settings

from .entities import Booking
from .enums import BookingStatus

Number = Union[int, float, Decimal]

# Flat add-on prices offered on the car booking form.
EXTRA_PRICES: dict[str, Decimal] = {
    "gps": Decimal("500"),
    "insurance": Decimal("1500"),
    "child_seat": Decimal("300"),
}

_UPCOMING = frozenset(
    {BookingStatus.ACCEPTED, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps the float's shortest repr, so 0.05 stays 0.05
    return Decimal(str(value))


def _rate(rate: Optional[Number]) -> Decimal:
    return _to_decimal(settings.commission_rate if rate is None else rate)


@dataclass(frozen=True)
class CommissionSplit:
    gross: Decimal
    fee: Decimal
    net: Decimal
    rate: Decimal


def commission_split(gross: Number, rate: Optional[Number] = None) -> CommissionSplit:
    """Split *gross* into the platform fee and the amount paid out."""
    gross_d = _to_decimal(gross)
    if gross_d < 0:
        raise ValueError("Gross amount must be non-negative")
    rate_d = _rate(rate)
    fee = (gross_d * rate_d).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return CommissionSplit(gross=gross_d, fee=fee, net=gross_d - fee, rate=rate_d)


# ── Rental estimate ───────────────────────────────────────────────────


@dataclass(frozen=True)
class RentalEstimate:
    days: int
    subtotal: Decimal
    extras_total: Decimal
    taxes: Decimal
    platform_fee: Decimal
    total: Decimal
    driver_earnings: Decimal


def rental_days(pickup: date | datetime, dropoff: date | datetime) -> int:
    """Whole rental days between two points in time, rounded up."""
    if isinstance(pickup, datetime) or isinstance(dropoff, datetime):
        start = pickup if isinstance(pickup, datetime) else datetime.combine(pickup, datetime.min.time())
        end = dropoff if isinstance(dropoff, datetime) else datetime.combine(dropoff, datetime.min.time())
        seconds = abs((end - start).total_seconds())
        return math.ceil(seconds / 86_400)
    return abs((dropoff - pickup).days)


def estimate_rental(
    price_per_day: Number,
    pickup: date | datetime,
    dropoff: date | datetime,
    extras: Iterable[str] = (),
    taxes: Number = 0,
    rate: Optional[Number] = None,
) -> RentalEstimate:
    """Price breakdown shown before the customer sends a booking request."""
    unknown = set(extras) - EXTRA_PRICES.keys()
    if unknown:
        raise ValueError(f"Unknown extras: {', '.join(sorted(unknown))}")

    days = rental_days(pickup, dropoff)
    subtotal = _to_decimal(price_per_day) * days
    extras_total = sum((EXTRA_PRICES[name] for name in set(extras)), Decimal("0"))
    taxes_d = _to_decimal(taxes)

    fee = commission_split(subtotal + extras_total, rate).fee
    return RentalEstimate(
        days=days,
        subtotal=subtotal,
        extras_total=extras_total,
        taxes=taxes_d,
        platform_fee=fee,
        total=subtotal + extras_total + taxes_d + fee,
        driver_earnings=commission_split(subtotal, rate).net,
    )


# ── Driver earnings ───────────────────────────────────────────────────


@dataclass(frozen=True)
class EarningsSummary:
    total_bookings: int
    completed_bookings: int
    upcoming_bookings: int
    gross_total: Decimal
    platform_fee_total: Decimal
    net_total: Decimal


def summarize_earnings(
    bookings: Iterable[Booking], rate: Optional[Number] = None
) -> EarningsSummary:
    """Aggregate completed bookings the way the payouts page itemises them.

    Each booking is split on its own so the totals equal the sum of the rows.
    """
    total = completed = upcoming = 0
    gross = fee = net = Decimal("0")
    for booking in bookings:
        total += 1
        if booking.status in _UPCOMING:
            upcoming += 1
        if booking.status is not BookingStatus.COMPLETED:
            continue
        completed += 1
        split = commission_split(booking.gross_amount, rate)
        gross += split.gross
        fee += split.fee
        net += split.net

    return EarningsSummary(
        total_bookings=total,
        completed_bookings=completed,
        upcoming_bookings=upcoming,
        gross_total=gross,
        platform_fee_total=fee,
        net_total=net,
    )
