"""Cancellation windows and refund percentages per policy."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .enums import CancellationPolicy


@dataclass(frozen=True)
class PolicyRule:
    min_notice_hours: Optional[float]  # None: never cancellable
    refund_percent: int


POLICY_RULES: dict[CancellationPolicy, PolicyRule] = {
    CancellationPolicy.FREE_CANCELLATION: PolicyRule(24, 100),
    CancellationPolicy.MODERATE: PolicyRule(72, 50),
    CancellationPolicy.STRICT: PolicyRule(168, 0),
    CancellationPolicy.NON_REFUNDABLE: PolicyRule(None, 0),
}


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def hours_until(start: datetime, now: Optional[datetime] = None) -> float:
    now = _aware(now or datetime.now(timezone.utc))
    return (_aware(start) - now).total_seconds() / 3600


def can_cancel_booking(
    start: datetime,
    policy: CancellationPolicy,
    now: Optional[datetime] = None,
) -> bool:
    """True while the booking start is strictly further away than the notice window."""
    rule = POLICY_RULES[policy]
    if rule.min_notice_hours is None:
        return False
    return hours_until(start, now) > rule.min_notice_hours


def refund_amount(total: float | Decimal, policy: CancellationPolicy) -> Decimal:
    percent = Decimal(POLICY_RULES[policy].refund_percent)
    amount = Decimal(str(total)) * percent / 100
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
