"""
Decorate raw backend records for the screens.

Backend JSON is passed through untouched and gains a few derived keys:
``statusBadge`` (label + color), ``actions`` the caller's role may request,
and, for bookings with an amount, the commission breakdown. Car rentals and
hotel stays have separate status tables, so callers pass the ``BookingType``.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from tripverse.domain.commission import commission_split
from tripverse.domain.entities import (
    Dispute,
    VerificationDocument,
    all_documents_approved,
    available_actions,
)
from tripverse.domain.enums import BookingType, UserRole
from tripverse.domain.status_display import (
    StatusBadge,
    booking_badge,
    dispute_badge,
    document_badge,
    document_type_label,
    hotel_booking_badge,
    payment_badge,
)

_AMOUNT_KEYS = ("grossAmount", "gross_amount", "totalAmount", "total_amount", "total_price")


def _badge_json(badge: StatusBadge) -> dict[str, str]:
    return {"label": badge.label, "color": badge.color}


def _amount(raw: dict) -> Optional[float]:
    for key in _AMOUNT_KEYS:
        value = raw.get(key)
        if value is None or value == "":
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    return None


def unwrap_list(body: Any, *keys: str) -> list:
    """Backend list endpoints answer either ``[...]`` or ``{"<key>": [...]}``."""
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in keys + ("data", "items", "results"):
            value = body.get(key)
            if isinstance(value, list):
                return value
    return []


def decorate_booking(
    raw: dict, role: Optional[UserRole], booking_type: BookingType = BookingType.CAR
) -> dict:
    status = raw.get("status")
    if booking_type is BookingType.HOTEL:
        badge = hotel_booking_badge(status)
    else:
        badge = booking_badge(status)
    decorated = {
        **raw,
        "statusBadge": _badge_json(badge),
        "actions": available_actions(status, role, booking_type),
    }
    gross = _amount(raw)
    if gross is not None and gross >= 0:
        split = commission_split(gross)
        decorated["commission"] = {
            "gross": float(split.gross),
            "platformFee": float(split.fee),
            "net": float(split.net),
        }
    return decorated


def decorate_bookings(
    items: Iterable[Any], role: Optional[UserRole], booking_type: BookingType = BookingType.CAR
) -> list:
    return [
        decorate_booking(item, role, booking_type) if isinstance(item, dict) else item
        for item in items
    ]


def decorate_payment(raw: dict) -> dict:
    return {**raw, "statusBadge": _badge_json(payment_badge(raw.get("status")))}


def decorate_dispute(raw: dict) -> dict:
    return {
        **raw,
        "statusBadge": _badge_json(dispute_badge(raw.get("status"))),
        "isOpen": Dispute.from_api(raw).is_open,
    }


def decorate_driver(raw: dict) -> dict:
    """Add badges to a driver record and each of its verification documents."""
    decorated = dict(raw)
    status = raw.get("verificationStatus", raw.get("verification_status"))
    if status is not None:
        decorated["statusBadge"] = _badge_json(document_badge(status))

    documents = raw.get("documents")
    if isinstance(documents, list):
        decorated["documents"] = [
            {
                **doc,
                "label": document_type_label(doc.get("type")),
                "statusBadge": _badge_json(document_badge(doc.get("status"))),
            }
            for doc in documents
            if isinstance(doc, dict)
        ]
        parsed = [VerificationDocument.from_api(doc) for doc in documents if isinstance(doc, dict)]
        decorated["allDocumentsApproved"] = all_documents_approved(
            [doc for doc in parsed if doc is not None]
        )
    return decorated
