"""
Status badge mapping.

Every status enum member maps to a ``StatusBadge`` (label + color token).
Lookups are total: an unrecognised raw string falls back to the raw value as
label and the neutral color, so a new backend status never breaks a page.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from .entities import coerce_status
from .enums import (
    BookingStatus,
    DisputeStatus,
    DocumentStatus,
    DocumentType,
    HotelBookingStatus,
    PaymentStatus,
)


@dataclass(frozen=True)
class StatusBadge:
    label: str
    color: str


NEUTRAL = "gray"

BOOKING_BADGES: dict[BookingStatus, StatusBadge] = {
    BookingStatus.PENDING_DRIVER_ACCEPTANCE: StatusBadge("Waiting for Driver", "yellow"),
    BookingStatus.ACCEPTED: StatusBadge("Driver Accepted", "blue"),
    BookingStatus.CONFIRMED: StatusBadge("Confirmed", "green"),
    BookingStatus.IN_PROGRESS: StatusBadge("Trip in Progress", "purple"),
    BookingStatus.COMPLETED: StatusBadge("Completed", "gray"),
    BookingStatus.CANCELLED: StatusBadge("Cancelled", "red"),
    BookingStatus.REJECTED: StatusBadge("Rejected", "red"),
}

HOTEL_BOOKING_BADGES: dict[HotelBookingStatus, StatusBadge] = {
    HotelBookingStatus.PENDING: StatusBadge("Pending", "yellow"),
    HotelBookingStatus.CONFIRMED: StatusBadge("Confirmed", "green"),
    HotelBookingStatus.COMPLETED: StatusBadge("Completed", "gray"),
    HotelBookingStatus.CANCELLED: StatusBadge("Cancelled", "red"),
    HotelBookingStatus.REFUNDED: StatusBadge("Refunded", "blue"),
}

PAYMENT_BADGES: dict[PaymentStatus, StatusBadge] = {
    PaymentStatus.PENDING: StatusBadge("Pending", "yellow"),
    PaymentStatus.COMPLETED: StatusBadge("Completed", "green"),
    PaymentStatus.FAILED: StatusBadge("Failed", "red"),
    PaymentStatus.REFUNDED: StatusBadge("Refunded", "blue"),
    PaymentStatus.PARTIALLY_REFUNDED: StatusBadge("Partially Refunded", "blue"),
}

DISPUTE_BADGES: dict[DisputeStatus, StatusBadge] = {
    DisputeStatus.OPEN: StatusBadge("Open", "red"),
    DisputeStatus.IN_REVIEW: StatusBadge("In Review", "yellow"),
    DisputeStatus.RESOLVED: StatusBadge("Resolved", "green"),
    DisputeStatus.CLOSED: StatusBadge("Closed", "gray"),
}

DOCUMENT_BADGES: dict[DocumentStatus, StatusBadge] = {
    DocumentStatus.PENDING: StatusBadge("Pending Review", "yellow"),
    DocumentStatus.APPROVED: StatusBadge("Approved", "green"),
    DocumentStatus.REJECTED: StatusBadge("Rejected", "red"),
    DocumentStatus.NOT_SUBMITTED: StatusBadge("Not Submitted", "gray"),
    DocumentStatus.INCOMPLETE: StatusBadge("Incomplete", "gray"),
}

DOCUMENT_TYPE_LABELS: dict[DocumentType, str] = {
    DocumentType.ID_CARD: "National ID Card",
    DocumentType.DRIVERS_LICENSE: "Driver's License",
    DocumentType.VEHICLE_REGISTRATION: "Vehicle Registration",
    DocumentType.INSURANCE: "Insurance Certificate",
}

_TABLES: dict[type[enum.Enum], dict] = {
    BookingStatus: BOOKING_BADGES,
    HotelBookingStatus: HOTEL_BOOKING_BADGES,
    PaymentStatus: PAYMENT_BADGES,
    DisputeStatus: DISPUTE_BADGES,
    DocumentStatus: DOCUMENT_BADGES,
}


def _badge(enum_cls: type[enum.Enum], raw: Any) -> StatusBadge:
    status = coerce_status(enum_cls, raw)
    if status is None:
        return StatusBadge(str(raw) if raw is not None else "Unknown", NEUTRAL)
    return _TABLES[enum_cls][status]


def booking_badge(raw: Any) -> StatusBadge:
    return _badge(BookingStatus, raw)


def hotel_booking_badge(raw: Any) -> StatusBadge:
    return _badge(HotelBookingStatus, raw)


def payment_badge(raw: Any) -> StatusBadge:
    return _badge(PaymentStatus, raw)


def dispute_badge(raw: Any) -> StatusBadge:
    return _badge(DisputeStatus, raw)


def document_badge(raw: Any) -> StatusBadge:
    return _badge(DocumentStatus, raw)


def document_type_label(raw: Any) -> str:
    doc_type = coerce_status(DocumentType, raw)
    if doc_type is None:
        return str(raw)
    return DOCUMENT_TYPE_LABELS[doc_type]
