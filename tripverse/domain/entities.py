"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Booking``: mirrors the backend car rental lifecycle
  (PENDING_DRIVER_ACCEPTANCE -> ACCEPTED -> CONFIRMED -> IN_PROGRESS ->
  COMPLETED, with CANCELLED / REJECTED as absorbing branches).
  ``HotelBooking`` follows the shorter hotel lifecycle (PENDING -> CONFIRMED
  -> COMPLETED, CANCELLED -> REFUNDED).
- ``available_actions`` derives the buttons a screen may show from the same
  transition table; the backend stays the authority on every change.
- ``from_api`` constructors accept the backend's camelCase or snake_case JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from .enums import (
    BOOKING_TRANSITIONS,
    CHAT_STATUSES,
    HOTEL_BOOKING_TRANSITIONS,
    BookingStatus,
    BookingType,
    DisputeStatus,
    DocumentStatus,
    DocumentType,
    HotelBookingStatus,
    PaymentStatus,
    UserRole,
)


class InvalidStateTransition(Exception):
    """Raised when a booking status change violates the state machine."""


# Legacy lowercase values still returned by some backend endpoints.
_STATUS_ALIASES: dict[str, str] = {
    "PENDING": BookingStatus.PENDING_DRIVER_ACCEPTANCE.value,
    "INVESTIGATING": DisputeStatus.IN_REVIEW.value,
    "VERIFIED": DocumentStatus.APPROVED.value,
}

# action name -> (roles allowed to trigger it, resulting status)
BOOKING_ACTIONS: dict[str, tuple[frozenset[UserRole], BookingStatus]] = {
    "accept": (frozenset({UserRole.DRIVER}), BookingStatus.ACCEPTED),
    "reject": (frozenset({UserRole.DRIVER}), BookingStatus.REJECTED),
    "confirm": (frozenset({UserRole.CLIENT}), BookingStatus.CONFIRMED),
    "start": (frozenset({UserRole.DRIVER}), BookingStatus.IN_PROGRESS),
    "complete": (frozenset({UserRole.DRIVER}), BookingStatus.COMPLETED),
    "cancel": (frozenset({UserRole.CLIENT, UserRole.ADMIN}), BookingStatus.CANCELLED),
}

HOTEL_BOOKING_ACTIONS: dict[str, tuple[frozenset[UserRole], HotelBookingStatus]] = {
    "cancel": (frozenset({UserRole.CLIENT, UserRole.ADMIN}), HotelBookingStatus.CANCELLED),
}


def coerce_status(enum_cls, raw: Any):
    """Parse a backend status string into *enum_cls*, or ``None`` if unknown."""
    if raw is None:
        return None
    if isinstance(raw, enum_cls):
        return raw
    value = str(raw).strip().upper()
    if value not in enum_cls.__members__:
        value = _STATUS_ALIASES.get(value, value)
    try:
        return enum_cls(value)
    except ValueError:
        return None


def available_actions(
    status: Any,
    role: UserRole | str | None,
    booking_type: BookingType = BookingType.CAR,
) -> list[str]:
    """Actions *role* may request for a booking in *status*, in display order."""
    if booking_type is BookingType.HOTEL:
        current = coerce_status(HotelBookingStatus, status)
        transitions, action_table = HOTEL_BOOKING_TRANSITIONS, HOTEL_BOOKING_ACTIONS
    else:
        current = coerce_status(BookingStatus, status)
        transitions, action_table = BOOKING_TRANSITIONS, BOOKING_ACTIONS
    if isinstance(role, str) and not isinstance(role, UserRole):
        role = role.lower()
    try:
        user_role = UserRole(role) if role is not None else None
    except ValueError:
        user_role = None
    if current is None or user_role is None:
        return []

    allowed = transitions.get(current, set())
    actions = [
        name
        for name, (roles, target) in action_table.items()
        if user_role in roles and target in allowed
    ]
    if current in CHAT_STATUSES and user_role is not UserRole.ADMIN:
        actions.append("chat")
    return actions


def can_perform(
    action: str, role: Optional[UserRole], booking_type: BookingType = BookingType.CAR
) -> bool:
    """Whether *role* is ever allowed to request *action* on this kind of booking."""
    table = HOTEL_BOOKING_ACTIONS if booking_type is BookingType.HOTEL else BOOKING_ACTIONS
    entry = table.get(action)
    return entry is not None and role in entry[0]


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_amount(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Booking:
    id: Optional[str] = None
    car_id: Optional[str] = None
    driver_id: Optional[str] = None
    customer_id: Optional[str] = None
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: BookingStatus = BookingStatus.PENDING_DRIVER_ACCEPTANCE
    gross_amount: float = 0.0
    platform_fee: Optional[float] = None
    driver_earnings: Optional[float] = None

    @classmethod
    def from_api(cls, data: dict) -> "Booking":
        raw_status = _pick(data, "status", default=BookingStatus.PENDING_DRIVER_ACCEPTANCE)
        status = coerce_status(BookingStatus, raw_status)
        if status is None:
            raise ValueError(f"Unknown booking status: {raw_status!r}")

        ident = _pick(data, "id")
        fee = _pick(data, "platformFee", "platform_fee")
        earnings = _pick(data, "driverEarnings", "driver_earnings", "netAmount", "net_amount")
        return cls(
            id=str(ident) if ident is not None else None,
            car_id=_as_str(_pick(data, "carId", "car_id")),
            driver_id=_as_str(_pick(data, "driverId", "driver_id")),
            customer_id=_as_str(_pick(data, "customerId", "customer_id", "userId", "user_id")),
            pickup_location=_pick(data, "pickupLocation", "pickup_location"),
            dropoff_location=_pick(data, "dropoffLocation", "dropoff_location"),
            start_date=_parse_date(_pick(data, "startDate", "start_date")),
            end_date=_parse_date(_pick(data, "endDate", "end_date")),
            status=status,
            gross_amount=_parse_amount(
                _pick(data, "grossAmount", "gross_amount", "totalAmount", "total_amount", "total_price")
            ),
            platform_fee=_parse_amount(fee) if fee is not None else None,
            driver_earnings=_parse_amount(earnings) if earnings is not None else None,
        )

    def transition_to(self, new_status: BookingStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = BOOKING_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status

    @property
    def can_chat(self) -> bool:
        return self.status in CHAT_STATUSES


@dataclass
class HotelBooking:
    id: Optional[str] = None
    hotel_id: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: int = 1
    status: HotelBookingStatus = HotelBookingStatus.PENDING
    gross_amount: float = 0.0

    @classmethod
    def from_api(cls, data: dict) -> "HotelBooking":
        raw_status = _pick(data, "status", default=HotelBookingStatus.PENDING)
        status = coerce_status(HotelBookingStatus, raw_status)
        if status is None:
            raise ValueError(f"Unknown hotel booking status: {raw_status!r}")
        return cls(
            id=_as_str(_pick(data, "id")),
            hotel_id=_as_str(_pick(data, "hotelId", "hotel_id")),
            check_in=_parse_date(_pick(data, "checkInDate", "check_in_date", "check_in")),
            check_out=_parse_date(_pick(data, "checkOutDate", "check_out_date", "check_out")),
            guests=int(_pick(data, "guests", default=1)),
            status=status,
            gross_amount=_parse_amount(_pick(data, "totalAmount", "total_amount", "total_price")),
        )

    def transition_to(self, new_status: HotelBookingStatus) -> None:
        allowed = HOTEL_BOOKING_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status

    @property
    def is_modifiable(self) -> bool:
        """Dates and guests can change only while the stay can still be cancelled."""
        return HotelBookingStatus.CANCELLED in HOTEL_BOOKING_TRANSITIONS.get(self.status, set())


@dataclass
class Payment:
    id: Optional[str] = None
    booking_id: Optional[str] = None
    amount: float = 0.0
    currency: str = "PKR"
    status: PaymentStatus = PaymentStatus.PENDING
    refund_amount: Optional[float] = None

    @classmethod
    def from_api(cls, data: dict) -> "Payment":
        status = coerce_status(PaymentStatus, _pick(data, "status")) or PaymentStatus.PENDING
        refund = _pick(data, "refundAmount", "refund_amount")
        return cls(
            id=_as_str(_pick(data, "id")),
            booking_id=_as_str(_pick(data, "bookingId", "booking_id")),
            amount=_parse_amount(_pick(data, "amount")),
            currency=_pick(data, "currency", default="PKR"),
            status=status,
            refund_amount=_parse_amount(refund) if refund is not None else None,
        )

    @property
    def is_refundable(self) -> bool:
        return self.status is PaymentStatus.COMPLETED


@dataclass
class Dispute:
    id: Optional[str] = None
    booking_id: Optional[str] = None
    status: DisputeStatus = DisputeStatus.OPEN
    description: str = ""
    resolution: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "Dispute":
        status = coerce_status(DisputeStatus, _pick(data, "status")) or DisputeStatus.OPEN
        return cls(
            id=_as_str(_pick(data, "id")),
            booking_id=_as_str(_pick(data, "bookingId", "booking_id")),
            status=status,
            description=_pick(data, "description", default=""),
            resolution=_pick(data, "resolution"),
        )

    @property
    def is_open(self) -> bool:
        return self.status in (DisputeStatus.OPEN, DisputeStatus.IN_REVIEW)


@dataclass
class VerificationDocument:
    type: DocumentType
    status: DocumentStatus = DocumentStatus.NOT_SUBMITTED
    url: Optional[str] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> Optional["VerificationDocument"]:
        """``None`` when the document type is not one the platform asks for."""
        doc_type = coerce_status(DocumentType, _pick(data, "type"))
        if doc_type is None:
            return None
        status = coerce_status(DocumentStatus, _pick(data, "status")) or DocumentStatus.PENDING
        return cls(
            type=doc_type,
            status=status,
            url=_pick(data, "imageUrl", "image_url", "url"),
            rejection_reason=_pick(data, "rejectionReason", "rejection_reason"),
        )


def all_documents_approved(documents: list[VerificationDocument]) -> bool:
    """Every required document type is on file and approved."""
    approved = {doc.type for doc in documents if doc.status is DocumentStatus.APPROVED}
    return approved == set(DocumentType)


def _as_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None
