"""Domain enumerations and booking state-transition rules."""

import enum


class BookingStatus(str, enum.Enum):
    PENDING_DRIVER_ACCEPTANCE = "PENDING_DRIVER_ACCEPTANCE"
    ACCEPTED = "ACCEPTED"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


# State machine: maps current status -> set of valid next statuses.
# The backend owns the transitions; this table only decides what a screen offers.
BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING_DRIVER_ACCEPTANCE: {
        BookingStatus.ACCEPTED,
        BookingStatus.REJECTED,
        BookingStatus.CANCELLED,
    },
    BookingStatus.ACCEPTED: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED},
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
    BookingStatus.REJECTED: set(),
}

CHAT_STATUSES = frozenset(
    {BookingStatus.ACCEPTED, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)


class HotelBookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"


# Hotel stays have no driver step and no chat.
HOTEL_BOOKING_TRANSITIONS: dict[HotelBookingStatus, set[HotelBookingStatus]] = {
    HotelBookingStatus.PENDING: {HotelBookingStatus.CONFIRMED, HotelBookingStatus.CANCELLED},
    HotelBookingStatus.CONFIRMED: {HotelBookingStatus.COMPLETED, HotelBookingStatus.CANCELLED},
    HotelBookingStatus.CANCELLED: {HotelBookingStatus.REFUNDED},
    HotelBookingStatus.COMPLETED: set(),
    HotelBookingStatus.REFUNDED: set(),
}


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


class DisputeStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_REVIEW = "IN_REVIEW"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class DocumentType(str, enum.Enum):
    ID_CARD = "ID_CARD"
    DRIVERS_LICENSE = "DRIVERS_LICENSE"
    VEHICLE_REGISTRATION = "VEHICLE_REGISTRATION"
    INSURANCE = "INSURANCE"


class DocumentStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    NOT_SUBMITTED = "NOT_SUBMITTED"
    INCOMPLETE = "INCOMPLETE"


class UserRole(str, enum.Enum):
    CLIENT = "client"
    DRIVER = "driver"
    ADMIN = "admin"


class BookingType(str, enum.Enum):
    HOTEL = "hotel"
    CAR = "car"


class DriverAction(str, enum.Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class CancellationPolicy(str, enum.Enum):
    FREE_CANCELLATION = "FREE_CANCELLATION"
    MODERATE = "MODERATE"
    STRICT = "STRICT"
    NON_REFUNDABLE = "NON_REFUNDABLE"
