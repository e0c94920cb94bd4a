"""Unit tests for booking entity state transitions and offered actions."""

import pytest

from tripverse.domain.entities import (
    Booking,
    Dispute,
    HotelBooking,
    InvalidStateTransition,
    Payment,
    VerificationDocument,
    all_documents_approved,
    available_actions,
    can_perform,
    coerce_status,
)
from tripverse.domain.enums import (
    BOOKING_TRANSITIONS,
    BookingStatus,
    BookingType,
    DisputeStatus,
    DocumentStatus,
    DocumentType,
    HotelBookingStatus,
    PaymentStatus,
    UserRole,
)


class TestBookingStateMachine:
    def test_initial_status_is_waiting_for_driver(self):
        assert Booking().status == BookingStatus.PENDING_DRIVER_ACCEPTANCE

    # ── Valid transitions ─────────────────────────────────────────

    def test_happy_path(self):
        booking = Booking()
        for status in (
            BookingStatus.ACCEPTED,
            BookingStatus.CONFIRMED,
            BookingStatus.IN_PROGRESS,
            BookingStatus.COMPLETED,
        ):
            booking.transition_to(status)
        assert booking.status == BookingStatus.COMPLETED
        assert not BOOKING_TRANSITIONS[booking.status]

    def test_driver_rejects(self):
        booking = Booking()
        booking.transition_to(BookingStatus.REJECTED)
        assert available_actions(booking.status, "driver") == []

    @pytest.mark.parametrize(
        "status",
        [
            BookingStatus.PENDING_DRIVER_ACCEPTANCE,
            BookingStatus.ACCEPTED,
            BookingStatus.CONFIRMED,
        ],
    )
    def test_cancellable_before_trip_starts(self, status):
        booking = Booking(status=status)
        booking.transition_to(BookingStatus.CANCELLED)
        assert booking.status == BookingStatus.CANCELLED

    # ── Invalid transitions ───────────────────────────────────────

    def test_pending_to_completed_fails(self):
        with pytest.raises(InvalidStateTransition):
            Booking().transition_to(BookingStatus.COMPLETED)

    def test_in_progress_cannot_be_cancelled(self):
        booking = Booking(status=BookingStatus.IN_PROGRESS)
        with pytest.raises(InvalidStateTransition):
            booking.transition_to(BookingStatus.CANCELLED)

    @pytest.mark.parametrize(
        "terminal",
        [BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.REJECTED],
    )
    def test_terminal_states_are_absorbing(self, terminal):
        booking = Booking(status=terminal)
        for target in BookingStatus:
            with pytest.raises(InvalidStateTransition):
                booking.transition_to(target)

    # ── Chat ──────────────────────────────────────────────────────

    def test_chat_only_while_booking_is_live(self):
        live = {BookingStatus.ACCEPTED, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
        for status in BookingStatus:
            assert Booking(status=status).can_chat == (status in live)


class TestAvailableActions:
    def test_driver_on_new_request(self):
        assert available_actions("PENDING_DRIVER_ACCEPTANCE", UserRole.DRIVER) == [
            "accept",
            "reject",
        ]

    def test_client_on_new_request_can_only_cancel(self):
        assert available_actions("PENDING_DRIVER_ACCEPTANCE", "client") == ["cancel"]

    def test_client_on_accepted_booking(self):
        assert available_actions("ACCEPTED", "CLIENT") == ["confirm", "cancel", "chat"]

    def test_driver_on_confirmed_booking(self):
        assert available_actions("CONFIRMED", "driver") == ["start", "chat"]

    def test_driver_on_trip(self):
        assert available_actions("IN_PROGRESS", "driver") == ["complete", "chat"]

    def test_admin_never_chats(self):
        assert available_actions("CONFIRMED", UserRole.ADMIN) == ["cancel"]

    def test_terminal_status_offers_nothing(self):
        assert available_actions("COMPLETED", "driver") == []

    def test_unknown_status_or_role(self):
        assert available_actions("TELEPORTED", "driver") == []
        assert available_actions("ACCEPTED", "pilot") == []
        assert available_actions("ACCEPTED", None) == []

    def test_legacy_lowercase_pending(self):
        assert available_actions("pending", "driver") == ["accept", "reject"]


class TestCoerceStatus:
    def test_case_insensitive(self):
        assert coerce_status(BookingStatus, "in_progress") == BookingStatus.IN_PROGRESS

    def test_aliases(self):
        assert coerce_status(DisputeStatus, "investigating") == DisputeStatus.IN_REVIEW
        assert coerce_status(DocumentStatus, "VERIFIED") == DocumentStatus.APPROVED

    def test_unknown_is_none(self):
        assert coerce_status(PaymentStatus, "LOST") is None
        assert coerce_status(PaymentStatus, None) is None


class TestFromApi:
    def test_booking_camel_case(self):
        booking = Booking.from_api(
            {
                "id": 42,
                "carId": 7,
                "startDate": "2024-01-15T10:00:00Z",
                "endDate": "2024-01-18",
                "status": "CONFIRMED",
                "totalAmount": "15000",
            }
        )
        assert booking.id == "42"
        assert booking.car_id == "7"
        assert booking.start_date.isoformat() == "2024-01-15"
        assert booking.end_date.isoformat() == "2024-01-18"
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.gross_amount == 15000.0

    def test_booking_snake_case(self):
        booking = Booking.from_api(
            {"id": "b1", "status": "completed", "total_price": 9000, "driver_earnings": 8550}
        )
        assert booking.status == BookingStatus.COMPLETED
        assert booking.gross_amount == 9000.0
        assert booking.driver_earnings == 8550.0

    def test_booking_unknown_status_raises(self):
        with pytest.raises(ValueError):
            Booking.from_api({"id": "b1", "status": "TELEPORTED"})

    def test_payment_refundable_only_when_completed(self):
        assert Payment.from_api({"status": "COMPLETED", "amount": 100}).is_refundable
        assert not Payment.from_api({"status": "REFUNDED", "amount": 100}).is_refundable

    def test_dispute_open_while_under_review(self):
        assert Dispute.from_api({"status": "INVESTIGATING"}).is_open
        assert not Dispute.from_api({"status": "RESOLVED"}).is_open


class TestVerificationDocuments:
    def test_from_api(self):
        doc = VerificationDocument.from_api(
            {"type": "drivers_license", "status": "REJECTED", "rejectionReason": "Blurry"}
        )
        assert doc.type == DocumentType.DRIVERS_LICENSE
        assert doc.status == DocumentStatus.REJECTED
        assert doc.rejection_reason == "Blurry"

    def test_unknown_type_is_skipped(self):
        assert VerificationDocument.from_api({"type": "PASSPORT"}) is None

    def test_all_documents_approved(self):
        docs = [VerificationDocument(t, DocumentStatus.APPROVED) for t in DocumentType]
        assert all_documents_approved(docs)
        docs[0] = VerificationDocument(docs[0].type, DocumentStatus.PENDING)
        assert not all_documents_approved(docs)
        assert not all_documents_approved([])


class TestHotelBookings:
    def test_from_api(self):
        booking = HotelBooking.from_api(
            {
                "id": 9,
                "hotelId": "h1",
                "checkInDate": "2024-03-01",
                "checkOutDate": "2024-03-04",
                "guests": 2,
                "status": "pending",
                "totalAmount": 36000,
            }
        )
        assert booking.id == "9"
        assert booking.status is HotelBookingStatus.PENDING
        assert booking.check_out.isoformat() == "2024-03-04"
        assert booking.gross_amount == 36000.0

    def test_unknown_status_raises(self):
        with pytest.raises(ValueError):
            HotelBooking.from_api({"status": "ACCEPTED"})

    def test_cancel_then_refund(self):
        booking = HotelBooking(status=HotelBookingStatus.CONFIRMED)
        booking.transition_to(HotelBookingStatus.CANCELLED)
        booking.transition_to(HotelBookingStatus.REFUNDED)
        assert booking.status is HotelBookingStatus.REFUNDED

    def test_completed_stay_cannot_be_cancelled(self):
        with pytest.raises(InvalidStateTransition):
            HotelBooking(status=HotelBookingStatus.COMPLETED).transition_to(
                HotelBookingStatus.CANCELLED
            )

    @pytest.mark.parametrize(
        "status, modifiable",
        [
            (HotelBookingStatus.PENDING, True),
            (HotelBookingStatus.CONFIRMED, True),
            (HotelBookingStatus.CANCELLED, False),
            (HotelBookingStatus.COMPLETED, False),
            (HotelBookingStatus.REFUNDED, False),
        ],
    )
    def test_is_modifiable(self, status, modifiable):
        assert HotelBooking(status=status).is_modifiable is modifiable

    def test_actions_are_cancel_only_without_chat(self):
        assert available_actions("PENDING", "client", BookingType.HOTEL) == ["cancel"]
        assert available_actions("CONFIRMED", "client", BookingType.HOTEL) == ["cancel"]
        assert available_actions("CONFIRMED", "driver", BookingType.HOTEL) == []
        assert available_actions("REFUNDED", "admin", BookingType.HOTEL) == []

    def test_car_statuses_are_unknown_to_hotels(self):
        assert available_actions("IN_PROGRESS", "client", BookingType.HOTEL) == []


class TestCanPerform:
    def test_drivers_never_cancel(self):
        assert not can_perform("cancel", UserRole.DRIVER)
        assert not can_perform("cancel", UserRole.DRIVER, BookingType.HOTEL)

    def test_clients_and_admins_cancel(self):
        assert can_perform("cancel", UserRole.CLIENT)
        assert can_perform("cancel", UserRole.ADMIN, BookingType.HOTEL)

    def test_unknown_action_or_role(self):
        assert not can_perform("teleport", UserRole.ADMIN)
        assert not can_perform("cancel", None)
