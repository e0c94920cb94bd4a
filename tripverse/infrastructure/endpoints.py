"""Backend REST paths, grouped by area. Parametrised paths are formatters."""

from __future__ import annotations


class Auth:
    LOGIN = "/auth/login"
    SIGNUP = "/auth/signup"
    ME = "/auth/me"
    LOGOUT = "/auth/logout"


class Cities:
    BASE = "/cities"
    REGIONS = "/cities/regions"

    @staticmethod
    def by_id(city_id: int) -> str:
        return f"/cities/{city_id}"


class Hotels:
    BASE = "/hotels"
    SEARCH = "/hotels/search"

    @staticmethod
    def by_id(hotel_id: str) -> str:
        return f"/hotels/{hotel_id}"


class Cars:
    SEARCH = "/cars/search"
    BOOKING_REQUEST = "/cars/bookings/request"
    MY_BOOKINGS = "/cars/bookings/my-bookings"
    DRIVER_BOOKINGS = "/cars/bookings/driver-bookings"

    @staticmethod
    def by_id(car_id: str) -> str:
        return f"/cars/{car_id}"

    @staticmethod
    def calculate_price(car_id: str) -> str:
        return f"/cars/{car_id}/calculate-price"

    @staticmethod
    def booking_action(booking_id: str, action: str) -> str:
        # action: respond | confirm | start | complete
        return f"/cars/bookings/{booking_id}/{action}"

    @staticmethod
    def chat(booking_id: str) -> str:
        return f"/cars/bookings/{booking_id}/chat"

    @staticmethod
    def chat_messages(booking_id: str) -> str:
        return f"/cars/bookings/{booking_id}/chat/messages"


class _BookingPaths:
    def __init__(self, base: str):
        self.BASE = base
        self.USER = f"{base}/user"
        self.DRIVER = f"{base}/driver"

    def by_id(self, booking_id: str) -> str:
        return f"{self.BASE}/{booking_id}"

    def cancel(self, booking_id: str) -> str:
        return f"{self.BASE}/{booking_id}/cancel"


HotelBookings = _BookingPaths("/hotel-bookings")
CarBookings = _BookingPaths("/car-bookings")


class Payments:
    BASE = "/payments"
    STRIPE_CHECKOUT = "/payments/stripe/checkout"

    @staticmethod
    def by_id(payment_id: str) -> str:
        return f"/payments/{payment_id}"


class Monuments:
    RECOGNIZE = "/monuments/recognize"
    SEARCH = "/monuments/search"
    CACHE = "/monuments/cache"

    @staticmethod
    def export(monument_id: str) -> str:
        return f"/monuments/{monument_id}/export"


class Weather:
    FORECAST = "/weather/forecast"
    CURRENT = "/weather/current"

    @staticmethod
    def location(lat: float, lon: float) -> str:
        return f"/weather/location/{lat}/{lon}"


class Admin:
    DASHBOARD = "/admin/dashboard"
    DRIVERS = "/admin/drivers"
    PAYMENTS = "/admin/payments"
    DISPUTES = "/admin/disputes"

    @staticmethod
    def verify_driver(driver_id: str) -> str:
        return f"/admin/drivers/{driver_id}/verify"

    @staticmethod
    def reject_driver(driver_id: str) -> str:
        return f"/admin/drivers/{driver_id}/reject"

    @staticmethod
    def refund_payment(payment_id: str) -> str:
        return f"/admin/payments/{payment_id}/refund"

    @staticmethod
    def resolve_dispute(dispute_id: str) -> str:
        return f"/admin/disputes/{dispute_id}/resolve"
