"""
Gateway Pattern -- one class per backend area.

Each gateway receives a ``BackendClient`` (already bound to the caller's
cookies) and exposes the requests the screens need. Bodies are the backend's
JSON and are passed through untouched; interpretation lives in ``domain``.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Optional

from . import endpoints
from .http_client import (
    AuthenticationRequired,
    BackendClient,
    BackendError,
    BackendUnavailable,
)

logger = logging.getLogger(__name__)


class AuthGateway:
    def __init__(self, client: BackendClient):
        self.client = client

    async def login(self, email: str, password: str) -> Any:
        return await self.client.post(
            endpoints.Auth.LOGIN, {"email": email, "password": password}
        )

    async def signup(self, payload: dict[str, Any]) -> Any:
        return await self.client.post(endpoints.Auth.SIGNUP, payload)

    async def me(self) -> Any:
        return await self.client.get(endpoints.Auth.ME)

    async def logout(self) -> Any:
        return await self.client.post(endpoints.Auth.LOGOUT)


class CitiesGateway:
    def __init__(self, client: BackendClient):
        self.client = client

    async def list(self) -> Any:
        return await self.client.get(endpoints.Cities.BASE)

    async def regions(self) -> Any:
        return await self.client.get(endpoints.Cities.REGIONS)

    async def get_by_id(self, city_id: int) -> Any:
        return await self.client.get(endpoints.Cities.by_id(city_id))


class HotelsGateway:
    def __init__(self, client: BackendClient):
        self.client = client

    async def list(self) -> Any:
        return await self.client.get(endpoints.Hotels.BASE)

    async def search(self, params: dict[str, Any]) -> Any:
        return await self.client.get(endpoints.Hotels.SEARCH, params)

    async def get_by_id(self, hotel_id: str) -> Any:
        return await self.client.get(endpoints.Hotels.by_id(hotel_id))


class CarsGateway:
    """Car catalog plus the whole rental booking lifecycle."""

    def __init__(self, client: BackendClient):
        self.client = client

    async def search(self, params: dict[str, Any]) -> Any:
        return await self.client.get(endpoints.Cars.SEARCH, params)

    async def get_by_id(self, car_id: str) -> Any:
        return await self.client.get(endpoints.Cars.by_id(car_id))

    async def calculate_price(self, car_id: str, payload: dict[str, Any]) -> Any:
        return await self.client.post(endpoints.Cars.calculate_price(car_id), payload)

    async def request_booking(self, payload: dict[str, Any]) -> Any:
        return await self.client.post(endpoints.Cars.BOOKING_REQUEST, payload)

    async def respond(self, booking_id: str, action: str, reason: Optional[str] = None) -> Any:
        body: dict[str, Any] = {"action": action}
        if reason:
            body["reason"] = reason
        return await self.client.post(endpoints.Cars.booking_action(booking_id, "respond"), body)

    async def confirm(self, booking_id: str) -> Any:
        return await self.client.post(endpoints.Cars.booking_action(booking_id, "confirm"))

    async def start(self, booking_id: str) -> Any:
        return await self.client.post(endpoints.Cars.booking_action(booking_id, "start"))

    async def complete(self, booking_id: str) -> Any:
        return await self.client.post(endpoints.Cars.booking_action(booking_id, "complete"))

    async def my_bookings(self, status: Optional[str] = None) -> Any:
        return await self.client.get(endpoints.Cars.MY_BOOKINGS, {"status": status})

    async def driver_bookings(self, status: Optional[str] = None) -> Any:
        return await self.client.get(endpoints.Cars.DRIVER_BOOKINGS, {"status": status})

    async def chat(self, booking_id: str) -> Any:
        return await self.client.get(endpoints.Cars.chat(booking_id))

    async def send_message(self, booking_id: str, message: str) -> Any:
        return await self.client.post(
            endpoints.Cars.chat_messages(booking_id), {"message": message}
        )


class BookingsGateway:
    """Generic hotel / car booking CRUD (``/hotel-bookings``, ``/car-bookings``)."""

    def __init__(self, client: BackendClient, kind: str):
        self.client = client
        self.paths = endpoints.HotelBookings if kind == "hotel" else endpoints.CarBookings

    async def list(self) -> Any:
        return await self.client.get(self.paths.BASE)

    async def get_by_id(self, booking_id: str) -> Any:
        return await self.client.get(self.paths.by_id(booking_id))

    async def for_user(self) -> Any:
        return await self.client.get(self.paths.USER)

    async def for_driver(self) -> Any:
        return await self.client.get(self.paths.DRIVER)

    async def create(self, payload: dict[str, Any]) -> Any:
        return await self.client.post(self.paths.BASE, payload)

    async def update(self, booking_id: str, payload: dict[str, Any]) -> Any:
        return await self.client.put(self.paths.by_id(booking_id), payload)

    async def cancel(self, booking_id: str) -> Any:
        return await self.client.patch(self.paths.cancel(booking_id))


class PaymentsGateway:
    def __init__(self, client: BackendClient):
        self.client = client

    async def list(self) -> Any:
        return await self.client.get(endpoints.Payments.BASE)

    async def get_by_id(self, payment_id: str) -> Any:
        return await self.client.get(endpoints.Payments.by_id(payment_id))

    async def create(self, payload: dict[str, Any]) -> Any:
        return await self.client.post(endpoints.Payments.BASE, payload)

    async def stripe_checkout(self, booking_id: str, booking_type: str) -> Any:
        return await self.client.post(
            endpoints.Payments.STRIPE_CHECKOUT,
            {"bookingId": booking_id, "bookingType": booking_type},
        )


class MonumentsGateway:
    def __init__(self, client: BackendClient):
        self.client = client

    @staticmethod
    def image_hash(image: bytes) -> str:
        return hashlib.sha256(image).hexdigest()

    async def search(self, params: dict[str, Any]) -> Any:
        return await self.client.get(endpoints.Monuments.SEARCH, params)

    async def check_cache(self, image_hash: str) -> Any:
        return await self.client.get(endpoints.Monuments.CACHE, {"hash": image_hash})

    async def recognize(self, image: bytes, filename: str, content_type: str) -> Any:
        """Return a cached recognition when the backend has one, else upload.

        The cache lookup is best effort: a failed lookup falls through to the
        upload, except when the session is gone or the backend is unreachable.
        """
        digest = self.image_hash(image)
        try:
            cached = await self.check_cache(digest)
        except (AuthenticationRequired, BackendUnavailable):
            raise
        except BackendError as exc:
            logger.warning("Monument cache lookup failed (%s); uploading instead", exc)
            cached = None
        if isinstance(cached, dict) and cached.get("exists"):
            logger.info("Monument recognition cache hit for %s", digest[:12])
            return {"monument": cached.get("monument"), "cached": True}

        result = await self.client.post(
            endpoints.Monuments.RECOGNIZE,
            files={"image": (filename, image, content_type)},
        )
        if isinstance(result, dict):
            result = {**result, "cached": False}
        return result

    async def export(self, monument_id: str, fmt: str) -> Any:
        return await self.client.get(endpoints.Monuments.export(monument_id), {"format": fmt})


class WeatherGateway:
    def __init__(self, client: BackendClient):
        self.client = client

    async def current(self, lat: Optional[float] = None, lon: Optional[float] = None) -> Any:
        if lat is not None and lon is not None:
            return await self.client.get(endpoints.Weather.location(lat, lon))
        return await self.client.get(endpoints.Weather.CURRENT)

    async def forecast(
        self, lat: Optional[float] = None, lon: Optional[float] = None, days: int = 7
    ) -> Any:
        params: dict[str, Any] = {"days": days}
        if lat is not None and lon is not None:
            params.update(lat=lat, lon=lon)
        return await self.client.get(endpoints.Weather.FORECAST, params)


class AdminGateway:
    def __init__(self, client: BackendClient):
        self.client = client

    async def dashboard(self) -> Any:
        return await self.client.get(endpoints.Admin.DASHBOARD)

    async def drivers(self) -> Any:
        return await self.client.get(endpoints.Admin.DRIVERS)

    async def verify_driver(self, driver_id: str) -> Any:
        return await self.client.patch(endpoints.Admin.verify_driver(driver_id))

    async def reject_driver(self, driver_id: str) -> Any:
        return await self.client.patch(endpoints.Admin.reject_driver(driver_id))

    async def payments(self) -> Any:
        return await self.client.get(endpoints.Admin.PAYMENTS)

    async def refund_payment(self, payment_id: str) -> Any:
        return await self.client.post(endpoints.Admin.refund_payment(payment_id))

    async def disputes(self) -> Any:
        return await self.client.get(endpoints.Admin.DISPUTES)

    async def resolve_dispute(self, dispute_id: str, resolution: str) -> Any:
        return await self.client.patch(
            endpoints.Admin.resolve_dispute(dispute_id), {"resolution": resolution}
        )
