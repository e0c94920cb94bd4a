"""
Integration tests for the REST API endpoints.

The app runs under ``ASGITransport``; the TripVerse backend is the
``FakeBackend`` route table from ``conftest`` and Redis is an ``AsyncMock``.
"""

import json
from datetime import date, timedelta

import httpx
import pytest

SESSION = {"Cookie": "tripverse_session=abc123"}


def _body(request: httpx.Request):
    return json.loads(request.content)


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestAuth:
    @pytest.mark.asyncio
    async def test_login_relays_backend_cookie(self, client, backend):
        backend.add(
            "POST",
            "/auth/login",
            {"user": {"id": 1, "role": "client"}},
            headers=[("set-cookie", "tripverse_session=xyz; Path=/; HttpOnly")],
        )
        resp = await client.post(
            "/api/v1/auth/login", json={"email": "ali@example.com", "password": "secret"}
        )
        assert resp.status_code == 200
        assert "tripverse_session=xyz" in resp.headers.get("set-cookie", "")
        assert _body(backend.last("POST", "/auth/login"))["email"] == "ali@example.com"

    @pytest.mark.asyncio
    async def test_backend_cookies_are_not_shared_between_callers(self, client, backend):
        backend.add(
            "POST",
            "/auth/login",
            {"user": {"id": 1}},
            headers=[("set-cookie", "tripverse_session=xyz; Path=/")],
        )
        backend.add("GET", "/cities", [])
        await client.post(
            "/api/v1/auth/login", json={"email": "ali@example.com", "password": "secret"}
        )
        client.cookies.clear()

        await client.get("/api/v1/cities")
        assert "cookie" not in backend.last("GET", "/cities").headers

    @pytest.mark.asyncio
    async def test_bad_credentials_are_relayed(self, client, backend):
        backend.add("POST", "/auth/login", {"detail": "Invalid credentials"}, status=401)
        resp = await client.post(
            "/api/v1/auth/login", json={"email": "ali@example.com", "password": "nope"}
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_signup_validates_before_calling_backend(self, client, backend):
        resp = await client.post(
            "/api/v1/auth/signup",
            json={
                "full_name": "Ali",
                "email": "ali@example.com",
                "password": "Str0ng!pass",
                "confirm_password": "different",
            },
        )
        assert resp.status_code == 422
        assert resp.json()["errors"] == {"confirm_password": "Passwords do not match"}
        assert not backend.called("POST", "/auth/signup")

    @pytest.mark.asyncio
    async def test_signup(self, client, backend):
        backend.add("POST", "/auth/signup", {"user": {"id": 5}}, status=201)
        resp = await client.post(
            "/api/v1/auth/signup",
            json={
                "full_name": "Ali <Raza>",
                "email": "ali@example.com",
                "password": "Str0ng!pass",
                "confirm_password": "Str0ng!pass",
                "role": "driver",
            },
        )
        assert resp.status_code == 201
        sent = _body(backend.last("POST", "/auth/signup"))
        assert sent["full_name"] == "Ali Raza"
        assert sent["role"] == "driver"
        assert "confirm_password" not in sent

    @pytest.mark.asyncio
    async def test_me_anonymous(self, client, backend):
        resp = await client.get("/api/v1/auth/me")
        assert resp.json() == {"authenticated": False, "user": None, "role": None}
        assert not backend.called("GET", "/auth/me")

    @pytest.mark.asyncio
    async def test_me_logged_in(self, client, login_as, redis_mock):
        headers = login_as("DRIVER")
        resp = await client.get("/api/v1/auth/me", headers=headers)
        data = resp.json()
        assert data["authenticated"] is True
        assert data["role"] == "driver"
        redis_mock.set.assert_awaited()

    @pytest.mark.asyncio
    async def test_me_with_expired_cookie(self, client, backend):
        backend.add("GET", "/auth/me", {"detail": "expired"}, status=401)
        resp = await client.get("/api/v1/auth/me", headers=SESSION)
        assert resp.status_code == 200
        assert resp.json()["authenticated"] is False

    @pytest.mark.asyncio
    async def test_logout_evicts_cached_profile(self, client, backend, redis_mock):
        backend.add("POST", "/auth/logout", {"ok": True})
        resp = await client.post("/api/v1/auth/logout", headers=SESSION)
        assert resp.status_code == 200
        redis_mock.delete.assert_awaited_once()


class TestCatalog:
    @pytest.mark.asyncio
    async def test_hotel_search_filters_locally(self, client, backend):
        backend.add(
            "GET",
            "/hotels/search",
            {
                "hotels": [
                    {"id": "h1", "pricePerNight": 100, "rating": 4.5},
                    {"id": "h2", "pricePerNight": 300, "rating": 4.9},
                    {"id": "h3", "pricePerNight": 150, "rating": 3.0},
                ]
            },
        )
        resp = await client.get(
            "/api/v1/hotels",
            params={"location": "Lahore", "max_price": 200, "min_rating": 4},
        )
        assert resp.status_code == 200
        assert [h["id"] for h in resp.json()["hotels"]] == ["h1"]

        sent = backend.last("GET", "/hotels/search").url.params
        assert sent["location"] == "Lahore"
        assert "query" not in sent

    @pytest.mark.asyncio
    async def test_public_browsing_needs_no_login(self, client, backend):
        backend.add("GET", "/cities", [{"id": 1, "name": "Lahore"}])
        resp = await client.get("/api/v1/cities")
        assert resp.status_code == 200
        assert resp.json()[0]["name"] == "Lahore"

    @pytest.mark.asyncio
    async def test_backend_5xx_becomes_bad_gateway(self, client, backend):
        backend.add("GET", "/hotels/search", {"detail": "db down"}, status=500)
        resp = await client.get("/api/v1/hotels")
        assert resp.status_code == 502

    @pytest.mark.asyncio
    async def test_backend_timeout_becomes_503(self, client, backend):
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        backend.add_handler("GET", "/weather/current", timeout)
        resp = await client.get("/api/v1/weather/current")
        assert resp.status_code == 503

    @pytest.mark.asyncio
    async def test_weather_at_zero_coordinates(self, client, backend):
        backend.add("GET", "/weather/location/0.0/0.0", {"temp": 28})
        resp = await client.get("/api/v1/weather/current", params={"lat": 0, "lon": 0})
        assert resp.json() == {"temp": 28}

    @pytest.mark.asyncio
    async def test_monument_recognition_upload(self, client, backend):
        backend.add("GET", "/monuments/cache", {"exists": False})
        backend.add("POST", "/monuments/recognize", {"monument": {"name": "Lahore Fort"}})
        resp = await client.post(
            "/api/v1/monuments/recognize",
            files={"image": ("fort.jpg", b"\xff\xd8\xff jpeg bytes", "image/jpeg")},
        )
        assert resp.status_code == 200
        assert resp.json() == {"monument": {"name": "Lahore Fort"}, "cached": False}

    @pytest.mark.asyncio
    async def test_monument_recognition_rejects_non_images(self, client, backend):
        resp = await client.post(
            "/api/v1/monuments/recognize",
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 422
        assert "image" in resp.json()["errors"]
        assert not backend.called("GET", "/monuments/cache")


    @pytest.mark.asyncio
    async def test_monument_recognition_survives_cache_errors(self, client, backend):
        backend.add("GET", "/monuments/cache", {"detail": "boom"}, status=500)
        backend.add("POST", "/monuments/recognize", {"monument": {"name": "Minar-e-Pakistan"}})
        resp = await client.post(
            "/api/v1/monuments/recognize",
            files={"image": ("minar.jpg", b"\xff\xd8\xff jpeg bytes", "image/jpeg")},
        )
        assert resp.status_code == 200
        assert resp.json()["monument"]["name"] == "Minar-e-Pakistan"
        assert backend.called("POST", "/monuments/recognize")


def _future(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


class TestCarBookingFlow:
    @pytest.mark.asyncio
    async def test_booking_requires_login(self, client, backend):
        resp = await client.post(
            "/api/v1/cars/bookings",
            json={"car_id": "c1", "pickup_date": _future(3), "dropoff_date": _future(5)},
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Login required for this action"
        assert not backend.called("POST", "/cars/bookings/request")

    @pytest.mark.asyncio
    async def test_booking_dates_are_validated(self, client, backend, login_as):
        headers = login_as("client")
        resp = await client.post(
            "/api/v1/cars/bookings",
            headers=headers,
            json={"car_id": "c1", "pickup_date": _future(5), "dropoff_date": _future(4)},
        )
        assert resp.status_code == 422
        assert resp.json()["errors"] == {
            "dropoff_date": "Drop-off date must be after pickup date"
        }
        assert not backend.called("POST", "/cars/bookings/request")

    @pytest.mark.asyncio
    async def test_booking_request(self, client, backend, login_as):
        headers = login_as("client")
        backend.add(
            "POST",
            "/cars/bookings/request",
            {"id": "b1", "status": "PENDING_DRIVER_ACCEPTANCE", "total_price": 15000},
            status=201,
        )
        resp = await client.post(
            "/api/v1/cars/bookings",
            headers=headers,
            json={
                "car_id": "c1",
                "pickup_date": _future(3),
                "dropoff_date": _future(6),
                "pickup_location": "Allama Iqbal Airport",
                "extras": ["gps"],
            },
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["statusBadge"] == {"label": "Waiting for Driver", "color": "yellow"}
        assert data["actions"] == ["cancel"]
        assert data["commission"] == {"gross": 15000.0, "platformFee": 750.0, "net": 14250.0}

        sent = backend.last("POST", "/cars/bookings/request")
        assert sent.headers["cookie"] == "tripverse_session=abc123"
        payload = _body(sent)
        assert payload["start_date"] == _future(3)
        assert payload["extras"] == {"gps": True, "insurance": False, "child_seat": False}

    @pytest.mark.asyncio
    async def test_driver_cannot_book(self, client, login_as):
        headers = login_as("driver")
        resp = await client.post(
            "/api/v1/cars/bookings",
            headers=headers,
            json={"car_id": "c1", "pickup_date": _future(3), "dropoff_date": _future(5)},
        )
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_driver_bookings_are_decorated(self, client, backend, login_as):
        headers = login_as("driver")
        backend.add(
            "GET",
            "/cars/bookings/driver-bookings",
            [{"id": "b1", "status": "PENDING_DRIVER_ACCEPTANCE", "totalAmount": 15000}],
        )
        resp = await client.get("/api/v1/cars/bookings/driver", headers=headers)
        assert resp.status_code == 200
        booking = resp.json()[0]
        assert booking["actions"] == ["accept", "reject"]
        assert booking["commission"]["net"] == 14250.0

    @pytest.mark.asyncio
    async def test_client_cannot_list_driver_bookings(self, client, login_as):
        resp = await client.get("/api/v1/cars/bookings/driver", headers=login_as("client"))
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_driver_accepts(self, client, backend, login_as):
        headers = login_as("driver")
        backend.add("POST", "/cars/bookings/b1/respond", {"id": "b1", "status": "ACCEPTED"})
        resp = await client.post(
            "/api/v1/cars/bookings/b1/respond", headers=headers, json={"action": "accept"}
        )
        assert resp.status_code == 200
        assert resp.json()["statusBadge"]["label"] == "Driver Accepted"
        assert _body(backend.last("POST", "/cars/bookings/b1/respond")) == {"action": "accept"}

    @pytest.mark.asyncio
    async def test_unknown_driver_action_rejected(self, client, login_as):
        resp = await client.post(
            "/api/v1/cars/bookings/b1/respond",
            headers=login_as("driver"),
            json={"action": "ignore"},
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_backend_401_mid_session(self, client, backend, redis_mock):
        redis_mock.get.return_value = json.dumps({"id": 1, "role": "client"})
        backend.add("GET", "/cars/bookings/my-bookings", {"detail": "expired"}, status=401)
        resp = await client.get("/api/v1/cars/bookings/mine", headers=SESSION)
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Login required for this action"

    @pytest.mark.asyncio
    async def test_quote_includes_commission(self, client, backend):
        backend.add("POST", "/cars/c1/calculate-price", {"total_price": 15000, "days": 3})
        resp = await client.post(
            "/api/v1/cars/c1/quote",
            json={"start_date": "2024-01-15", "end_date": "2024-01-18"},
        )
        assert resp.status_code == 200
        commission = resp.json()["commission"]
        assert commission["platform_fee"] == 750
        assert commission["net"] == 14250

    @pytest.mark.asyncio
    async def test_estimate(self, client, backend):
        backend.add("GET", "/cars/c1", {"id": "c1", "pricePerDay": 5000})
        resp = await client.post(
            "/api/v1/cars/c1/estimate",
            json={"pickup_date": "2024-01-15", "dropoff_date": "2024-01-18", "extras": ["gps"]},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["days"] == 3
        assert data["subtotal"] == 15000
        assert data["platform_fee"] == 775
        assert data["total"] == 16275
        assert data["driver_earnings"] == 14250

    @pytest.mark.asyncio
    async def test_estimate_rejects_reversed_dates(self, client, backend):
        resp = await client.post(
            "/api/v1/cars/c1/estimate",
            json={"pickup_date": "2024-01-15", "dropoff_date": "2024-01-14"},
        )
        assert resp.status_code == 422
        assert not backend.called("GET", "/cars/c1")

    @pytest.mark.asyncio
    async def test_car_search_sorted_and_filtered(self, client, backend):
        backend.add(
            "GET",
            "/cars/search",
            [
                {"id": "c1", "pricePerDay": 5000, "rating": 4.2, "driver": {"isVerified": True}},
                {"id": "c2", "pricePerDay": 3000, "rating": 4.9, "driver": {"isVerified": True}},
                {"id": "c3", "pricePerDay": 1000, "rating": 5.0, "driver": {"isVerified": False}},
            ],
        )
        resp = await client.get("/api/v1/cars", params={"sort_by": "price_low"})
        assert [c["id"] for c in resp.json()["cars"]] == ["c2", "c1"]


class TestBookings:
    @pytest.mark.asyncio
    async def test_cancel_in_progress_booking_is_refused(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("GET", "/car-bookings/b1", {"id": "b1", "status": "IN_PROGRESS"})
        resp = await client.patch("/api/v1/car-bookings/b1/cancel", headers=headers)
        assert resp.status_code == 409
        assert not backend.called("PATCH", "/car-bookings/b1/cancel")

    @pytest.mark.asyncio
    async def test_cancel_confirmed_booking(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("GET", "/car-bookings/b1", {"id": "b1", "status": "CONFIRMED"})
        backend.add("PATCH", "/car-bookings/b1/cancel", {"id": "b1", "status": "CANCELLED"})
        resp = await client.patch("/api/v1/car-bookings/b1/cancel", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["statusBadge"] == {"label": "Cancelled", "color": "red"}

    @pytest.mark.asyncio
    async def test_hotel_booking_validation(self, client, login_as):
        resp = await client.post(
            "/api/v1/hotel-bookings",
            headers=login_as("client"),
            json={
                "hotel_id": "h1",
                "room_type_id": "r1",
                "check_in": "2024-06-03",
                "check_out": "2024-06-01",
            },
        )
        assert resp.status_code == 422
        assert "check_out" in resp.json()["errors"]

    @pytest.mark.asyncio
    async def test_cancellation_preview(self, client):
        start = (date.today() + timedelta(days=10)).isoformat() + "T12:00:00Z"
        resp = await client.post(
            "/api/v1/bookings/cancellation-preview",
            json={"start": start, "policy": "MODERATE", "total_amount": 12500},
        )
        data = resp.json()
        assert data["can_cancel"] is True
        assert data["refund_amount"] == "6250.00"

    @pytest.mark.asyncio
    async def test_checkout(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("POST", "/payments/stripe/checkout", {"url": "https://checkout.example/s/1"})
        resp = await client.post(
            "/api/v1/payments/checkout",
            headers=headers,
            json={"booking_id": "b1", "booking_type": "car"},
        )
        assert resp.status_code == 200
        assert _body(backend.last("POST", "/payments/stripe/checkout")) == {
            "bookingId": "b1",
            "bookingType": "car",
        }


    @pytest.mark.asyncio
    async def test_hotel_bookings_use_hotel_labels_and_actions(self, client, backend, login_as):
        headers = login_as("client")
        backend.add(
            "GET",
            "/hotel-bookings/user",
            [
                {"id": "hb1", "status": "PENDING", "totalAmount": 20000},
                {"id": "hb2", "status": "CONFIRMED"},
                {"id": "hb3", "status": "REFUNDED"},
            ],
        )
        resp = await client.get("/api/v1/hotel-bookings/mine", headers=headers)
        pending, confirmed, refunded = resp.json()
        assert pending["statusBadge"] == {"label": "Pending", "color": "yellow"}
        assert pending["actions"] == ["cancel"]
        assert pending["commission"]["platformFee"] == 1000.0
        assert confirmed["actions"] == ["cancel"]
        assert refunded["statusBadge"] == {"label": "Refunded", "color": "blue"}
        assert refunded["actions"] == []

    @pytest.mark.asyncio
    async def test_cancel_pending_hotel_booking(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("GET", "/hotel-bookings/hb1", {"id": "hb1", "status": "PENDING"})
        backend.add("PATCH", "/hotel-bookings/hb1/cancel", {"id": "hb1", "status": "CANCELLED"})
        resp = await client.patch("/api/v1/hotel-bookings/hb1/cancel", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["actions"] == []

    @pytest.mark.asyncio
    async def test_cancel_refunded_hotel_booking_is_refused(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("GET", "/hotel-bookings/hb1", {"id": "hb1", "status": "REFUNDED"})
        resp = await client.patch("/api/v1/hotel-bookings/hb1/cancel", headers=headers)
        assert resp.status_code == 409
        assert not backend.called("PATCH", "/hotel-bookings/hb1/cancel")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/car-bookings/b1/cancel", "/hotel-bookings/b1/cancel"])
    async def test_drivers_cannot_cancel(self, client, backend, login_as, path):
        resp = await client.patch(f"/api/v1{path}", headers=login_as("driver"))
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Missing permission: booking:cancel"
        assert not backend.called("PATCH", path)

    @pytest.mark.asyncio
    async def test_update_hotel_booking(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("GET", "/hotel-bookings/hb1", {"id": "hb1", "status": "CONFIRMED"})
        backend.add("PUT", "/hotel-bookings/hb1", {"id": "hb1", "status": "CONFIRMED"})
        resp = await client.put(
            "/api/v1/hotel-bookings/hb1",
            headers=headers,
            json={"check_in": "2030-05-01", "check_out": "2030-05-04", "guests": 3},
        )
        assert resp.status_code == 200
        assert resp.json()["statusBadge"]["label"] == "Confirmed"
        assert _body(backend.last("PUT", "/hotel-bookings/hb1")) == {
            "checkInDate": "2030-05-01",
            "checkOutDate": "2030-05-04",
            "guests": 3,
            "rooms": 1,
        }

    @pytest.mark.asyncio
    async def test_completed_hotel_booking_cannot_change(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("GET", "/hotel-bookings/hb1", {"id": "hb1", "status": "COMPLETED"})
        resp = await client.put(
            "/api/v1/hotel-bookings/hb1",
            headers=headers,
            json={"check_in": "2030-05-01", "check_out": "2030-05-04"},
        )
        assert resp.status_code == 409
        assert not backend.called("PUT", "/hotel-bookings/hb1")

    @pytest.mark.asyncio
    async def test_create_payment(self, client, backend, login_as):
        headers = login_as("client")
        backend.add("POST", "/payments", {"id": "p1", "status": "PENDING"}, status=201)
        resp = await client.post(
            "/api/v1/payments",
            headers=headers,
            json={"booking_id": "b1", "amount": 15000},
        )
        assert resp.status_code == 201
        assert resp.json()["statusBadge"]["label"] == "Pending"
        assert _body(backend.last("POST", "/payments")) == {
            "bookingId": "b1",
            "amount": 15000.0,
            "currency": "PKR",
            "method": "stripe",
        }

    @pytest.mark.asyncio
    async def test_drivers_cannot_create_payments(self, client, backend, login_as):
        resp = await client.post(
            "/api/v1/payments",
            headers=login_as("driver"),
            json={"booking_id": "b1", "amount": 100},
        )
        assert resp.status_code == 403
        assert not backend.called("POST", "/payments")


class TestDriverEarnings:
    @pytest.mark.asyncio
    async def test_earnings_summary(self, client, backend, login_as):
        headers = login_as("driver")
        backend.add(
            "GET",
            "/cars/bookings/driver-bookings",
            {
                "bookings": [
                    {"id": "1", "status": "COMPLETED", "totalAmount": 15000},
                    {"id": "2", "status": "CONFIRMED", "totalAmount": 5000},
                    {"id": "3", "status": "TELEPORTED", "totalAmount": 999},
                ]
            },
        )
        resp = await client.get("/api/v1/driver/earnings", headers=headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_bookings"] == 2
        assert data["completed_bookings"] == 1
        assert data["upcoming_bookings"] == 1
        assert data["platform_fee_total"] == 750
        assert data["net_total"] == 14250
        assert data["currency"] == "PKR"

    @pytest.mark.asyncio
    async def test_clients_have_no_payouts(self, client, login_as):
        resp = await client.get("/api/v1/driver/earnings", headers=login_as("client"))
        assert resp.status_code == 403


class TestAdmin:
    @pytest.mark.asyncio
    async def test_admin_routes_need_admin_role(self, client, login_as):
        resp = await client.get("/api/v1/admin/dashboard", headers=login_as("driver"))
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_drivers_with_document_badges(self, client, backend, login_as):
        headers = login_as("admin")
        backend.add(
            "GET",
            "/admin/drivers",
            [
                {
                    "id": "d1",
                    "verificationStatus": "PENDING",
                    "documents": [{"type": "DRIVERS_LICENSE", "status": "APPROVED"}],
                }
            ],
        )
        resp = await client.get("/api/v1/admin/drivers", headers=headers)
        driver = resp.json()[0]
        assert driver["statusBadge"]["label"] == "Pending Review"
        assert driver["documents"][0]["label"] == "Driver's License"
        assert driver["documents"][0]["statusBadge"]["color"] == "green"
        assert driver["allDocumentsApproved"] is False

    @pytest.mark.asyncio
    async def test_refund_only_completed_payments(self, client, backend, login_as):
        headers = login_as("admin")
        backend.add("GET", "/payments/p1", {"id": "p1", "status": "REFUNDED"})
        resp = await client.post("/api/v1/admin/payments/p1/refund", headers=headers)
        assert resp.status_code == 409
        assert not backend.called("POST", "/admin/payments/p1/refund")

    @pytest.mark.asyncio
    async def test_refund(self, client, backend, login_as):
        headers = login_as("admin")
        backend.add("GET", "/payments/p1", {"id": "p1", "status": "COMPLETED"})
        backend.add("POST", "/admin/payments/p1/refund", {"id": "p1", "status": "REFUNDED"})
        resp = await client.post("/api/v1/admin/payments/p1/refund", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["statusBadge"]["label"] == "Refunded"

    @pytest.mark.asyncio
    async def test_resolve_dispute(self, client, backend, login_as):
        headers = login_as("admin")
        backend.add(
            "PATCH", "/admin/disputes/x1/resolve", {"id": "x1", "status": "RESOLVED"}
        )
        resp = await client.patch(
            "/api/v1/admin/disputes/x1/resolve",
            headers=headers,
            json={"resolution": "Refund issued"},
        )
        assert resp.json()["statusBadge"]["label"] == "Resolved"
        assert _body(backend.last("PATCH", "/admin/disputes/x1/resolve")) == {
            "resolution": "Refund issued"
        }

    @pytest.mark.asyncio
    async def test_disputes_flag_open_ones(self, client, backend, login_as):
        headers = login_as("admin")
        backend.add(
            "GET",
            "/admin/disputes",
            {"disputes": [{"id": "x1", "status": "INVESTIGATING"}, {"id": "x2", "status": "CLOSED"}]},
        )
        resp = await client.get("/api/v1/admin/disputes", headers=headers)
        assert [d["isOpen"] for d in resp.json()] == [True, False]

    @pytest.mark.asyncio
    async def test_all_hotel_bookings(self, client, backend, login_as):
        headers = login_as("admin")
        backend.add("GET", "/hotel-bookings", [{"id": "hb1", "status": "CONFIRMED"}])
        resp = await client.get(
            "/api/v1/admin/bookings", params={"type": "hotel"}, headers=headers
        )
        booking = resp.json()[0]
        assert booking["statusBadge"]["label"] == "Confirmed"
        assert booking["actions"] == ["cancel"]

    @pytest.mark.asyncio
    async def test_all_car_bookings_by_default(self, client, backend, login_as):
        headers = login_as("admin")
        backend.add("GET", "/car-bookings", {"bookings": [{"id": "b1", "status": "PENDING"}]})
        resp = await client.get("/api/v1/admin/bookings", headers=headers)
        assert resp.json()[0]["statusBadge"]["label"] == "Waiting for Driver"

    @pytest.mark.asyncio
    async def test_clients_cannot_list_every_booking(self, client, login_as):
        resp = await client.get("/api/v1/admin/bookings", headers=login_as("client"))
        assert resp.status_code == 403
