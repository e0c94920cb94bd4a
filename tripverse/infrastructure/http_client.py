"""
HTTP client for the TripVerse backend API.

* One shared ``httpx.AsyncClient`` (connection pool) per process, created in
  the app lifespan. Fixed timeout, no retries, no cancellation.
* ``BackendClient`` is a thin per-request wrapper that forwards the caller's
  ``Cookie`` header so the backend sees the browser's own session.
* A 401 becomes ``AuthenticationRequired`` and is never turned into a
  redirect: callers decide whether the action needed a login.
"""

from __future__ import annotations

from http.cookiejar import CookieJar, DefaultCookiePolicy
import logging
from typing import Any, Optional

import httpx

from tripverse.config import settings

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The backend answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Any = None, path: str = ""):
        super().__init__(f"{status_code} from backend {path}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.path = path


class AuthenticationRequired(BackendError):
    """The backend answered 401: login required for this action."""

    def __init__(self, path: str = ""):
        super().__init__(401, "Login required for this action", path)


class BackendUnavailable(BackendError):
    """Timeout or transport failure before a response was received."""

    def __init__(self, path: str = "", reason: str = ""):
        super().__init__(503, reason or "Backend service unavailable", path)


def create_http_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    # Shared by every browser: cookies are forwarded per request and never stored.
    no_store = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
    return httpx.AsyncClient(
        base_url=settings.backend_api_url,
        timeout=settings.backend_timeout_seconds,
        headers={"Accept": "application/json"},
        cookies=no_store,
        transport=transport,
    )


def clean_params(params: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """Drop ``None`` / empty values; lists are sent as repeated keys by httpx."""
    if not params:
        return None
    return {
        key: value
        for key, value in params.items()
        if value is not None and value != "" and value != []
    }


def _error_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return body.get("detail") or body.get("message") or body
    return body


class BackendClient:
    def __init__(self, http: httpx.AsyncClient, cookie_header: Optional[str] = None):
        self.http = http
        self.cookie_header = cookie_header
        self.last_response: Optional[httpx.Response] = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
        data: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Issue one request and return the decoded body (``None`` when empty)."""
        headers = {"Cookie": self.cookie_header} if self.cookie_header else None
        try:
            response = await self.http.request(
                method,
                path,
                params=clean_params(params),
                json=json,
                files=files,
                data=data,
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Backend %s %s timed out", method, path)
            raise BackendUnavailable(path, "Backend request timed out") from exc
        except httpx.TransportError as exc:
            logger.warning("Backend %s %s unreachable: %s", method, path, exc)
            raise BackendUnavailable(path) from exc

        self.last_response = response

        if response.status_code == 401:
            # expected on /auth/* while probing for a session
            if not path.startswith("/auth/"):
                logger.info("401 Unauthorized - login required for %s %s", method, path)
            raise AuthenticationRequired(path)

        if response.is_error:
            detail = _error_detail(response)
            logger.warning(
                "Backend %s %s failed with %d: %s", method, path, response.status_code, detail
            )
            raise BackendError(response.status_code, detail, path)

        if not response.content:
            return None
        if "json" in response.headers.get("content-type", ""):
            return response.json()
        return response.content

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def set_cookie_headers(self) -> list[str]:
        """Raw ``Set-Cookie`` values of the last response, for relaying to the browser."""
        if self.last_response is None:
            return []
        return self.last_response.headers.get_list("set-cookie")

    @property
    def last_content_type(self) -> str:
        if self.last_response is None:
            return "application/octet-stream"
        return self.last_response.headers.get("content-type", "application/octet-stream")
