"""
Explicit per-request session.

The browser's auth cookie is opaque to the gateway: the profile behind it is
fetched from ``/auth/me`` and cached in Redis for a short TTL, keyed by a
SHA-256 of the cookie header so raw cookies never land in Redis.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from tripverse.config import settings
from tripverse.domain.entities import can_perform
from tripverse.domain.enums import BookingType, UserRole
from tripverse.domain.permissions import has_permission

from .gateways import AuthGateway
from .http_client import AuthenticationRequired

logger = logging.getLogger(__name__)


class PermissionDenied(Exception):
    """The session's role lacks the permission an action requires."""

    def __init__(self, permission: str):
        super().__init__(f"Missing permission: {permission}")
        self.permission = permission


@dataclass
class Session:
    cookie_header: Optional[str] = None
    user: Optional[dict[str, Any]] = field(default=None)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> Optional[UserRole]:
        if not self.user:
            return None
        try:
            return UserRole(str(self.user.get("role", "")).lower())
        except ValueError:
            return None

    def require_auth(self) -> dict[str, Any]:
        if self.user is None:
            raise AuthenticationRequired()
        return self.user

    def require_permission(self, permission: str) -> dict[str, Any]:
        user = self.require_auth()
        if not has_permission(self.role, permission):
            raise PermissionDenied(permission)
        return user

    def require_booking_action(self, action: str, booking_type: BookingType) -> dict[str, Any]:
        """Gate a booking action on the same role table that decides which buttons show."""
        user = self.require_auth()
        if not can_perform(action, self.role, booking_type):
            raise PermissionDenied(f"booking:{action}")
        return user


class SessionStore:
    def __init__(
        self,
        client: aioredis.Redis,
        ttl_seconds: int = settings.session_cache_ttl_seconds,
    ):
        self.redis = client
        self.ttl = ttl_seconds

    @staticmethod
    def key(cookie_header: str) -> str:
        digest = hashlib.sha256(cookie_header.encode()).hexdigest()
        return f"session:{digest}"

    async def get(self, cookie_header: str) -> Optional[dict[str, Any]]:
        raw = await self.redis.get(self.key(cookie_header))
        return json.loads(raw) if raw else None

    async def put(self, cookie_header: str, user: dict[str, Any]) -> None:
        await self.redis.set(self.key(cookie_header), json.dumps(user), ex=self.ttl)

    async def evict(self, cookie_header: str) -> None:
        await self.redis.delete(self.key(cookie_header))


async def load_session(
    cookie_header: Optional[str],
    store: SessionStore,
    auth: AuthGateway,
) -> Session:
    """Resolve the caller's session; anonymous when the backend says 401."""
    if not cookie_header:
        return Session()

    try:
        cached = await store.get(cookie_header)
    except RedisError as exc:
        logger.warning("Session cache read failed, asking backend: %s", exc)
        cached = None
    if cached is not None:
        return Session(cookie_header=cookie_header, user=cached)

    try:
        user = await auth.me()
    except AuthenticationRequired:
        return Session(cookie_header=cookie_header)

    if isinstance(user, dict) and "user" in user and isinstance(user["user"], dict):
        user = user["user"]
    if not isinstance(user, dict):
        return Session(cookie_header=cookie_header)

    try:
        await store.put(cookie_header, user)
    except RedisError as exc:
        logger.warning("Session cache write failed: %s", exc)
    return Session(cookie_header=cookie_header, user=user)
