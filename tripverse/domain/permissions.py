"""Role -> permission table used to gate driver and admin routes."""

from __future__ import annotations

from typing import Optional

from .enums import UserRole

ROLE_PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.CLIENT: frozenset(
        {
            "hotel:read",
            "hotel:book",
            "car:read",
            "car:book",
            "monument:read",
            "monument:recognize",
            "weather:read",
            "booking:read:own",
            "payment:create",
        }
    ),
    UserRole.DRIVER: frozenset(
        {
            "hotel:read",
            "car:read",
            "car:create",
            "car:update:own",
            "car:delete:own",
            "booking:read:own",
            "booking:update:own",
            "payout:read:own",
        }
    ),
    UserRole.ADMIN: frozenset(
        {
            "user:read",
            "user:update",
            "user:delete",
            "driver:verify",
            "hotel:create",
            "hotel:update",
            "hotel:delete",
            "car:read",
            "car:update",
            "car:delete",
            "booking:read",
            "booking:update",
            "booking:cancel",
            "payment:read",
            "payment:refund",
            "dispute:read",
            "dispute:resolve",
        }
    ),
}


def has_permission(role: Optional[UserRole | str], permission: str) -> bool:
    if role is None:
        return False
    if isinstance(role, UserRole):
        user_role = role
    else:
        try:
            user_role = UserRole(str(role).lower())
        except ValueError:
            return False
    return permission in ROLE_PERMISSIONS[user_role]
