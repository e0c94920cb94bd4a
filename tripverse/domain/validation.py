"""
Synchronous form validation.

These are the only business-rule checks performed before a request reaches
the backend. Each validator returns a ``{field: message}`` map; an empty map
means the form is valid. ``ensure_valid`` turns a non-empty map into a
``FormValidationError``.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")
SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


class FormValidationError(Exception):
    """Raised when a submitted form fails its synchronous checks."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


def ensure_valid(errors: dict[str, str]) -> None:
    if errors:
        raise FormValidationError(errors)


def _as_date(value: Any) -> Optional[date]:
    """Parse *value*; ``None`` for blank input, ``ValueError`` for garbage."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _date_pair(
    errors: dict[str, str],
    start: Any,
    end: Any,
    fields: tuple[str, str],
    labels: tuple[str, str],
) -> tuple[Optional[date], Optional[date]]:
    parsed: list[Optional[date]] = []
    for raw, name, label in zip((start, end), fields, labels):
        try:
            value = _as_date(raw)
        except ValueError:
            errors[name] = f"{label} is invalid"
            parsed.append(None)
            continue
        if value is None:
            errors[name] = f"{label} is required"
        parsed.append(value)
    return parsed[0], parsed[1]


def validate_car_booking(
    pickup_date: Any,
    dropoff_date: Any,
    today: Optional[date] = None,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    pickup, dropoff = _date_pair(
        errors,
        pickup_date,
        dropoff_date,
        ("pickup_date", "dropoff_date"),
        ("Pickup date", "Drop-off date"),
    )

    if pickup and today and pickup < today:
        errors["pickup_date"] = "Pickup date cannot be in the past"
    if pickup and dropoff and dropoff <= pickup:
        errors["dropoff_date"] = "Drop-off date must be after pickup date"
    return errors


def validate_hotel_booking(
    check_in: Any,
    check_out: Any,
    guests: int = 1,
    rooms: int = 1,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    start, end = _date_pair(
        errors,
        check_in,
        check_out,
        ("check_in", "check_out"),
        ("Check-in date", "Check-out date"),
    )
    if start and end and end <= start:
        errors["check_out"] = "Check-out date must be after check-in date"
    if guests < 1:
        errors["guests"] = "At least one guest is required"
    if rooms < 1:
        errors["rooms"] = "At least one room is required"
    return errors


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_phone_number(phone: str) -> bool:
    return bool(PHONE_RE.match(phone or ""))


def validate_password(password: str) -> list[str]:
    problems: list[str] = []
    if len(password) < 8:
        problems.append("Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password):
        problems.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        problems.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        problems.append("Password must contain at least one number")
    if not SPECIAL_RE.search(password):
        problems.append("Password must contain at least one special character")
    return problems


def validate_signup(
    full_name: str,
    email: str,
    password: str,
    confirm_password: str,
    phone: Optional[str] = None,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (full_name or "").strip():
        errors["full_name"] = "Full name is required"

    if not (email or "").strip():
        errors["email"] = "Email is required"
    elif not validate_email(email):
        errors["email"] = "Please enter a valid email address"

    if phone and not validate_phone_number(phone):
        errors["phone"] = "Please enter a valid phone number"

    problems = validate_password(password or "")
    if problems:
        errors["password"] = problems[0]

    if password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    return errors


def sanitize_input(value: str) -> str:
    return re.sub(r"[<>]", "", value.strip())
