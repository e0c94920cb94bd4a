"""
Search filter composition.

Filter state is a plain pydantic model merged through shallow partial updates
(``merge``) and turned into backend query parameters (``to_query_params``).
Local filtering over already-fetched results is a conjunctive predicate:
every active criterion must hold.

Complexity: O(n) per filter pass, O(n log n) for sorting.
"""

from __future__ import annotations

import enum
import math
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, model_validator


class CarSort(str, enum.Enum):
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    RATING = "rating"
    BEST_VALUE = "best_value"
    NEWEST = "newest"


def _drop_empty(params: dict[str, Any]) -> dict[str, Any]:
    """Skip unset values the same way the browser skipped undefined and ''."""
    return {
        key: value
        for key, value in params.items()
        if value is not None and value != "" and value != []
    }


class _Filters(BaseModel):
    min_price: float = Field(0, ge=0)
    max_price: float = Field(1000, ge=0)

    @model_validator(mode="after")
    def _normalise_price_range(self):
        # an inverted range drags the upper bound up, like the price slider
        if self.max_price < self.min_price:
            self.max_price = self.min_price
        return self

    def merge(self, partial: dict[str, Any]):
        """Return a copy with *partial* shallow-merged over the current state."""
        return type(self).model_validate({**self.model_dump(), **partial})

    def reset(self):
        return type(self)()


class HotelFilters(_Filters):
    query: str = ""
    location: str = ""
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    guests: int = Field(1, ge=1)
    rooms: int = Field(1, ge=1)
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    amenities: list[str] = []
    property_types: list[str] = []

    def to_query_params(self) -> dict[str, Any]:
        return _drop_empty(
            {
                "query": self.query,
                "location": self.location,
                "checkIn": self.check_in,
                "checkOut": self.check_out,
                "guests": self.guests,
                "rooms": self.rooms,
                "minPrice": self.min_price,
                "maxPrice": self.max_price,
                "rating": self.min_rating,
                "amenities": self.amenities,
                "propertyType": self.property_types,
            }
        )


class CarFilters(_Filters):
    max_price: float = Field(10000, ge=0)
    query: str = ""
    location: str = ""
    city_id: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    car_types: list[str] = []
    transmission: list[str] = []
    fuel_type: list[str] = []
    passenger_capacity: int = Field(0, ge=0)
    amenities: list[str] = []
    verified_drivers_only: bool = True
    sort_by: CarSort = CarSort.BEST_VALUE

    def to_query_params(self) -> dict[str, Any]:
        return _drop_empty(
            {
                "query": self.query,
                "location": self.location,
                "city_id": self.city_id,
                "start_date": self.start_date,
                "end_date": self.end_date,
                "type": self.car_types,
                "transmission": self.transmission,
                "fuel_type": self.fuel_type,
                "seats": self.passenger_capacity or None,
                "min_price": self.min_price,
                "max_price": self.max_price,
                "sort": self.sort_by.value,
            }
        )


# ── Field access over backend payloads ────────────────────────────────


def _lookup(item: dict, *paths: str) -> Any:
    """First non-null value among dotted *paths* (``"pricing.base_price_per_day"``)."""
    for path in paths:
        node: Any = item
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                node = None
                break
            node = node[part]
        if node is not None:
            return node
    return None


def _number(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _lower_set(values: Iterable[Any]) -> set[str]:
    return {str(v).lower() for v in values or ()}


def hotel_price(hotel: dict) -> Optional[float]:
    return _number(_lookup(hotel, "pricePerNight", "price_per_night", "price"))


def car_price(car: dict) -> Optional[float]:
    return _number(
        _lookup(car, "pricePerDay", "price_per_day", "pricing.base_price_per_day")
    )


# ── Hotels ────────────────────────────────────────────────────────────


def hotel_matches(hotel: dict, filters: HotelFilters) -> bool:
    price = hotel_price(hotel)
    if price is None or not (filters.min_price <= price <= filters.max_price):
        return False

    if filters.min_rating is not None:
        rating = _number(_lookup(hotel, "rating", "starRating", "star_rating"))
        if rating is None or rating < filters.min_rating:
            return False

    if filters.amenities:
        have = _lower_set(_lookup(hotel, "amenities") or [])
        if not _lower_set(filters.amenities) <= have:
            return False

    if filters.property_types:
        kind = _lookup(hotel, "propertyType", "property_type")
        if kind is None or str(kind).lower() not in _lower_set(filters.property_types):
            return False

    return True


def apply_hotel_filters(hotels: Iterable[dict], filters: HotelFilters) -> list[dict]:
    return [hotel for hotel in hotels if hotel_matches(hotel, filters)]


# ── Cars ──────────────────────────────────────────────────────────────


def car_matches(car: dict, filters: CarFilters) -> bool:
    price = car_price(car)
    if price is None or not (filters.min_price <= price <= filters.max_price):
        return False

    checks = (
        (filters.car_types, ("type", "car.type", "car_type")),
        (filters.transmission, ("transmission", "car.transmission")),
        (filters.fuel_type, ("fuelType", "fuel_type", "car.fuel_type")),
    )
    for wanted, paths in checks:
        if wanted:
            value = _lookup(car, *paths)
            if value is None or str(value).lower() not in _lower_set(wanted):
                return False

    if filters.passenger_capacity:
        seats = _number(_lookup(car, "seats", "car.seats"))
        if seats is None or seats < filters.passenger_capacity:
            return False

    if filters.amenities:
        have = _lower_set(_lookup(car, "features", "amenities", "car.features") or [])
        if not _lower_set(filters.amenities) <= have:
            return False

    if filters.verified_drivers_only:
        verified = _lookup(car, "driver.isVerified", "driver.is_verified", "isVerified")
        if not verified:
            return False

    return True


def sort_cars(cars: Iterable[dict], sort_by: CarSort) -> list[dict]:
    items = list(cars)

    def price(car: dict) -> float:
        value = car_price(car)
        return math.inf if value is None else value

    def rating(car: dict) -> float:
        return _number(_lookup(car, "rating", "driver.rating")) or 0.0

    if sort_by is CarSort.PRICE_LOW:
        return sorted(items, key=price)
    if sort_by is CarSort.PRICE_HIGH:
        # unknown prices sink to the end in both directions
        return sorted(items, key=lambda c: -price(c) if price(c) != math.inf else math.inf)
    if sort_by is CarSort.RATING:
        return sorted(items, key=rating, reverse=True)
    if sort_by is CarSort.NEWEST:
        return sorted(
            items,
            key=lambda c: str(_lookup(c, "createdAt", "created_at") or ""),
            reverse=True,
        )
    # best value: highest rated first, cheaper first among equals
    return sorted(items, key=lambda c: (-rating(c), price(c)))


def apply_car_filters(cars: Iterable[dict], filters: CarFilters) -> list[dict]:
    return sort_cars((car for car in cars if car_matches(car, filters)), filters.sort_by)
