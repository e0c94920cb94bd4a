"""
Catalog endpoints (public browsing)
===================================

GET  /api/v1/cities                     -- list cities
GET  /api/v1/cities/regions             -- list regions
GET  /api/v1/cities/{city_id}           -- city detail
GET  /api/v1/hotels                     -- search hotels, then filter locally
GET  /api/v1/hotels/{hotel_id}          -- hotel detail
GET  /api/v1/monuments/search           -- search monuments
POST /api/v1/monuments/recognize        -- identify a monument from a photo
GET  /api/v1/monuments/{id}/export      -- export monument info (pdf / json)
GET  /api/v1/weather/current            -- current weather, optionally by location
GET  /api/v1/weather/forecast           -- forecast, optionally by location
"""

import logging
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile

from tripverse.api.dependencies import get_backend
from tripverse.api.middleware import RATE_LIMIT, limiter
from tripverse.api.presenters import unwrap_list
from tripverse.domain.filters import HotelFilters, apply_hotel_filters
from tripverse.domain.validation import FormValidationError
from tripverse.infrastructure.gateways import (
    CitiesGateway,
    HotelsGateway,
    MonumentsGateway,
    WeatherGateway,
)
from tripverse.infrastructure.http_client import BackendClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])

MAX_IMAGE_BYTES = 10 * 1024 * 1024


# ── Cities ────────────────────────────────────────────────────────────


@router.get("/cities", summary="List cities")
@limiter.limit(RATE_LIMIT)
async def list_cities(request: Request, backend: BackendClient = Depends(get_backend)):
    return await CitiesGateway(backend).list()


@router.get("/cities/regions", summary="List regions")
@limiter.limit(RATE_LIMIT)
async def list_regions(request: Request, backend: BackendClient = Depends(get_backend)):
    return await CitiesGateway(backend).regions()


@router.get("/cities/{city_id}", summary="City detail")
@limiter.limit(RATE_LIMIT)
async def get_city(
    request: Request,
    city_id: int,
    backend: BackendClient = Depends(get_backend),
):
    return await CitiesGateway(backend).get_by_id(city_id)


# ── Hotels ────────────────────────────────────────────────────────────


@router.get(
    "/hotels",
    summary="Search hotels",
    description=(
        "Forwards the filters to the backend search, then re-applies them "
        "locally: price range inclusive, minimum rating, all amenities, "
        "property type."
    ),
)
@limiter.limit(RATE_LIMIT)
async def search_hotels(
    request: Request,
    filters: Annotated[HotelFilters, Query()],
    backend: BackendClient = Depends(get_backend),
):
    body = await HotelsGateway(backend).search(filters.to_query_params())
    hotels = [h for h in unwrap_list(body, "hotels") if isinstance(h, dict)]
    matched = apply_hotel_filters(hotels, filters)
    logger.info("Hotel search: %d of %d results match filters", len(matched), len(hotels))
    return {"hotels": matched, "total": len(matched)}


@router.get("/hotels/{hotel_id}", summary="Hotel detail")
@limiter.limit(RATE_LIMIT)
async def get_hotel(
    request: Request,
    hotel_id: str,
    backend: BackendClient = Depends(get_backend),
):
    return await HotelsGateway(backend).get_by_id(hotel_id)


# ── Monuments ─────────────────────────────────────────────────────────


@router.get("/monuments/search", summary="Search monuments")
@limiter.limit(RATE_LIMIT)
async def search_monuments(
    request: Request,
    query: str = Query("", max_length=200),
    city_id: Optional[int] = None,
    backend: BackendClient = Depends(get_backend),
):
    return await MonumentsGateway(backend).search({"query": query, "city_id": city_id})


@router.post(
    "/monuments/recognize",
    summary="Recognize a monument from a photo",
    description=(
        "The image's SHA-256 is looked up in the backend cache first; the "
        "upload only happens on a cache miss."
    ),
)
@limiter.limit(RATE_LIMIT)
async def recognize_monument(
    request: Request,
    image: UploadFile = File(...),
    backend: BackendClient = Depends(get_backend),
):
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise FormValidationError({"image": "Please upload an image file"})
    data = await image.read()
    if not data:
        raise FormValidationError({"image": "Please select an image"})
    if len(data) > MAX_IMAGE_BYTES:
        raise FormValidationError({"image": "Image must be 10MB or smaller"})

    return await MonumentsGateway(backend).recognize(
        data, image.filename or "upload", content_type
    )


@router.get("/monuments/{monument_id}/export", summary="Export monument information")
@limiter.limit(RATE_LIMIT)
async def export_monument(
    request: Request,
    monument_id: str,
    format: Literal["pdf", "json"] = "pdf",
    backend: BackendClient = Depends(get_backend),
):
    result = await MonumentsGateway(backend).export(monument_id, format)
    if isinstance(result, bytes):
        return Response(content=result, media_type=backend.last_content_type)
    return result


# ── Weather ───────────────────────────────────────────────────────────


@router.get("/weather/current", summary="Current weather")
@limiter.limit(RATE_LIMIT)
async def current_weather(
    request: Request,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    backend: BackendClient = Depends(get_backend),
):
    return await WeatherGateway(backend).current(lat, lon)


@router.get("/weather/forecast", summary="Weather forecast")
@limiter.limit(RATE_LIMIT)
async def weather_forecast(
    request: Request,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    days: int = Query(7, ge=1, le=14),
    backend: BackendClient = Depends(get_backend),
):
    return await WeatherGateway(backend).forecast(lat, lon, days)
