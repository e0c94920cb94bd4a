"""
FastAPI application factory.

* Registers routes for auth, catalog, cars, bookings, driver and admin.
* Opens / closes the shared backend HTTP client via lifespan events.
* Applies rate-limiting middleware and CORS for the browser app.
* Maps backend and domain errors to HTTP responses.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tripverse.api.middleware import limiter
from tripverse.api.routes import admin, auth, bookings, cars, catalog, driver
from tripverse.api.schemas import HealthResponse
from tripverse.config import settings
from tripverse.domain.entities import InvalidStateTransition
from tripverse.domain.validation import FormValidationError
from tripverse.infrastructure.http_client import (
    AuthenticationRequired,
    BackendError,
    BackendUnavailable,
    create_http_client,
)
from tripverse.infrastructure.redis_client import close_redis
from tripverse.infrastructure.session_store import PermissionDenied

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the pooled backend client on startup; close it and Redis on shutdown."""
    app.state.http_client = create_http_client()
    logger.info("Backend API at %s", settings.backend_api_url)
    yield
    await app.state.http_client.aclose()
    await close_redis()


# ── Exception handlers ────────────────────────────────────────────────


async def _authentication_required(request: Request, exc: AuthenticationRequired):
    return JSONResponse(status_code=401, content={"detail": exc.detail})


async def _permission_denied(request: Request, exc: PermissionDenied):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


async def _backend_unavailable(request: Request, exc: BackendUnavailable):
    return JSONResponse(status_code=503, content={"detail": exc.detail})


async def _backend_error(request: Request, exc: BackendError):
    # 4xx answers are the caller's problem and relayed; 5xx become a bad gateway
    status = exc.status_code if 400 <= exc.status_code < 500 else 502
    return JSONResponse(status_code=status, content={"detail": exc.detail})


async def _form_invalid(request: Request, exc: FormValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation failed", "errors": exc.errors},
    )


async def _invalid_transition(request: Request, exc: InvalidStateTransition):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="TripVerse Gateway API",
        description=(
            "Gateway between the TripVerse web app and its backend: car "
            "rental bookings with commission breakdowns, hotel search, "
            "monuments, weather and the admin console."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Backend and domain errors
    app.add_exception_handler(AuthenticationRequired, _authentication_required)
    app.add_exception_handler(BackendUnavailable, _backend_unavailable)
    app.add_exception_handler(BackendError, _backend_error)
    app.add_exception_handler(PermissionDenied, _permission_denied)
    app.add_exception_handler(FormValidationError, _form_invalid)
    app.add_exception_handler(InvalidStateTransition, _invalid_transition)

    # Routers
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(catalog.router, prefix="/api/v1")
    app.include_router(cars.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(driver.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    @app.get("/api/v1/health", response_model=HealthResponse, summary="Health check")
    async def health():
        return HealthResponse()

    return app
