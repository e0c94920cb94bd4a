"""
Auth endpoints
==============

POST /api/v1/auth/login   -- log in; the backend's session cookie is relayed
POST /api/v1/auth/signup  -- validate the form, then create the account
GET  /api/v1/auth/me      -- current session (anonymous when not logged in)
POST /api/v1/auth/logout  -- log out and drop the cached profile
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from redis.exceptions import RedisError

from tripverse.api.dependencies import get_backend, get_session, get_session_store
from tripverse.api.middleware import RATE_LIMIT, limiter
from tripverse.api.schemas import LoginRequest, SessionResponse, SignupRequest
from tripverse.domain.validation import ensure_valid, sanitize_input, validate_signup
from tripverse.infrastructure.gateways import AuthGateway
from tripverse.infrastructure.http_client import AuthenticationRequired, BackendClient
from tripverse.infrastructure.session_store import Session, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _relay_cookies(backend: BackendClient, response: Response) -> None:
    for cookie in backend.set_cookie_headers():
        response.headers.append("set-cookie", cookie)


@router.post("/login", summary="Log in with email and password")
@limiter.limit(RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    backend: BackendClient = Depends(get_backend),
):
    result = await AuthGateway(backend).login(body.email.strip(), body.password)
    _relay_cookies(backend, response)
    return result


@router.post("/signup", status_code=201, summary="Create a client or driver account")
@limiter.limit(RATE_LIMIT)
async def signup(
    request: Request,
    response: Response,
    body: SignupRequest,
    backend: BackendClient = Depends(get_backend),
):
    ensure_valid(
        validate_signup(
            body.full_name, body.email, body.password, body.confirm_password, body.phone
        )
    )
    payload = {
        "full_name": sanitize_input(body.full_name),
        "email": body.email.strip(),
        "password": body.password,
        "role": body.role,
        "city_id": body.city_id,
        "phone": body.phone,
    }
    result = await AuthGateway(backend).signup(
        {key: value for key, value in payload.items() if value is not None}
    )
    _relay_cookies(backend, response)
    return result


@router.get("/me", response_model=SessionResponse, summary="Current session")
@limiter.limit(RATE_LIMIT)
async def me(
    request: Request,
    session: Session = Depends(get_session),
):
    return SessionResponse(
        authenticated=session.is_authenticated,
        user=session.user,
        role=session.role.value if session.role else None,
    )


@router.post("/logout", summary="Log out")
@limiter.limit(RATE_LIMIT)
async def logout(
    request: Request,
    response: Response,
    backend: BackendClient = Depends(get_backend),
    store: SessionStore = Depends(get_session_store),
):
    cookie_header = request.headers.get("cookie")
    if cookie_header:
        try:
            await store.evict(cookie_header)
        except RedisError as exc:
            logger.warning("Session cache eviction failed: %s", exc)
    try:
        await AuthGateway(backend).logout()
    except AuthenticationRequired:
        logger.info("Logout without an active backend session")
    _relay_cookies(backend, response)
    return {"detail": "Logged out"}
