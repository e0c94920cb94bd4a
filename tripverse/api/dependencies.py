"""FastAPI dependency injection helpers."""

import httpx
import redis.asyncio as aioredis
from fastapi import Depends, Request

from tripverse.infrastructure.gateways import AuthGateway
from tripverse.infrastructure.http_client import BackendClient
from tripverse.infrastructure.redis_client import get_redis
from tripverse.infrastructure.session_store import Session, SessionStore, load_session


def get_http_client(request: Request) -> httpx.AsyncClient:
    """The process-wide pooled client created in the app lifespan."""
    return request.app.state.http_client


def get_backend(
    request: Request,
    http: httpx.AsyncClient = Depends(get_http_client),
) -> BackendClient:
    """A backend client bound to the caller's cookies."""
    return BackendClient(http, cookie_header=request.headers.get("cookie"))


def get_session_store(redis: aioredis.Redis = Depends(get_redis)) -> SessionStore:
    return SessionStore(redis)


async def get_session(
    request: Request,
    backend: BackendClient = Depends(get_backend),
    store: SessionStore = Depends(get_session_store),
) -> Session:
    return await load_session(request.headers.get("cookie"), store, AuthGateway(backend))
