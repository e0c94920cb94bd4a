"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Backend REST API
    backend_api_url: str = "http://localhost:8000"
    backend_timeout_seconds: float = 10.0  # fixed, no retries

    # Redis (session profile cache)
    redis_url: str = "redis://localhost:6379/0"
    session_cache_ttl_seconds: int = 300

    # Pricing
    commission_rate: float = 0.05  # platform fee on gross booking amount
    currency: str = "PKR"

    # HTTP surface
    rate_limit: str = "100/minute"
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
