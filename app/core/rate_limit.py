"""Rate limiting dependency for FastAPI routes.

Requests are limited per client network address with the limiter owned by
the application's components. Exceeding the budget is an expected outcome:
it is logged as a warning and answered with HTTP 429.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import HTTPException, Request, status

from app.core.dependencies import get_components

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


def build_client_id(request: Request) -> str:
    """Derive the limiter key (caller's network address) for a request."""

    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _hash_client_id(client_id: str) -> str:
    """Hash the client id for logging without exposing addresses."""
    return hashlib.sha256(client_id.encode()).hexdigest()[:16]


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the per-client rate limit.

    Consumes one unit of the caller's budget when limiting is enabled.

    Raises:
        HTTPException: 429 Too Many Requests when the budget is exhausted.
    """

    components = get_components(request)
    app_settings = components.settings.app
    if not app_settings.rate_limit_enabled:
        return

    client_id = build_client_id(request)
    result = components.rate_limiter.consume(client_id)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": _hash_client_id(client_id),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": _hash_client_id(client_id),
            "limit": result.limit,
            "window_s": app_settings.rate_limit_window_seconds,
            "retry_after_s": retry_after,
            "path": request.url.path,
        },
    )

    headers: dict[str, str] = {}
    if app_settings.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=RATE_LIMIT_MESSAGE,
        headers=headers or None,
    )
