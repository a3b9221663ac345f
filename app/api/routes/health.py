from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Health"])

LIVENESS_MESSAGE = "Giggle Translate API is running!"


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    """Liveness string for uptime checks and humans opening the base URL."""

    return LIVENESS_MESSAGE


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Used by load balancers and monitoring systems to determine service health.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}
