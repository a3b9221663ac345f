"""OpenAPI metadata customization.

Adds tag descriptions and documents the rate-limit response headers on the
limited operations, keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {
        "name": "Relay",
        "description": "Language detection and child-friendly explanations (rate limited).",
    },
    {
        "name": "Stats",
        "description": "Cache counters for the relay caches.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

_RATE_LIMIT_HEADERS = {
    "Retry-After": {"description": "Seconds until the client's window resets.", "schema": {"type": "integer"}},
    "X-RateLimit-Limit": {"description": "Requests allowed per window.", "schema": {"type": "integer"}},
    "X-RateLimit-Remaining": {"description": "Requests left in the window.", "schema": {"type": "integer"}},
    "X-RateLimit-Reset": {"description": "UNIX time when the window resets.", "schema": {"type": "integer"}},
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and 429 headers."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in _TAGS:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                throttled = method_obj.get("responses", {}).get("429")
                if throttled is not None:
                    throttled.setdefault("headers", dict(_RATE_LIMIT_HEADERS))

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
