"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and
the shared caches/limiter) so tests can build isolated instances.
"""

from __future__ import annotations

import time
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.llm.base import AbstractLLMClient
from app.api.routes import health_router, relay_router, stats_router
from app.core.config import Settings
from app.core.config import settings as default_settings
from app.core.dependencies import build_components
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations


def _parse_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def create_app(
    *,
    settings: Settings | None = None,
    llm: AbstractLLMClient | None = None,
    clock: Callable[[], float] = time.time,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Settings to use; defaults to the environment-derived settings.
        llm: Completion client; built from settings when omitted.
        clock: Time source for cache expiry and rate windows.
        configure_logs: Install the root log handler (disabled in some tests).

    Returns:
        Configured FastAPI app with components attached to ``app.state``.
    """
    cfg = settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(cfg.log, debug=cfg.app.debug)

    app = FastAPI(
        title="Giggle Translate API",
        description=(
            "Relay that detects the language of a text and explains words to "
            "children in simple terms, backed by an LLM provider, with response "
            "caching and per-client rate limiting."
        ),
        version="1.0.0",
        debug=cfg.app.debug,
    )

    app.state.components = build_components(cfg, llm=llm, clock=clock)

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_origins(cfg.app.cors_allow_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[cfg.log.request_id_header, "Retry-After"],
    )
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(relay_router)
    app.include_router(stats_router)

    apply_openapi_customizations(app)

    return app
