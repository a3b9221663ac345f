"""Process-wide components and their FastAPI dependency accessors.

Caches, the rate limiter and the services are built once by
``build_components`` when the app is created and stored on
``app.state.components``. Routes receive them through ``Depends`` so tests
can build an app around fakes (LLM client, clock) without touching globals.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import create_llm_client
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import Settings
from app.services.explanation_service import ExplanationService
from app.services.language_service import LanguageDetectionService
from app.utils.simple_cache import SimpleTTLCache


@dataclass
class AppComponents:
    """Everything a request handler needs, owned by the application."""

    settings: Settings
    llm: AbstractLLMClient
    language_cache: SimpleTTLCache
    explanation_cache: SimpleTTLCache
    rate_limiter: AbstractRateLimiter
    language_service: LanguageDetectionService
    explanation_service: ExplanationService


def build_components(
    settings: Settings,
    *,
    llm: AbstractLLMClient | None = None,
    clock: Callable[[], float] = time.time,
) -> AppComponents:
    """Wire caches, limiter and services from configuration.

    Args:
        settings: Resolved application settings.
        llm: Optional pre-built client; created from settings when omitted.
        clock: Time source shared by caches and limiter.

    Returns:
        AppComponents ready to attach to ``app.state``.

    Raises:
        ValidationAppError: If no client is given and the provider settings are invalid.
    """
    llm_client = llm or create_llm_client(settings.llm)

    language_cache = SimpleTTLCache(
        ttl_seconds=settings.app.cache_ttl_seconds,
        max_entries=settings.app.cache_max_entries,
        name="language",
        clock=clock,
    )
    explanation_cache = SimpleTTLCache(
        ttl_seconds=settings.app.cache_ttl_seconds,
        max_entries=settings.app.cache_max_entries,
        name="explanation",
        clock=clock,
    )
    rate_limiter = InMemoryFixedWindowRateLimiter(
        limit=settings.app.rate_limit_requests,
        window_seconds=settings.app.rate_limit_window_seconds,
        clock=clock,
    )

    return AppComponents(
        settings=settings,
        llm=llm_client,
        language_cache=language_cache,
        explanation_cache=explanation_cache,
        rate_limiter=rate_limiter,
        language_service=LanguageDetectionService(llm=llm_client, cache=language_cache),
        explanation_service=ExplanationService(llm=llm_client, cache=explanation_cache),
    )


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


def get_settings(request: Request) -> Settings:
    return get_components(request).settings


def get_language_service(request: Request) -> LanguageDetectionService:
    return get_components(request).language_service


def get_explanation_service(request: Request) -> ExplanationService:
    return get_components(request).explanation_service
