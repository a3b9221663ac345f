from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.dependencies import AppComponents, get_components
from app.schemas.relay import CacheStats, RateLimitInfo, StatsResponse

router = APIRouter(prefix="/api", tags=["Stats"])


@router.get("/stats", response_model=StatsResponse)
def cache_stats(components: AppComponents = Depends(get_components)) -> StatsResponse:
    """Report size and hit/miss counters of both relay caches.

    Values themselves are never exposed. Not rate limited.
    """
    limiter = components.rate_limiter
    app_settings = components.settings.app

    return StatsResponse(
        language_cache=CacheStats(**components.language_cache.stats()),
        explanation_cache=CacheStats(**components.explanation_cache.stats()),
        rate_limit=RateLimitInfo(
            enabled=app_settings.rate_limit_enabled,
            limit=app_settings.rate_limit_requests,
            window_seconds=app_settings.rate_limit_window_seconds,
            tracked_clients=limiter.tracked_clients(),
        ),
    )
