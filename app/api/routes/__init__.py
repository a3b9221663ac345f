from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.relay import router as relay_router
from app.api.routes.stats import router as stats_router

__all__ = ["health_router", "relay_router", "stats_router"]
