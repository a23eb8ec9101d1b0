"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends

from src.api.dependencies import get_browser_pool, get_cache
from src.config.settings import get_settings
from src.core.cache.store import CacheStore
from src.config.logging import get_logger
from src.models.schemas import HealthStatus

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthStatus)
async def health_check(
    browser_pool: Any = Depends(get_browser_pool),
    cache: Optional[CacheStore] = Depends(get_cache),
) -> HealthStatus:
    """Report browser pool state and cache usage."""
    pool_status = browser_pool.status() if browser_pool is not None else {"launched": False}
    healthy = bool(pool_status.get("launched"))

    health = HealthStatus(
        status="healthy" if healthy else "unhealthy",
        version=get_settings().app_version,
        browser_pool=pool_status,
        cache=cache.stats() if cache is not None else {},
    )
    logger.debug("Health check completed", status=health.status, browser_pool=pool_status)
    return health
