"""
API Dependencies
================

Accessors for the services the lifespan stores on ``app.state``.
"""

from typing import Any, Optional

from fastapi import HTTPException, Request

from src.core.cache.store import CacheStore
from src.core.orchestrator import RenderOrchestrator


def get_orchestrator(request: Request) -> RenderOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Render service is not ready")
    return orchestrator


def get_cache(request: Request) -> Optional[CacheStore]:
    return getattr(request.app.state, "cache", None)


def get_browser_pool(request: Request) -> Any:
    return getattr(request.app.state, "browser_pool", None)
