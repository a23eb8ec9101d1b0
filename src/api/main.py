"""
FastAPI Application
==================

Application factory for the card render service. The lifespan launches the
browser pool and builds the cache and orchestrator; on shutdown it lets
in-flight jobs finish before closing the pool.
"""

from contextlib import asynccontextmanager
import uuid
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
import uvicorn

from src.api.routes.health import router as health_router
from src.api.routes.render import router as render_router
from src.config.logging import get_logger
from src.config.settings import Settings, get_settings
from src.core.cache.store import CacheStore
from src.core.orchestrator import RenderExhaustedError, RenderOrchestrator
from src.core.rendering.browser_pool import BrowserPool
from src.core.rendering.errors import BrowserPoolError
from src.core.rendering.executor import RenderExecutor
from src.models.schemas import ErrorResponse

logger = get_logger(__name__)


def create_app(browser_pool: Optional[Any] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Args:
        browser_pool: Pool to render with; a Playwright ``BrowserPool`` by default
        settings: Settings to use; the global settings by default

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting card render service", target_url=settings.target_url)

        pool = browser_pool or BrowserPool(settings=settings)
        try:
            await pool.launch()
        except BrowserPoolError as e:
            logger.error("Browser pool launch failed", error=str(e))
            raise RuntimeError(f"Browser pool launch failed: {e}")

        cache = CacheStore.from_settings(settings)
        executor = RenderExecutor(pool, settings)
        app.state.browser_pool = pool
        app.state.cache = cache
        app.state.orchestrator = RenderOrchestrator.from_settings(executor, cache, settings)
        logger.info(
            "Render services ready",
            max_concurrency=settings.max_concurrency,
            cache_max_bytes=settings.cache_max_bytes,
        )

        try:
            yield
        finally:
            logger.info("Shutting down, waiting for in-flight render jobs")
            try:
                await pool.idle()
                await pool.close()
            except Exception as e:
                logger.error("Error closing browser pool", error=str(e))
            app.state.orchestrator = None

    app = FastAPI(
        title=settings.app_name,
        description="Render parameterized card templates to PNG images",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_hosts,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next) -> Any:  # type: ignore
        """Add request ID to all requests."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RenderExhaustedError)
    async def render_exhausted_handler(
        request: Request, exc: RenderExhaustedError
    ) -> PlainTextResponse:
        """Report a request whose every render attempt failed."""
        logger.error(
            "Render request failed",
            operation=exc.operation,
            attempts=exc.attempts,
            cause=str(exc.last_error),
            request_id=getattr(request.state, "request_id", None),
        )
        return PlainTextResponse(str(exc), status_code=500)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """General exception handler for unexpected errors."""
        error_response = ErrorResponse(
            error="Internal server error",
            error_code="INTERNAL_ERROR",
            details={"exception": str(exc)} if settings.debug else None,
            request_id=getattr(request.state, "request_id", None),
        )

        logger.error(
            "Unhandled exception",
            exception=str(exc),
            request_id=error_response.request_id,
            exc_info=True,
        )

        return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))

    app.include_router(render_router)
    app.include_router(health_router)

    @app.get("/", tags=["General"])
    async def root() -> dict[str, Any]:
        """Root endpoint with basic API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs_url": "/docs" if settings.debug else None,
            "health_check": "/health",
            "endpoints": {
                "screenshot": "POST /api/screenshot",
                "card_size": "POST /api/card-size",
            },
        }

    return app


app = create_app()


def run_server() -> None:
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run_server()
