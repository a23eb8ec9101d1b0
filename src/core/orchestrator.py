"""
Request Orchestrator
====================

Serves screenshot and card-size requests: consults the cache, runs the render
executor under the retry policy on a miss, and admits successful results back
into the cache.
"""

from typing import Any, Optional
import asyncio

from src.config.logging import get_logger
from src.config.settings import Settings
from src.core.cache.keys import CacheKey, image_key, size_key
from src.core.cache.store import CacheStore, CacheValue
from src.core.rendering.errors import CardRenderError
from src.core.rendering.executor import JobResult, RenderExecutor
from src.core.rendering.job import JobKind
from src.models.schemas import CardSize, RenderRequest

logger = get_logger(__name__)

OPERATION_NAMES = {
    JobKind.SCREENSHOT: "render screenshot",
    JobKind.MEASURE: "measure card size",
}


class RenderExhaustedError(Exception):
    """Every attempt of a request failed."""

    def __init__(self, operation: str, attempts: int, last_error: Optional[Exception] = None):
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed to {operation} after {attempts} attempts")


class RenderOrchestrator:
    """Cache-first, retrying front end to the render executor."""

    def __init__(
        self,
        executor: RenderExecutor,
        cache: CacheStore,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
    ):
        self.executor = executor
        self.cache = cache
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.logger: Any = logger.bind(component="orchestrator")

    @classmethod
    def from_settings(
        cls, executor: RenderExecutor, cache: CacheStore, settings: Settings
    ) -> "RenderOrchestrator":
        return cls(
            executor,
            cache,
            max_attempts=settings.max_attempts,
            retry_delay=settings.retry_delay,
        )

    async def screenshot(self, request: RenderRequest) -> bytes:
        """PNG bytes of the requested card."""
        result = await self._resolve(JobKind.SCREENSHOT, image_key(request), request)
        return result  # type: ignore[return-value]

    async def card_size(self, request: RenderRequest) -> CardSize:
        """Rendered card dimensions, without capturing an image."""
        result = await self._resolve(JobKind.MEASURE, size_key(request), request)
        return result  # type: ignore[return-value]

    async def _resolve(self, kind: JobKind, key: CacheKey, request: RenderRequest) -> JobResult:
        cached = self._cache_get(key)
        if cached is not None:
            self.logger.info("Serving cached result", kind=kind.value, key=str(key))
            return cached

        self.logger.info("Cache miss, rendering", kind=kind.value, key=str(key), payload=request.payload())
        result = await self._run_with_retries(kind, request)
        self._cache_set(key, result)
        return result

    async def _run_with_retries(self, kind: JobKind, request: RenderRequest) -> JobResult:
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self.executor.run(kind, request)
            except CardRenderError as e:
                last_error = e
                self.logger.warning(
                    "Render attempt failed",
                    kind=kind.value,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(e),
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay)

        self.logger.error(
            "Render attempts exhausted",
            kind=kind.value,
            attempts=self.max_attempts,
            error=str(last_error),
        )
        raise RenderExhaustedError(OPERATION_NAMES[kind], self.max_attempts, last_error)

    def _cache_get(self, key: CacheKey) -> Optional[CacheValue]:
        try:
            return self.cache.get(key)
        except Exception as e:
            self.logger.error("Cache read failed", key=str(key), error=str(e))
            return None

    def _cache_set(self, key: CacheKey, value: CacheValue) -> None:
        try:
            if self.cache.set(key, value):
                self.logger.debug("Result cached", key=str(key))
        except Exception as e:
            self.logger.error("Cache write failed", key=str(key), error=str(e))
