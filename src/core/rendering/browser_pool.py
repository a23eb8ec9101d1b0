"""
Browser Pool
============

Playwright adapter for the page interface, and a worker pool that runs render
jobs concurrently over one shared browser. Each job gets its own browser
context so cookies, routes and scale never leak between requests.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence
from contextlib import contextmanager
import asyncio

from playwright.async_api import (
    async_playwright,
    Browser,
    Page,
    Route,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from src.config.logging import get_logger
from src.config.settings import Settings, get_settings
from src.core.rendering.content import MutationKind, PageMutation
from src.core.rendering.errors import BrowserPoolError, BrowserTaskError, RenderTimeoutError
from src.core.rendering.job import RenderJob
from src.core.rendering.page import JobCallback, T
from src.models.schemas import BoundingBox, Viewport

logger = get_logger(__name__)

BROWSER_ARGS = [
    "--disable-dev-shm-usage",
    "--disable-setuid-sandbox",
    "--no-first-run",
    "--no-sandbox",
    "--no-zygote",
]

FONTS_READY = 'document.fonts.status === "loaded"'

SET_INNER_HTML = """([selector, html]) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    el.innerHTML = html;
    return true;
}"""

# Resolves once the new image has loaded or failed, so the capture sees it.
SET_IMAGE_SRC = """([selector, src]) => new Promise((resolve) => {
    const img = document.querySelector(selector);
    if (!img) { resolve(false); return; }
    img.addEventListener('load', () => resolve(true));
    img.addEventListener('error', () => resolve(true));
    img.src = src;
})"""

MUTATION_SCRIPTS = {
    MutationKind.INNER_HTML: SET_INNER_HTML,
    MutationKind.IMAGE_SRC: SET_IMAGE_SRC,
}

TaskErrorListener = Callable[[Exception, RenderJob], None]


@contextmanager
def translate_browser_errors(action: str) -> Iterator[None]:
    """Re-raise Playwright failures as render errors."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise RenderTimeoutError(f"{action} timed out: {e}") from e
    except PlaywrightError as e:
        raise BrowserTaskError(f"{action} failed: {e}") from e


class PlaywrightCardPage:
    """Page interface implemented over a Playwright page."""

    def __init__(self, page: Page, script_timeout: int = 120000):
        self.page = page
        self.script_timeout = script_timeout

    async def block_resources(self, resource_types: Sequence[str]) -> None:
        blocked = set(resource_types)

        async def handle_route(route: Route) -> None:
            if route.request.resource_type in blocked:
                await route.abort()
            else:
                await route.continue_()

        with translate_browser_errors("Request interception"):
            await self.page.route("**/*", handle_route)

    async def set_viewport(self, viewport: Viewport) -> None:
        with translate_browser_errors("Viewport update"):
            await self.page.set_viewport_size({"width": viewport.width, "height": viewport.height})

    async def navigate(self, url: str, timeout: int) -> None:
        with translate_browser_errors("Navigation"):
            await self.page.goto(url, timeout=timeout, wait_until="networkidle")

    async def wait_for_fonts(self, timeout: int) -> None:
        with translate_browser_errors("Font loading"):
            await self.page.wait_for_function(FONTS_READY, timeout=timeout)

    async def apply(self, mutation: PageMutation) -> bool:
        # evaluate() has no timeout of its own; an icon that never loads would hang the job.
        with translate_browser_errors(f"Applying {mutation.name}"):
            try:
                applied = await asyncio.wait_for(
                    self.page.evaluate(
                        MUTATION_SCRIPTS[mutation.kind], [mutation.selector, mutation.value]
                    ),
                    timeout=self.script_timeout / 1000,
                )
            except asyncio.TimeoutError as e:
                raise RenderTimeoutError(
                    f"Applying {mutation.name} timed out after {self.script_timeout}ms"
                ) from e
        return bool(applied)

    async def card_box(self, selector: str) -> Optional[BoundingBox]:
        with translate_browser_errors("Card lookup"):
            element = await self.page.query_selector(selector)
            if element is None:
                return None
            box = await element.bounding_box()
        # An element that is not rendered has no box and cannot be captured.
        if box is None:
            return None
        return BoundingBox(**box)

    async def capture(self, clip: BoundingBox, timeout: int) -> bytes:
        with translate_browser_errors("Screenshot"):
            return await self.page.screenshot(
                type="png",
                clip=clip.model_dump(),  # type: ignore[arg-type]
                full_page=True,
                scale="device",
                timeout=timeout,
            )


class BrowserPool:
    """Runs render jobs on isolated contexts of a single Chromium instance."""

    def __init__(self, max_concurrency: Optional[int] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.max_concurrency = max_concurrency or self.settings.max_concurrency
        self.browser: Optional[Browser] = None
        self._playwright: Any = None
        self._semaphore = asyncio.Semaphore(self.max_concurrency)
        self._active = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._error_listeners: List[TaskErrorListener] = []
        self.logger: Any = logger.bind(component="browser_pool")

    @property
    def launched(self) -> bool:
        return self.browser is not None

    @property
    def active_jobs(self) -> int:
        return self._active

    async def launch(self) -> None:
        """Start Playwright and launch the shared browser."""
        try:
            self._playwright = await async_playwright().start()
            self.browser = await self._playwright.chromium.launch(
                headless=self.settings.playwright_headless,
                args=BROWSER_ARGS,
                timeout=self.settings.protocol_timeout,
            )
            self.logger.info("Browser pool launched", max_concurrency=self.max_concurrency)
        except Exception as e:
            self.logger.error("Failed to launch browser pool", error=str(e))
            raise BrowserPoolError(f"Browser pool launch failed: {e}") from e

    async def idle(self) -> None:
        """Wait until no job is queued or running."""
        await self._idle.wait()

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self.browser:
            await self.browser.close()
            self.browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        self.logger.info("Browser pool closed")

    def on_task_error(self, listener: TaskErrorListener) -> None:
        """Register a callback invoked with every failed job."""
        self._error_listeners.append(listener)

    def status(self) -> Dict[str, Any]:
        return {
            "launched": self.launched,
            "active_jobs": self._active,
            "max_concurrency": self.max_concurrency,
        }

    async def execute(self, job: RenderJob, callback: JobCallback[T]) -> T:
        """Run ``callback`` on a fresh page once a worker slot is free."""
        if self.browser is None:
            raise BrowserPoolError("Browser pool not launched")

        self._active += 1
        self._idle.clear()
        try:
            async with self._semaphore:
                return await self._run(job, callback)
        except Exception as e:
            self._report(e, job)
            raise
        finally:
            self._active -= 1
            if self._active == 0:
                self._idle.set()

    async def _run(self, job: RenderJob, callback: JobCallback[T]) -> T:
        if self.browser is None:
            raise BrowserPoolError("Browser pool closed while job was queued")

        with translate_browser_errors("Opening browser context"):
            context = await self.browser.new_context(
                viewport={"width": job.viewport.width, "height": job.viewport.height},
                device_scale_factor=job.scale,
            )
        try:
            with translate_browser_errors("Opening page"):
                page = await context.new_page()
            card_page = PlaywrightCardPage(page, script_timeout=self.settings.script_timeout)
            return await callback(card_page, job)
        finally:
            await context.close()

    def _report(self, error: Exception, job: RenderJob) -> None:
        self.logger.error(
            "Task error", kind=job.kind.value, url=job.target_url, error=str(error)
        )
        for listener in self._error_listeners:
            listener(error, job)
