"""
Render Executor
===============

Runs one screenshot or measure job on a pooled browser page. The executor is
the only place that knows the order of page operations; it does not retry.
"""

from typing import Any, Optional, Union
import asyncio
import math

from src.config.logging import get_logger
from src.config.settings import Settings
from src.core.rendering.content import ContentPreparer
from src.core.rendering.errors import BrowserTaskError, CardNotFoundError, CardRenderError
from src.core.rendering.job import JobKind, RenderJob, build_target_url
from src.core.rendering.page import CardPage, PagePool
from src.core.rendering.viewport import ViewportNegotiator
from src.models.schemas import CardSize, RenderRequest

logger = get_logger(__name__)

JobResult = Union[bytes, CardSize]


class RenderExecutor:
    """Builds render jobs and runs them through a page pool."""

    def __init__(
        self,
        pool: PagePool,
        settings: Settings,
        preparer: Optional[ContentPreparer] = None,
        negotiator: Optional[ViewportNegotiator] = None,
    ):
        self.pool = pool
        self.settings = settings
        self.preparer = preparer or ContentPreparer()
        self.negotiator = negotiator or ViewportNegotiator.from_settings(settings)
        self.logger: Any = logger.bind(component="render_executor")

    def build_job(self, kind: JobKind, request: RenderRequest) -> RenderJob:
        return RenderJob(
            kind=kind,
            target_url=build_target_url(self.settings.target_url, request),
            request=request,
            icon_src=request.icon,
            mutations=tuple(self.preparer.prepare(request)),
            card_selector=request.card_selector,
            viewport=self.negotiator.initial(),
            scale=request.img_scale or self.settings.img_scale,
            use_loading_font=request.use_loading_font,
        )

    async def run(self, kind: JobKind, request: RenderRequest) -> JobResult:
        """
        Execute a single job.

        Raises:
            CardRenderError: If any step of the job fails
        """
        job = self.build_job(kind, request)
        try:
            return await self.pool.execute(job, self._run_job)
        except CardRenderError:
            raise
        except Exception as e:
            raise BrowserTaskError(f"{kind.value} job failed: {e}") from e

    async def _run_job(self, page: CardPage, job: RenderJob) -> JobResult:
        if not job.use_loading_font:
            await page.block_resources(["font"])

        viewport = job.viewport
        await page.set_viewport(viewport)
        await page.navigate(job.target_url, timeout=self.settings.navigation_timeout)
        self.logger.debug("Navigated to card page", url=job.target_url, viewport=viewport.model_dump())

        if job.use_loading_font:
            await page.wait_for_fonts(timeout=self.settings.font_wait_timeout)
        # Fonts load on demand, so readiness alone does not cover every glyph.
        await asyncio.sleep(self.settings.font_settle_delay)

        for mutation in job.mutations:
            if not await page.apply(mutation):
                self.logger.info(
                    "Mutation target not found, skipping",
                    mutation=mutation.name,
                    selector=mutation.selector,
                )

        box = await page.card_box(job.card_selector)
        if box is None:
            raise CardNotFoundError(job.card_selector)

        fitted = self.negotiator.fit(viewport, box)
        if fitted != viewport:
            await page.set_viewport(fitted)
            self.logger.debug("Viewport grown to fit card", height=fitted.height, card_height=box.height)

        if job.kind is JobKind.MEASURE:
            return CardSize(width=math.ceil(box.width), height=math.ceil(box.height))

        png = await page.capture(box, timeout=self.settings.screenshot_timeout)
        self.logger.info("Card captured", size=len(png), scale=job.scale)
        return png
