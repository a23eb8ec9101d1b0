"""
Test Mocks
===========

In-memory implementations of the page and pool interfaces.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from src.core.rendering.content import PageMutation
from src.core.rendering.job import RenderJob
from src.models.schemas import BoundingBox, Viewport

__all__ = ["FAKE_PNG", "FakeClock", "FakeCardPage", "FakeBrowserPool"]

FAKE_PNG = b"\x89PNG\r\n\x1a\n" + b"fake-card-image"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCardPage:
    """Page that records every call and answers from fixed data."""

    def __init__(
        self,
        cards: Optional[Dict[str, BoundingBox]] = None,
        targets: Optional[Set[str]] = None,
        png: bytes = FAKE_PNG,
    ):
        self.cards = cards if cards is not None else {
            ".default": BoundingBox(x=10, y=20, width=600.4, height=400.2)
        }
        self.targets = targets
        self.png = png
        self.calls: List[Tuple[str, Any]] = []
        self.viewports: List[Viewport] = []
        self.applied: List[PageMutation] = []
        self.blocked: List[str] = []

    async def block_resources(self, resource_types: Sequence[str]) -> None:
        self.blocked.extend(resource_types)
        self.calls.append(("block_resources", list(resource_types)))

    async def set_viewport(self, viewport: Viewport) -> None:
        self.viewports.append(viewport)
        self.calls.append(("set_viewport", viewport))

    async def navigate(self, url: str, timeout: int) -> None:
        self.calls.append(("navigate", url))

    async def wait_for_fonts(self, timeout: int) -> None:
        self.calls.append(("wait_for_fonts", timeout))

    async def apply(self, mutation: PageMutation) -> bool:
        self.calls.append(("apply", mutation.name))
        if self.targets is not None and mutation.selector not in self.targets:
            return False
        self.applied.append(mutation)
        return True

    async def card_box(self, selector: str) -> Optional[BoundingBox]:
        self.calls.append(("card_box", selector))
        return self.cards.get(selector)

    async def capture(self, clip: BoundingBox, timeout: int) -> bytes:
        self.calls.append(("capture", clip))
        return self.png

    @property
    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


class FakeBrowserPool:
    """Pool that runs jobs on fresh fake pages, optionally failing first."""

    def __init__(
        self,
        page_factory: Optional[Callable[[], FakeCardPage]] = None,
        failures: Optional[List[Exception]] = None,
    ):
        self.page_factory = page_factory or FakeCardPage
        self.failures = list(failures or [])
        self.jobs: List[RenderJob] = []
        self.pages: List[FakeCardPage] = []
        self.launched = False
        self.idle_called = False
        self.closed = False

    async def launch(self) -> None:
        self.launched = True

    async def idle(self) -> None:
        self.idle_called = True

    async def close(self) -> None:
        self.closed = True
        self.launched = False

    def status(self) -> Dict[str, Any]:
        return {"launched": self.launched, "active_jobs": 0, "max_concurrency": 1}

    async def execute(self, job: RenderJob, callback: Callable) -> Any:
        self.jobs.append(job)
        if self.failures:
            raise self.failures.pop(0)
        page = self.page_factory()
        self.pages.append(page)
        return await callback(page, job)
