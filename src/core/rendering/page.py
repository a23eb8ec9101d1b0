"""
Page Interface
==============

The capabilities the render executor needs from a browser page, and from the
pool that hands pages out. The Playwright adapter implements both; tests use
in-memory fakes.
"""

from typing import Awaitable, Callable, Optional, Protocol, Sequence, TypeVar

from src.core.rendering.content import PageMutation
from src.core.rendering.job import RenderJob
from src.models.schemas import BoundingBox, Viewport

T = TypeVar("T")


class CardPage(Protocol):
    """A browser page prepared for a single render job."""

    async def block_resources(self, resource_types: Sequence[str]) -> None:
        """Abort requests for the given resource types."""
        ...

    async def set_viewport(self, viewport: Viewport) -> None: ...

    async def navigate(self, url: str, timeout: int) -> None:
        """Load ``url`` and wait until the network is quiet."""
        ...

    async def wait_for_fonts(self, timeout: int) -> None: ...

    async def apply(self, mutation: PageMutation) -> bool:
        """Apply a mutation; return False if its target element is absent."""
        ...

    async def card_box(self, selector: str) -> Optional[BoundingBox]:
        """Bounding box of the first element matching ``selector``, if any."""
        ...

    async def capture(self, clip: BoundingBox, timeout: int) -> bytes:
        """PNG screenshot of ``clip`` at the job's scale."""
        ...


JobCallback = Callable[[CardPage, RenderJob], Awaitable[T]]


class PagePool(Protocol):
    """Runs job callbacks on pooled pages with bounded concurrency."""

    async def execute(self, job: RenderJob, callback: JobCallback[T]) -> T: ...
