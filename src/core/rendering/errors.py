"""
Rendering Errors
================

Failures raised while executing a single render job. All of them are eligible
for retry by the orchestrator.
"""


class CardRenderError(Exception):
    """Base exception for a failed render job."""

    pass


class CardNotFoundError(CardRenderError):
    """The card element selected by the request is not on the page."""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"Card not found: no element matches {selector!r}")


class RenderTimeoutError(CardRenderError):
    """Navigation, script evaluation or capture exceeded its timeout."""

    pass


class BrowserTaskError(CardRenderError):
    """The browser reported an error while running a job."""

    pass


class BrowserPoolError(CardRenderError):
    """The browser pool is unavailable or failed to launch."""

    pass
