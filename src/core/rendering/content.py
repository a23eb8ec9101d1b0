"""
Content Preparer
================

Turns the dynamic parts of a render request into page mutations applied after
navigation: translation markup, the card body and the icon image.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from markdown_it import MarkdownIt

from src.config.logging import get_logger
from src.models.schemas import RenderRequest

logger = get_logger(__name__)

TRANSLATION_SELECTOR = '[name="showTranslation"]'
CONTENT_SELECTOR = "div.card-content"
ICON_SELECTOR = "img.card-icon"


class MutationKind(str, Enum):
    """How a mutation changes its target element."""

    INNER_HTML = "inner_html"
    IMAGE_SRC = "image_src"


@dataclass(frozen=True)
class PageMutation:
    """
    One change to the loaded page.

    Setting the same value twice leaves the page unchanged. A missing target
    is skipped by the page adapter.
    """

    name: str
    selector: str
    kind: MutationKind
    value: str


class MarkdownRenderer:
    """Markdown to HTML converter. Soft line breaks are not turned into ``<br>``."""

    def __init__(self) -> None:
        self._md = MarkdownIt("default", {"breaks": False})

    def render(self, text: str) -> str:
        return self._md.render(text)


class ContentPreparer:
    """Builds the ordered mutation list for a request."""

    def __init__(self, markdown: Optional[MarkdownRenderer] = None):
        self.markdown = markdown or MarkdownRenderer()
        self.logger: Any = logger.bind(component="content_preparer")

    def prepare(self, request: RenderRequest) -> List[PageMutation]:
        mutations: List[PageMutation] = []

        # Translation is trusted rich content and is inserted unescaped.
        if request.translate:
            mutations.append(
                PageMutation(
                    name="translation",
                    selector=TRANSLATION_SELECTOR,
                    kind=MutationKind.INNER_HTML,
                    value=request.translate,
                )
            )

        if request.content:
            mutations.append(
                PageMutation(
                    name="content",
                    selector=CONTENT_SELECTOR,
                    kind=MutationKind.INNER_HTML,
                    value=self.content_html(request.content, request.is_content_html),
                )
            )

        icon_url = self.icon_url(request.icon)
        if icon_url:
            mutations.append(
                PageMutation(
                    name="icon",
                    selector=ICON_SELECTOR,
                    kind=MutationKind.IMAGE_SRC,
                    value=icon_url,
                )
            )

        return mutations

    def content_html(self, content: str, is_html: bool) -> str:
        if is_html:
            return content

        html = self.markdown.render(content)
        self.logger.debug("Converted Markdown content", markdown_length=len(content), html_length=len(html))
        return html

    def icon_url(self, icon: Optional[str]) -> Optional[str]:
        if not icon:
            return None
        if not icon.startswith("http"):
            self.logger.info("Ignoring icon that is not an http(s) URL", icon=icon)
            return None
        return icon
