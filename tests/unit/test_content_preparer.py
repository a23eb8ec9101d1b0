"""
Unit Tests for Content Preparer
===============================
"""

from src.core.rendering.content import (
    CONTENT_SELECTOR,
    ICON_SELECTOR,
    TRANSLATION_SELECTOR,
    ContentPreparer,
    MarkdownRenderer,
    MutationKind,
)
from src.models.schemas import RenderRequest


class TestMarkdownRenderer:
    """Test Markdown conversion."""

    def test_strong_text(self):
        html = MarkdownRenderer().render("**hi**\n")
        assert "<strong>hi</strong>" in html
        assert "<br" not in html

    def test_soft_line_break_is_not_br(self):
        html = MarkdownRenderer().render("first line\nsecond line")
        assert "<br" not in html
        assert "first line\nsecond line" in html

    def test_explicit_hard_break(self):
        html = MarkdownRenderer().render("first line  \nsecond line")
        assert "<br" in html


class TestContentPreparer:
    """Test mutation building."""

    def test_markdown_content_is_converted(self):
        mutations = ContentPreparer().prepare(RenderRequest(content="**hi**"))

        assert len(mutations) == 1
        assert mutations[0].selector == CONTENT_SELECTOR
        assert mutations[0].kind is MutationKind.INNER_HTML
        assert "<strong>hi</strong>" in mutations[0].value

    def test_html_content_passes_through(self):
        request = RenderRequest.model_validate({"content": "**hi**", "isContentHtml": True})
        mutations = ContentPreparer().prepare(request)

        assert mutations[0].value == "**hi**"

    def test_translation_inserted_verbatim(self):
        markup = "<b>bonjour</b> & <i>salut</i>"
        mutations = ContentPreparer().prepare(RenderRequest(translate=markup))

        assert mutations[0].selector == TRANSLATION_SELECTOR
        assert mutations[0].value == markup

    def test_http_icon_is_used(self):
        mutations = ContentPreparer().prepare(RenderRequest(icon="https://example.com/i.png"))

        assert mutations[0].selector == ICON_SELECTOR
        assert mutations[0].kind is MutationKind.IMAGE_SRC
        assert mutations[0].value == "https://example.com/i.png"

    def test_non_http_icon_is_ignored(self):
        assert ContentPreparer().prepare(RenderRequest(icon="data:image/png;base64,AAAA")) == []
        assert ContentPreparer().prepare(RenderRequest(icon="")) == []

    def test_mutation_order(self, sample_request):
        mutations = ContentPreparer().prepare(sample_request)
        assert [m.name for m in mutations] == ["translation", "content", "icon"]

    def test_no_dynamic_content(self):
        assert ContentPreparer().prepare(RenderRequest(temp="quote")) == []
