"""
Unit Tests for Viewport Negotiator
==================================
"""

from src.core.rendering.viewport import ViewportNegotiator
from src.models.schemas import BoundingBox, Viewport


def box(height: float, width: float = 500) -> BoundingBox:
    return BoundingBox(x=0, y=0, width=width, height=height)


def test_initial_viewport():
    assert ViewportNegotiator().initial() == Viewport(width=1920, height=1280)


def test_grows_for_tall_card():
    negotiator = ViewportNegotiator()
    fitted = negotiator.fit(negotiator.initial(), box(1500.3))
    assert fitted == Viewport(width=1920, height=1701)


def test_unchanged_for_short_card():
    negotiator = ViewportNegotiator()
    initial = negotiator.initial()
    assert negotiator.fit(initial, box(800)) == initial


def test_unchanged_for_card_of_equal_height():
    negotiator = ViewportNegotiator()
    initial = negotiator.initial()
    assert negotiator.fit(initial, box(1280)) == initial


def test_width_stays_fixed_for_wide_card():
    negotiator = ViewportNegotiator()
    fitted = negotiator.fit(negotiator.initial(), box(2000, width=4000))
    assert fitted.width == 1920


def test_never_shrinks():
    negotiator = ViewportNegotiator()
    grown = negotiator.fit(negotiator.initial(), box(3000))
    assert negotiator.fit(grown, box(1500)) == grown


def test_from_settings(test_settings):
    negotiator = ViewportNegotiator.from_settings(test_settings)
    assert negotiator.initial() == Viewport(
        width=test_settings.viewport_width, height=test_settings.viewport_height
    )
    assert negotiator.margin == test_settings.viewport_margin
