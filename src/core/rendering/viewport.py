"""
Viewport Negotiator
===================

The card height is unknown until the page has rendered. Jobs start with a
fixed viewport and grow it once the card's bounding box has been measured.
"""

import math

from src.config.settings import Settings
from src.models.schemas import BoundingBox, Viewport


class ViewportNegotiator:
    """Computes the initial viewport and grows it to fit a measured card."""

    def __init__(self, width: int = 1920, height: int = 1280, margin: int = 200):
        self.width = width
        self.height = height
        self.margin = margin

    @classmethod
    def from_settings(cls, settings: Settings) -> "ViewportNegotiator":
        return cls(
            width=settings.viewport_width,
            height=settings.viewport_height,
            margin=settings.viewport_margin,
        )

    def initial(self) -> Viewport:
        return Viewport(width=self.width, height=self.height)

    def fit(self, current: Viewport, box: BoundingBox) -> Viewport:
        """
        Return the viewport needed to show ``box``.

        Width stays fixed; height only grows, to the card height plus margin.
        """
        if box.height <= current.height:
            return current
        return Viewport(width=self.width, height=math.ceil(box.height) + self.margin)
