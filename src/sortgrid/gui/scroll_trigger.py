"""Translate scroll geometry into next-page requests."""

from __future__ import annotations

import logging

from sortgrid.config import SCROLL_LOADING_SHIFT_PX
from sortgrid.gui.viewmodels.fetch_orchestrator import FetchOrchestrator

LOGGER = logging.getLogger(__name__)


class ScrollTrigger:
    """Forward "near the end of the rows" to ``FetchOrchestrator``.

    The caller reports where the bottom edge of the rendered rows sits and
    where the bottom of the viewport is, both in the same pixel coordinates.
    The rows count as nearly exhausted once their bottom edge is closer than
    ``threshold`` pixels to the viewport's bottom.
    """

    def __init__(self, orchestrator: FetchOrchestrator, threshold: int = SCROLL_LOADING_SHIFT_PX) -> None:
        self._orchestrator = orchestrator
        self._threshold = threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def is_near_end(self, content_bottom: float, viewport_bottom: float) -> bool:
        return content_bottom < viewport_bottom + self._threshold

    async def notify(self, content_bottom: float, viewport_bottom: float) -> bool:
        """Report the current geometry; returns ``True`` if a page was loaded."""
        near_end = self.is_near_end(content_bottom, viewport_bottom)
        if near_end:
            LOGGER.debug(
                "Rows end at %.0f, viewport at %.0f; requesting more",
                content_bottom,
                viewport_bottom,
            )
        return await self._orchestrator.on_scroll_proximity(near_end)
