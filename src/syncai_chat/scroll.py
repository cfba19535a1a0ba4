"""Scroll anchoring: follow new content only while the reader is at the bottom."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Protocol

LOGGER = logging.getLogger(__name__)

# Rows; the view reports whole-row geometry.
AT_BOTTOM_TOLERANCE = 1


@dataclass(frozen=True)
class ViewportMetrics:
    """Geometry of the transcript viewport, in the view's native units."""

    scroll_height: float
    scroll_top: float
    client_height: float

    def distance_from_bottom(self) -> float:
        return abs(self.scroll_height - self.scroll_top - self.client_height)


class ScrollViewport(Protocol):
    """What the controller needs from the scrollable transcript view."""

    def scroll_to_end(self, animate: bool) -> None: ...

    def set_new_content_indicator(self, visible: bool) -> None: ...


class ScrollController:
    """Decide when the transcript view should jump to its newest content.

    ``at_bottom`` is only ever recomputed from viewport metrics in
    :meth:`on_user_scroll`; content changes read the value cached from the
    previous scroll event, i.e. the state immediately before the change.
    """

    def __init__(
        self,
        viewport: ScrollViewport,
        tolerance: float = AT_BOTTOM_TOLERANCE,
    ) -> None:
        self.viewport = viewport
        self.tolerance = tolerance
        self.at_bottom = True
        self.has_unseen_content = False

    def on_content_change(self) -> None:
        """React to the transcript growing or shrinking."""
        if self.at_bottom:
            self.viewport.scroll_to_end(animate=False)
            return
        self.has_unseen_content = True
        self.viewport.set_new_content_indicator(True)

    def on_user_scroll(self, metrics: ViewportMetrics) -> bool:
        """Recompute ``at_bottom`` from the viewport and return it."""
        was_at_bottom = self.at_bottom
        self.at_bottom = metrics.distance_from_bottom() < self.tolerance
        if self.at_bottom:
            self.has_unseen_content = False
        if self.at_bottom != was_at_bottom:
            LOGGER.debug(
                "scroll.at_bottom.changed",
                extra={"event": "scroll.at_bottom.changed", "at_bottom": self.at_bottom},
            )
            self.viewport.set_new_content_indicator(not self.at_bottom)
        return self.at_bottom

    def scroll_to_bottom_manual(self) -> None:
        """Jump to the newest content with animation, regardless of ``at_bottom``."""
        self.viewport.scroll_to_end(animate=True)
