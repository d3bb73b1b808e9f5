"""Reel strip geometry and the repeated-copy buffer.

The rendered strip is ``copies`` literal concatenations of the catalog.
Screen x of card ``i`` (counting across copies) is::

    padding_left + position + i * item_width
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReelLayout:
    """Fixed card geometry."""

    card_width: float = 400.0
    card_gap: float = 24.0
    padding_left: float = 20.0

    @property
    def item_width(self) -> float:
        return self.card_width + self.card_gap

    def center_offset(self, container_width: float) -> float:
        """Left edge a card must have to sit centered under the pointer."""
        return container_width / 2 - self.item_width / 2

    def one_set_width(self, content_length: int) -> float:
        return content_length * self.item_width

    def card_x(self, position: float, index: int) -> float:
        """Screen x of the card at strip index ``index``."""
        return self.padding_left + position + index * self.item_width


@dataclass(frozen=True)
class VisibleCard:
    strip_index: int
    content_index: int
    x: float


class ReelStrip:
    """Scroll position and copy count for the current content length.

    The controller is the only writer; idle drift and the spin resolver
    mutate it through the controller while holding the reel state.
    """

    def __init__(
        self,
        layout: ReelLayout,
        min_copies: int = 50,
        replenish_threshold: int = 25,
        replenish_count: int = 25,
    ):
        self.layout = layout
        self.min_copies = min_copies
        self.replenish_threshold = replenish_threshold
        self.replenish_count = replenish_count

        self.position: float = 0.0
        self.copies: int = min_copies
        self.content_length: int = 0
        self.container_width: Optional[float] = None

    @property
    def one_set_width(self) -> float:
        return self.layout.one_set_width(self.content_length)

    @property
    def rendered_width(self) -> float:
        return self.copies * self.one_set_width

    def set_content_length(self, length: int) -> None:
        """New catalog size; a changed size resets the copy buffer."""
        if length != self.content_length:
            self.content_length = length
            self.reset_copies()

    def reset_copies(self) -> None:
        self.copies = self.min_copies

    def visible_right_edge(self) -> float:
        """Strip-content coordinate of the viewport's right edge."""
        return (self.container_width or 0.0) - self.position

    def replenish(self) -> bool:
        """Grow the buffer when the viewport nears the last rendered copies.

        Returns:
            True if copies were added
        """
        set_width = self.one_set_width
        if set_width <= 0:
            return False
        grew = False
        while self.visible_right_edge() >= (self.copies - self.replenish_threshold) * set_width:
            self.copies += self.replenish_count
            grew = True
        if grew:
            logger.debug(f"Reel buffer grown to {self.copies} copies")
        return grew

    def ensure_covers(self, position: float) -> None:
        """Make sure the viewport at ``position`` is fully rendered."""
        set_width = self.one_set_width
        if set_width <= 0:
            return
        needed = (self.container_width or 0.0) - position
        while needed > self.copies * set_width:
            self.copies += self.replenish_count

    def visible_cards(self) -> Iterator[VisibleCard]:
        """Cards that intersect the viewport, left to right."""
        n = self.content_length
        if n == 0 or self.container_width is None:
            return
        item = self.layout.item_width
        first = max(0, math.floor((-self.position - self.layout.padding_left) / item))
        last = min(self.copies * n - 1,
                   math.ceil((self.container_width - self.position - self.layout.padding_left) / item))
        for i in range(first, last + 1):
            yield VisibleCard(strip_index=i, content_index=i % n, x=self.layout.card_x(self.position, i))
