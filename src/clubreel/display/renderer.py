"""Reel renderer: draws the visible part of the strip into a frame buffer.

Text is not rasterized here; the renderer returns label positions and the
window draws them with its fonts.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from numpy.typing import NDArray

from clubreel.display.images import PrizeImageCache
from clubreel.display.primitives import (
    Color, clear, dim, draw_image, draw_rect, draw_triangle_down, new_buffer
)
from clubreel.feed.names import NOW_SPINNING, WINNING_PRIZE
from clubreel.reel.controller import ReelSnapshot
from clubreel.reel.strip import ReelStrip


@dataclass
class Palette:
    """Display colors."""
    page_bg: Color = (12, 10, 24)
    track_bg: Color = (24, 20, 44)
    card_bg: Color = (36, 32, 60)
    placeholder_bg: Color = (60, 52, 96)
    selected_border: Color = (255, 215, 0)
    pointer: Color = (255, 215, 0)
    text: Color = (235, 235, 245)


@dataclass
class Label:
    text: str
    x: int
    y: int
    size: str = "normal"
    color: Color = (235, 235, 245)
    centered: bool = True


@dataclass
class RenderedFrame:
    buffer: NDArray[np.uint8]
    labels: List[Label] = field(default_factory=list)
    overlay_visible: bool = False


class ReelRenderer:
    """Renders the reel track, cards and pointer."""

    def __init__(
        self,
        width: int,
        height: int,
        card_height: int = 300,
        palette: Optional[Palette] = None,
        images: Optional[PrizeImageCache] = None,
        language: str = "en",
    ):
        self.width = width
        self.height = height
        self.card_height = card_height
        self.palette = palette or Palette()
        self.images = images
        self.language = language
        self._buffer = new_buffer(width, height, self.palette.page_bg)

    @property
    def track_top(self) -> int:
        return (self.height - self.card_height) // 2

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._buffer = new_buffer(width, height, self.palette.page_bg)

    def render(self, strip: ReelStrip, snapshot: ReelSnapshot) -> RenderedFrame:
        buffer = self._buffer
        palette = self.palette
        clear(buffer, palette.page_bg)
        labels: List[Label] = []

        top = self.track_top
        draw_rect(buffer, 0, top - 20, self.width, self.card_height + 40, palette.track_bg)

        card_w = int(strip.layout.card_width)
        selected = snapshot.selected_prize
        prizes = snapshot.prizes
        for card in strip.visible_cards():
            prize = prizes[card.content_index]
            x = int(round(card.x))
            draw_rect(buffer, x, top, card_w, self.card_height, palette.card_bg)

            image = self.images.get(prize.image) if self.images else None
            if image is not None:
                ih, iw = image.shape[:2]
                draw_image(buffer, image, x + (card_w - iw) // 2, top + (self.card_height - ih) // 2)
            else:
                if self.images is not None:
                    self.images.request(prize.image)
                size = min(card_w, self.card_height) // 2
                draw_rect(buffer, x + (card_w - size) // 2, top + (self.card_height - size) // 2,
                          size, size, palette.placeholder_bg)
                labels.append(Label((prize.name[:1] or "?").upper(), x + card_w // 2,
                                    top + self.card_height // 2, size="large"))

            is_selected = selected is not None and selected.id == prize.id
            border = palette.selected_border if is_selected else prize.tier.color
            draw_rect(buffer, x, top, card_w, self.card_height, border,
                      filled=False, thickness=6 if is_selected else 3)
            labels.append(Label(prize.name, x + card_w // 2, top + self.card_height - 24, size="small"))

        # Pointer sits at the container center
        draw_triangle_down(buffer, self.width // 2, top - 36, 18, 30, palette.pointer)

        if snapshot.spinner_name:
            heading = NOW_SPINNING.get(self.language, NOW_SPINNING["en"])
            labels.append(Label(f"{heading}: {snapshot.spinner_name}", self.width // 2, top - 70))

        if snapshot.catalog_error is not None and not prizes:
            labels.append(Label(snapshot.catalog_error.message, self.width // 2, self.height // 2))

        for i, entry in enumerate(snapshot.feed):
            labels.append(Label(entry.text, 24, top + self.card_height + 50 + i * 22,
                                size="small", centered=False))

        overlay_visible = selected is not None and not snapshot.is_spinning
        if overlay_visible:
            dim(buffer, 0.35)
            box_w, box_h = min(640, self.width - 80), 360
            bx, by = (self.width - box_w) // 2, (self.height - box_h) // 2
            draw_rect(buffer, bx, by, box_w, box_h, palette.card_bg)
            draw_rect(buffer, bx, by, box_w, box_h, selected.tier.color, filled=False, thickness=4)
            image = self.images.get(selected.image) if self.images else None
            if image is not None:
                ih, iw = image.shape[:2]
                draw_image(buffer, image, bx + (box_w - iw) // 2, by + 70)
            heading = WINNING_PRIZE.get(self.language, WINNING_PRIZE["en"])
            labels.append(Label(heading, self.width // 2, by + 30, color=selected.tier.color))
            labels.append(Label(selected.name, self.width // 2, by + box_h - 60, size="large"))
            if selected.description:
                labels.append(Label(selected.description, self.width // 2, by + box_h - 24, size="small"))

        return RenderedFrame(buffer=buffer, labels=labels, overlay_visible=overlay_visible)
