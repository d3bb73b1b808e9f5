"""Idle drift: the slow endless leftward scroll shown between spins."""

import logging
from typing import Optional

from clubreel.reel.strip import ReelStrip

logger = logging.getLogger(__name__)

FRAME_MS = 16.0


class IdleDrift:
    """Advances the strip position once per frame while the reel is idle.

    Time is measured between consecutive ticks and clamped so a
    suspended tab or a stalled loop does not produce a huge jump.
    """

    def __init__(self, strip: ReelStrip, speed: float = 15.5, max_frame_step: float = 50.0):
        self._strip = strip
        self.speed = speed
        self.max_frame_step = max_frame_step
        self._last_time: Optional[float] = None

    def resume(self, now: float) -> None:
        """Restart timing, e.g. right after a spin handed the reel back."""
        self._last_time = now

    def pause(self) -> None:
        self._last_time = None

    def tick(self, now: float) -> bool:
        """Advance one frame.

        Returns:
            False if the tick was skipped (no content or no viewport yet)
        """
        strip = self._strip
        set_width = strip.one_set_width
        if set_width <= 0 or strip.container_width is None:
            self._last_time = now
            return False

        last = self._last_time if self._last_time is not None else now
        self._last_time = now
        dt = min(max(now - last, 0.0) / FRAME_MS, self.max_frame_step)

        strip.position -= self.speed * (dt / FRAME_MS)
        # Content is periodic with set_width, so folding is invisible
        while strip.position < -set_width:
            strip.position += set_width

        strip.replenish()
        return True
