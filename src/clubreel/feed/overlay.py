"""Timed "you won" overlay."""

import logging
from typing import Optional

from clubreel.reel.catalog import Prize

logger = logging.getLogger(__name__)


class ResultOverlay:
    """Shows the landed prize and hides it after a timeout.

    The timer is evaluated on frame updates; a spin starting clears the
    overlay, so it is never visible while the reel is moving.
    """

    def __init__(self, timeout_ms: float = 7000.0):
        self.timeout_ms = timeout_ms
        self._prize: Optional[Prize] = None
        self._shown_at: Optional[float] = None

    @property
    def prize(self) -> Optional[Prize]:
        return self._prize

    @property
    def visible(self) -> bool:
        return self._prize is not None

    def show(self, prize: Prize, now: float) -> None:
        self._prize = prize
        self._shown_at = now
        logger.debug(f"Overlay shown for {prize.name}")

    def dismiss(self) -> bool:
        """Hide the overlay. Returns True if it was visible."""
        if self._prize is None:
            return False
        self._prize = None
        self._shown_at = None
        return True

    def update(self, now: float) -> bool:
        """Auto-dismiss once the timeout elapsed. Returns True if it just closed."""
        if self._prize is None or self._shown_at is None:
            return False
        if now - self._shown_at >= self.timeout_ms:
            return self.dismiss()
        return False
