"""Win feed, player names and the result overlay."""

from .names import PlayerRoster, mask_phone, random_masked_phone, win_display_name, win_text
from .overlay import ResultOverlay
from .win_feed import WinEntry, WinFeed

__all__ = [
    "PlayerRoster",
    "mask_phone",
    "random_masked_phone",
    "win_display_name",
    "win_text",
    "ResultOverlay",
    "WinEntry",
    "WinFeed",
]
