"""Animation module for the reel display."""

from clubreel.animation.easing import Easing, get_easing, interpolate
from clubreel.animation.scheduler import FrameScheduler, ManualFrameScheduler

__all__ = [
    # Easing
    "Easing",
    "get_easing",
    "interpolate",
    # Scheduling
    "FrameScheduler",
    "ManualFrameScheduler",
]
