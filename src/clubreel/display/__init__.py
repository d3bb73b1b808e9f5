"""Display layer. The pygame window lives in ``clubreel.display.window``."""

from .headless import HeadlessRunner
from .images import PrizeImageCache
from .renderer import ReelRenderer

__all__ = ["HeadlessRunner", "PrizeImageCache", "ReelRenderer"]
