"""Reel content, geometry and animation."""

from .catalog import Prize, PrizeCatalog, PrizeTier
from .strip import ReelLayout, ReelStrip

__all__ = ["Prize", "PrizeCatalog", "PrizeTier", "ReelLayout", "ReelStrip"]
