"""Live push channel and event normalization."""

from .channel import LiveChannel
from .normalizer import normalize_spin_event

__all__ = ["LiveChannel", "normalize_spin_event"]
