"""Easing functions for the reel spin.

All functions take a normalized time t (0.0 to 1.0) and return a
normalized value. Only monotonic ease-out curves without overshoot are
registered: the reel must never move backward while decelerating.
"""

from enum import Enum, auto
from functools import partial
from typing import Callable
import math


class Easing(Enum):
    """Available easing function types."""

    LINEAR = auto()
    EASE_OUT_QUAD = auto()
    EASE_OUT_CUBIC = auto()
    EASE_OUT_QUART = auto()
    EASE_OUT_QUINT = auto()
    EASE_OUT_SINE = auto()
    EASE_OUT_CIRC = auto()
    EASE_OUT_EXPO = auto()
    # Normalized 2^(-k t) decay, k configurable
    EASE_OUT_EXPO_DECAY = auto()


EasingFunc = Callable[[float], float]


def linear(t: float) -> float:
    """Linear interpolation (no easing)."""
    return t


def ease_out_quad(t: float) -> float:
    """Decelerate to zero velocity."""
    return 1 - (1 - t) * (1 - t)


def ease_out_cubic(t: float) -> float:
    """Decelerate to zero velocity (cubic)."""
    return 1 - pow(1 - t, 3)


def ease_out_quart(t: float) -> float:
    """Decelerate to zero velocity (quartic)."""
    return 1 - pow(1 - t, 4)


def ease_out_quint(t: float) -> float:
    """Decelerate to zero velocity (quintic)."""
    return 1 - pow(1 - t, 5)


def ease_out_sine(t: float) -> float:
    """Decelerate using sine curve."""
    return math.sin((t * math.pi) / 2)


def ease_out_circ(t: float) -> float:
    """Decelerate along circular curve."""
    return math.sqrt(1 - pow(t - 1, 2))


def ease_out_expo(t: float) -> float:
    """Decelerate exponentially."""
    return 1 if t == 1 else 1 - pow(2, -10 * t)


def ease_out_expo_decay(t: float, k: float = 8.0) -> float:
    """Exponential decay normalized to land exactly on 1.0.

    The raw curve 1 - 2^(-k t) stops short of 1 at t = 1; dividing by
    its value at t = 1 removes the final snap.
    """
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    return (1 - pow(2, -k * t)) / (1 - pow(2, -k))


_EASING_FUNCTIONS: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,
    Easing.EASE_OUT_QUAD: ease_out_quad,
    Easing.EASE_OUT_CUBIC: ease_out_cubic,
    Easing.EASE_OUT_QUART: ease_out_quart,
    Easing.EASE_OUT_QUINT: ease_out_quint,
    Easing.EASE_OUT_SINE: ease_out_sine,
    Easing.EASE_OUT_CIRC: ease_out_circ,
    Easing.EASE_OUT_EXPO: ease_out_expo,
    Easing.EASE_OUT_EXPO_DECAY: ease_out_expo_decay,
}

_EASING_BY_NAME: dict[str, Easing] = {e.name.lower(): e for e in Easing}


def get_easing(easing: Easing | str, decay_rate: float = 8.0) -> EasingFunc:
    """Get an easing function by enum or name.

    Args:
        easing: Easing enum value or string name (e.g., "ease_out_cubic")
        decay_rate: k for EASE_OUT_EXPO_DECAY, ignored otherwise

    Returns:
        The easing function

    Raises:
        ValueError: If easing name is not recognized
    """
    if isinstance(easing, str):
        easing_enum = _EASING_BY_NAME.get(easing.lower())
        if easing_enum is None:
            raise ValueError(f"Unknown easing function: {easing}")
        easing = easing_enum

    func = _EASING_FUNCTIONS.get(easing)
    if func is None:
        raise ValueError(f"No function registered for: {easing}")

    if easing is Easing.EASE_OUT_EXPO_DECAY:
        return partial(ease_out_expo_decay, k=decay_rate)
    return func


def interpolate(start: float, end: float, t: float, easing: Easing | str | EasingFunc = Easing.LINEAR) -> float:
    """Interpolate between two values using an easing function.

    Args:
        start: Starting value
        end: Ending value
        t: Progress (clamped to 0.0 - 1.0)
        easing: Easing enum, name, or an already resolved function
    """
    easing_func = easing if callable(easing) else get_easing(easing)
    eased_t = easing_func(max(0.0, min(1.0, t)))
    return start + (end - start) * eased_t
