"""Spin resolver: lands a server-declared winner under the pointer.

The plan is computed once, up front, from the current position so the
reel never jumps; the animation then only interpolates toward it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from clubreel.animation.easing import EasingFunc, interpolate
from clubreel.reel.catalog import Prize
from clubreel.reel.strip import ReelLayout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpinPlan:
    """Precomputed trajectory of one spin.

    Attributes:
        final_index: Position of the winner in the catalog snapshot
        start_position: Scroll position the spin starts from
        base_position: Position that puts the winner's first copy under the pointer
        target_position: Nearest repetition of base at least one lap behind start
        end_position: target_position minus the extra laps
    """
    final_index: int
    start_position: float
    base_position: float
    target_position: float
    end_position: float
    one_set_width: float

    @property
    def travel(self) -> float:
        return self.end_position - self.start_position


def plan_spin(
    layout: ReelLayout,
    container_width: float,
    content_length: int,
    final_index: int,
    start_position: float,
    extra_rotations: int,
) -> SpinPlan:
    """Compute where the reel must stop so card ``final_index`` is centered.

    The landing position is the repetition of the winner that lies at
    least one full lap to the left of ``start_position``, pushed further
    by ``extra_rotations`` laps.
    """
    if content_length <= 0:
        raise ValueError("Cannot plan a spin over an empty reel")

    one_set_width = layout.one_set_width(content_length)
    content_start = layout.center_offset(container_width) - layout.padding_left
    base = content_start - final_index * layout.item_width

    k = math.floor((start_position - base) / one_set_width) - 1
    target = base + k * one_set_width
    end = target - extra_rotations * one_set_width

    return SpinPlan(
        final_index=final_index,
        start_position=start_position,
        base_position=base,
        target_position=target,
        end_position=end,
        one_set_width=one_set_width,
    )


class SpinAnimation:
    """Eased, time-bounded interpolation along a SpinPlan.

    Progress comes from the wall-clock start timestamp, never from summed
    frame deltas, so the landing time does not drift over a long spin.
    """

    def __init__(
        self,
        plan: SpinPlan,
        prize: Prize,
        started_at: float,
        duration_ms: float,
        easing: EasingFunc,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self.plan = plan
        self.prize = prize
        self.started_at = started_at
        self.duration_ms = duration_ms
        self._easing = easing
        self.on_complete = on_complete
        self.finished = False

    def progress(self, now: float) -> float:
        return min(max(now - self.started_at, 0.0) / self.duration_ms, 1.0)

    def position_at(self, now: float) -> float:
        """Eased position; exactly end_position once progress reaches 1."""
        progress = self.progress(now)
        if progress >= 1:
            return self.plan.end_position
        return interpolate(self.plan.start_position, self.plan.end_position, progress, self._easing)
