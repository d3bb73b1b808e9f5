"""Frame scheduling for the reel.

Mirrors animation-frame semantics: callbacks requested during a pump run
on the next pump, and every callback receives the clock value sampled
when the pump started. The runner (window or headless loop) calls
``pump()`` once per painted frame.
"""

from typing import Callable, Dict
import itertools
import logging
import time

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler:
    """Per-frame callback scheduler backed by the monotonic clock."""

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    def now(self) -> float:
        """Current time in milliseconds."""
        return time.monotonic() * 1000.0

    def request_frame(self, callback: FrameCallback) -> int:
        """Run callback on the next pump. Returns a cancel handle."""
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def pump(self) -> int:
        """Run every callback requested before this call.

        Returns:
            Number of callbacks run
        """
        if not self._pending:
            return 0
        batch = self._pending
        self._pending = {}
        frame_time = self.now()
        for callback in batch.values():
            callback(frame_time)
        return len(batch)


class ManualFrameScheduler(FrameScheduler):
    """Deterministic scheduler for tests and demos.

    The clock only moves when ``advance`` or ``run_frames`` is called.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        super().__init__()
        self._now = start_ms

    def now(self) -> float:
        return self._now

    def advance(self, ms: float) -> None:
        self._now += ms

    def run_frames(self, count: int, step_ms: float = 16.0) -> int:
        """Advance the clock and pump ``count`` times."""
        ran = 0
        for _ in range(count):
            self.advance(step_ms)
            ran += self.pump()
        return ran

    def run_until(self, predicate: Callable[[], bool], step_ms: float = 16.0,
                  max_frames: int = 100_000) -> int:
        """Pump frames until predicate() is true. Returns frames pumped."""
        for frame in range(max_frames):
            if predicate():
                return frame
            self.advance(step_ms)
            self.pump()
        raise RuntimeError(f"Condition not reached after {max_frames} frames")
