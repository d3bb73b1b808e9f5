"""Spin queue: one animation at a time, strictly in arrival order."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Mapping, Optional, Union

from clubreel.feed.win_feed import WinFeed
from clubreel.reel.catalog import Prize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecentWinsUpdate:
    """Server-bundled recent wins; replaces the feed when the spin lands."""
    recent_wins: tuple[Mapping[str, Any], ...]


@dataclass(frozen=True)
class SingleWin:
    """One synthesized win; prepended to the feed when the spin lands."""
    display_name: str
    prize_name: str


PendingWin = Union[RecentWinsUpdate, SingleWin]


@dataclass
class SpinJob:
    """One player's spin waiting to be shown."""
    prize: Prize
    pending_win: Optional[PendingWin] = None
    spinner_name: Optional[str] = None
    meta: dict[str, Any] = field(default_factory=dict)


def apply_pending_win(feed: WinFeed, pending: Optional[PendingWin]) -> None:
    if isinstance(pending, RecentWinsUpdate):
        feed.replace(list(pending.recent_wins))
    elif isinstance(pending, SingleWin):
        feed.add(pending.display_name, pending.prize_name)


# Starts the animation for a prize; returns False if it could not start
SpinRunner = Callable[[Prize, Callable[[], None]], bool]


class SpinQueue:
    """Serializes spin jobs so that at most one animation runs at a time.

    Jobs are never reordered or coalesced: every queued spin is a real
    player action and is played out individually.
    """

    def __init__(
        self,
        runner: SpinRunner,
        feed: WinFeed,
        max_pending: Optional[int] = None,
        on_spinner_changed: Optional[Callable[[Optional[str]], None]] = None,
        on_job_started: Optional[Callable[[SpinJob], None]] = None,
        on_job_finished: Optional[Callable[[SpinJob], None]] = None,
        on_job_dropped: Optional[Callable[[SpinJob], None]] = None,
    ):
        self._runner = runner
        self._feed = feed
        self.max_pending = max_pending
        self._on_spinner_changed = on_spinner_changed
        self._on_job_started = on_job_started
        self._on_job_finished = on_job_finished
        self._on_job_dropped = on_job_dropped

        self._pending: Deque[SpinJob] = deque()
        self._active: Optional[SpinJob] = None

    @property
    def active(self) -> bool:
        return self._active is not None

    @property
    def active_job(self) -> Optional[SpinJob]:
        return self._active

    @property
    def pending(self) -> list[SpinJob]:
        return list(self._pending)

    def __len__(self) -> int:
        return len(self._pending)

    def enqueue(self, job: SpinJob) -> None:
        """Append a job and start it right away if nothing is playing."""
        if self.max_pending is not None and len(self._pending) >= self.max_pending:
            dropped = self._pending.popleft()
            logger.warning(
                f"Spin queue full ({self.max_pending}); dropping oldest spin for {dropped.prize.name}"
            )
            if self._on_job_dropped:
                self._on_job_dropped(dropped)
        self._pending.append(job)
        logger.debug(f"Spin queued: {job.prize.name} ({len(self._pending)} pending)")
        if not self.active:
            self.run_next()

    def run_next(self) -> bool:
        """Start the head job. Returns True if a spin started."""
        if self.active or not self._pending:
            return False

        job = self._pending.popleft()
        self._active = job
        if job.spinner_name and self._on_spinner_changed:
            self._on_spinner_changed(job.spinner_name)

        if not self._runner(job.prize, lambda: self._complete(job)):
            # Reel not ready (empty catalog or busy): keep the job at the head
            self._active = None
            self._pending.appendleft(job)
            if self._on_spinner_changed:
                self._on_spinner_changed(None)
            logger.debug(f"Spin for {job.prize.name} deferred, reel not ready")
            return False

        if self._on_job_started:
            self._on_job_started(job)
        return True

    def _complete(self, job: SpinJob) -> None:
        apply_pending_win(self._feed, job.pending_win)
        if self._on_spinner_changed:
            self._on_spinner_changed(None)
        self._active = None
        if self._on_job_finished:
            self._on_job_finished(job)
        self.run_next()

    def clear(self) -> None:
        """Drop pending jobs (used when the display is torn down)."""
        self._pending.clear()
