"""Reel controller: the single owner of the animated reel state.

Scroll position and copy count are written only from here, either by
idle drift (state IDLE) or by the active spin (state SPINNING). The
frame loop dispatches to exactly one of them per tick.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from clubreel.animation.easing import get_easing
from clubreel.animation.scheduler import FrameScheduler
from clubreel.core.events import Event, EventBus, EventType, spin_event
from clubreel.core.state import ReelState, StateMachine
from clubreel.feed.names import TEST_PLAYER_NAME
from clubreel.feed.overlay import ResultOverlay
from clubreel.feed.win_feed import WinEntry, WinFeed
from clubreel.reel.catalog import CatalogLoadError, Prize, PrizeCatalog
from clubreel.reel.idle import IdleDrift
from clubreel.reel.queue import SpinJob, SpinQueue
from clubreel.reel.spin import SpinAnimation, plan_spin
from clubreel.reel.strip import ReelLayout, ReelStrip
from clubreel.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReelSnapshot:
    """Read-only view of the reel for the display layer."""

    position: float
    copies: int
    state: ReelState
    prizes: tuple[Prize, ...]
    selected_prize: Optional[Prize]
    feed: tuple[WinEntry, ...]
    spinner_name: Optional[str]
    catalog_error: Optional[CatalogLoadError]
    pending_spins: int

    @property
    def is_spinning(self) -> bool:
        return self.state is ReelState.SPINNING


class ReelController:
    """Owns the reel for one mounted display.

    Lifecycle: ``start()`` when the display is shown, ``stop()`` when it
    is torn down. Everything else is driven by frame callbacks and by
    ``enqueue`` from the live channel.
    """

    def __init__(
        self,
        settings: Settings,
        scheduler: FrameScheduler,
        catalog: Optional[PrizeCatalog] = None,
        feed: Optional[WinFeed] = None,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.scheduler = scheduler
        self.catalog = catalog or PrizeCatalog()
        self.feed = feed or WinFeed(capacity=settings.feed.capacity, language=settings.language)
        self.event_bus = event_bus or EventBus()
        self._rng = rng or random.Random()

        reel = settings.reel
        self.layout = ReelLayout(card_width=reel.card_width, card_gap=reel.card_gap,
                                 padding_left=reel.padding_left)
        self.strip = ReelStrip(
            self.layout,
            min_copies=reel.min_copies,
            replenish_threshold=reel.replenish_threshold,
            replenish_count=reel.replenish_count,
        )
        self.idle = IdleDrift(self.strip, speed=reel.idle_speed, max_frame_step=reel.max_frame_step)
        self.state_machine = StateMachine()
        self.overlay = ResultOverlay(timeout_ms=settings.feed.overlay_timeout_ms)
        self._easing = get_easing(settings.spin.easing, decay_rate=settings.spin.decay_rate)

        self.queue = SpinQueue(
            runner=self.start_spin,
            feed=self.feed,
            max_pending=settings.feed.max_pending_spins,
            on_spinner_changed=self._set_spinner_name,
            on_job_started=self._on_job_started,
            on_job_finished=self._on_job_finished,
            on_job_dropped=self._on_job_dropped,
        )

        self._spin: Optional[SpinAnimation] = None
        self._deferred_catalog: Optional[list[Prize]] = None
        self._frame_handle: Optional[int] = None
        self._running = False
        self.spinner_name: Optional[str] = None
        self.unresolved_count = 0

        self.catalog.add_listener(self._on_catalog_replaced)
        self.feed.add_listener(self._on_feed_changed)
        self.strip.set_content_length(len(self.catalog))

    # -- lifecycle -------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> ReelState:
        return self.state_machine.state

    @property
    def is_spinning(self) -> bool:
        return self.state_machine.is_spinning

    def start(self) -> None:
        """Begin driving frames (display mounted)."""
        if self._running:
            return
        self._running = True
        self.idle.resume(self.scheduler.now())
        self._frame_handle = self.scheduler.request_frame(self._on_frame)
        logger.info("Reel controller started")

    def stop(self) -> None:
        """Cancel the pending frame callback (display torn down)."""
        if not self._running:
            return
        self._running = False
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        self.idle.pause()
        logger.info("Reel controller stopped")

    def set_viewport(self, width: float) -> None:
        """Measured container width; frames are skipped until it is known."""
        self.strip.container_width = float(width) if width > 0 else None
        # A job may have arrived before the first measurement
        if self.strip.container_width is not None and not self.is_spinning:
            self.queue.run_next()

    # -- catalog ---------------------------------------------------------

    def apply_catalog(self, prizes: Sequence[Prize]) -> None:
        """Install a new prize list, deferring it if a spin is animating."""
        if self.is_spinning:
            self._deferred_catalog = list(prizes)
            logger.debug("Catalog update deferred until the current spin lands")
            return
        self.catalog.replace(prizes)

    def _on_catalog_replaced(self, prizes: list[Prize]) -> None:
        self.strip.set_content_length(len(prizes))
        self.event_bus.emit(Event(EventType.CATALOG_LOADED, data={"count": len(prizes)}, source="reel"))
        # A job may be waiting for a non-empty catalog
        if not self.is_spinning:
            self.queue.run_next()

    async def reload_catalog(self) -> None:
        """Retry the last prize load (retry action of the error state)."""
        await self.catalog.retry()
        self.report_catalog_error()

    def report_catalog_error(self) -> None:
        error = self.catalog.error
        if error is not None:
            self.event_bus.emit(Event(EventType.CATALOG_FAILED,
                                      data={"message": error.message, "network": error.network},
                                      source="reel"))

    # -- spins -----------------------------------------------------------

    def enqueue(self, job: SpinJob) -> None:
        """Queue a spin result from the live channel."""
        self.event_bus.emit(spin_event(EventType.SPIN_QUEUED, job.prize.id, job.prize.name,
                                       job.spinner_name, pending=len(self.queue) + 1))
        self.queue.enqueue(job)

    def start_spin(self, prize: Prize, on_complete: Optional[Callable[[], None]] = None) -> bool:
        """Animate the reel onto ``prize``.

        No-op (returns False) if a spin is already running, the catalog is
        empty or the viewport has not been measured yet.
        """
        content_length = len(self.catalog)
        container = self.strip.container_width
        if self.is_spinning or content_length == 0 or container is None:
            return False
        if not self.state_machine.transition(ReelState.SPINNING):
            return False

        self.overlay.dismiss()

        final_index = self.catalog.find_index(prize)
        if final_index is None:
            self.unresolved_count += 1
            final_index = self.catalog.resolve_index(prize)

        plan = plan_spin(
            self.layout,
            container_width=container,
            content_length=content_length,
            final_index=final_index,
            start_position=self.strip.position,
            extra_rotations=self.settings.spin.extra_rotations,
        )
        self.strip.ensure_covers(plan.end_position)

        self._spin = SpinAnimation(
            plan=plan,
            prize=self.catalog.prizes[final_index],
            started_at=self.scheduler.now(),
            duration_ms=self.settings.spin.duration_ms,
            easing=self._easing,
            on_complete=on_complete,
        )
        logger.info(
            f"Spin to {prize.name or prize.id} (index {final_index}): "
            f"{plan.start_position:.1f} -> {plan.end_position:.1f}"
        )
        return True

    def _step_spin(self, now: float) -> None:
        spin = self._spin
        if spin is None:
            return
        self.strip.position = spin.position_at(now)
        if spin.progress(now) >= 1:
            self._finish_spin(spin, now)

    def _finish_spin(self, spin: SpinAnimation, now: float) -> None:
        self.strip.position = spin.plan.end_position
        self._spin = None
        self.state_machine.transition(ReelState.IDLE)
        self.idle.resume(now)
        self.overlay.show(spin.prize, now)
        self.event_bus.emit(Event(EventType.OVERLAY_SHOWN, data={"prize_id": spin.prize.id}, source="reel"))

        if self._deferred_catalog is not None:
            prizes, self._deferred_catalog = self._deferred_catalog, None
            self.catalog.replace(prizes)

        if spin.on_complete:
            spin.on_complete()

    @property
    def active_spin(self) -> Optional[SpinAnimation]:
        return self._spin

    def _set_spinner_name(self, name: Optional[str]) -> None:
        self.spinner_name = name

    def _on_job_started(self, job: SpinJob) -> None:
        self.event_bus.emit(spin_event(EventType.SPIN_STARTED, job.prize.id, job.prize.name, job.spinner_name))

    def _on_job_finished(self, job: SpinJob) -> None:
        self.event_bus.emit(spin_event(EventType.SPIN_COMPLETED, job.prize.id, job.prize.name, job.spinner_name))

    def _on_job_dropped(self, job: SpinJob) -> None:
        self.event_bus.emit(spin_event(EventType.SPIN_DROPPED, job.prize.id, job.prize.name, job.spinner_name))

    def _on_feed_changed(self, entries: list[WinEntry]) -> None:
        self.event_bus.emit(Event(EventType.FEED_UPDATED, data={"count": len(entries)}, source="feed"))

    # -- overlay ---------------------------------------------------------

    def dismiss_overlay(self) -> bool:
        if self.overlay.dismiss():
            self.event_bus.emit(Event(EventType.OVERLAY_DISMISSED, source="reel"))
            return True
        return False

    # -- frame loop ------------------------------------------------------

    def _on_frame(self, now: float) -> None:
        self._frame_handle = None
        if not self._running:
            return

        if self.state_machine.state is ReelState.SPINNING:
            self._step_spin(now)
        else:
            self.idle.tick(now)
            if self.overlay.update(now):
                self.event_bus.emit(Event(EventType.OVERLAY_DISMISSED, source="reel"))

        if self._running:
            self._frame_handle = self.scheduler.request_frame(self._on_frame)

    # -- debug hooks -----------------------------------------------------

    def trigger_test_spin(self) -> bool:
        """Queue a spin on a random prize (debug builds only)."""
        if not self.settings.debug or len(self.catalog) == 0:
            return False
        prize = self._rng.choice(self.catalog.prizes)
        name = TEST_PLAYER_NAME.get(self.settings.language, TEST_PLAYER_NAME["en"])
        self.enqueue(SpinJob(prize=prize, spinner_name=name))
        return True

    def show_test_win(self) -> bool:
        """Show the result overlay for the first prize (debug builds only)."""
        if not self.settings.debug or self.is_spinning or len(self.catalog) == 0:
            return False
        self.overlay.show(self.catalog.prizes[0], self.scheduler.now())
        return True

    # -- snapshot --------------------------------------------------------

    def snapshot(self) -> ReelSnapshot:
        return ReelSnapshot(
            position=self.strip.position,
            copies=self.strip.copies,
            state=self.state_machine.state,
            prizes=tuple(self.catalog.prizes),
            selected_prize=None if self.is_spinning else self.overlay.prize,
            feed=tuple(self.feed.entries),
            spinner_name=self.spinner_name,
            catalog_error=self.catalog.error,
            pending_spins=len(self.queue),
        )
