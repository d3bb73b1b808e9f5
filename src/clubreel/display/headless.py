"""Windowless runner: drives the reel at the configured frame rate.

Used on kiosks without a display server and in CI; progress is reported
through the log instead of pixels.
"""

import asyncio
import logging
from typing import Optional

from clubreel.animation.scheduler import FrameScheduler
from clubreel.core.events import Event, EventBus, EventType
from clubreel.reel.controller import ReelController

logger = logging.getLogger(__name__)

# Bus events worth an activity log line
LOGGED_EVENTS = {
    EventType.CATALOG_LOADED,
    EventType.CATALOG_FAILED,
    EventType.SPIN_STARTED,
    EventType.SPIN_COMPLETED,
    EventType.SPIN_DROPPED,
    EventType.CHANNEL_CONNECTED,
    EventType.CHANNEL_DISCONNECTED,
    EventType.CHANNEL_ERROR,
}


class HeadlessRunner:
    """Same loop as the window, minus pygame.

    Without a screen nobody can press retry, so a failed catalog load is
    retried every ``retry_every`` frames, at most ``max_retries`` times.
    """

    def __init__(
        self,
        controller: ReelController,
        scheduler: FrameScheduler,
        fps: int = 60,
        viewport_width: float = 1280,
        status_every: Optional[int] = None,
        event_bus: Optional[EventBus] = None,
        retry_every: Optional[int] = None,
        max_retries: int = 10,
    ):
        self.controller = controller
        self.scheduler = scheduler
        self.fps = max(1, fps)
        self.viewport_width = viewport_width
        # Log a status line every N frames (default: every 10 s)
        self.status_every = status_every or self.fps * 10
        # Catalog retry interval in frames (default: every 30 s)
        self.retry_every = retry_every or self.fps * 30
        self.max_retries = max_retries
        self.event_bus = event_bus or controller.event_bus
        self._running = False
        self._retry_task: Optional[asyncio.Task] = None
        self.retries = 0
        self.frame_count = 0
        self._unsubscribe = self.event_bus.subscribe_all(self._on_event)

    @property
    def running(self) -> bool:
        return self._running

    async def run(self, max_frames: Optional[int] = None) -> None:
        self.controller.set_viewport(self.viewport_width)
        self.controller.start()
        self._running = True
        logger.info(f"Headless runner started ({self.fps} fps)")

        try:
            while self._running:
                self.scheduler.pump()

                self.frame_count += 1
                if self.frame_count % self.status_every == 0:
                    self._log_status()
                if self.frame_count % self.retry_every == 0:
                    self._maybe_retry_catalog()
                if max_frames is not None and self.frame_count >= max_frames:
                    break

                await asyncio.sleep(1.0 / self.fps)
        finally:
            self._running = False
            if self._retry_task is not None and not self._retry_task.done():
                await self._retry_task
            self.controller.stop()
            logger.info("Headless runner stopped")

    def _maybe_retry_catalog(self) -> None:
        if self.controller.catalog.error is None:
            return
        if self._retry_task is not None and not self._retry_task.done():
            return
        if self.retries >= self.max_retries:
            return
        self.retries += 1
        logger.info(f"Retrying prize load ({self.retries}/{self.max_retries})")
        self._retry_task = asyncio.create_task(self.controller.reload_catalog())

    def _on_event(self, event: Event) -> None:
        if event.type not in LOGGED_EVENTS:
            return
        details = " ".join(f"{k}={v}" for k, v in event.data.items() if v is not None)
        logger.info(f"{event.type.name.lower()} {details}".rstrip())

    def _log_status(self) -> None:
        snap = self.controller.snapshot()
        logger.info(
            f"state={snap.state.name} position={snap.position:.1f} copies={snap.copies} "
            f"prizes={len(snap.prizes)} pending={snap.pending_spins} feed={len(snap.feed)}"
        )

    def stop(self) -> None:
        self._running = False
        self._unsubscribe()
