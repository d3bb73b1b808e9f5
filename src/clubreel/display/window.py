"""
Reel display window using pygame.

Hosts the reel renderer, pumps the frame scheduler once per loop
iteration and draws text on top of the numpy frame.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional

import pygame

from clubreel.animation.scheduler import FrameScheduler
from clubreel.core.events import Event, EventBus, EventType
from clubreel.display.renderer import Label, ReelRenderer
from clubreel.feed.names import CHANNEL_LIVE, CHANNEL_OFFLINE, RETRY_HINT
from clubreel.reel.controller import ReelController

logger = logging.getLogger(__name__)

FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
]
SYSTEM_FONTS = ["DejaVu Sans", "Noto Sans", "Arial Unicode MS", "Helvetica"]
FONT_SIZES = {"small": 16, "normal": 24, "large": 40}


@dataclass
class WindowConfig:
    """Display window configuration."""
    width: int = 1280
    height: int = 720
    title: str = "Club Reel"
    fullscreen: bool = False
    fps: int = 60
    debug: bool = False


class DisplayWindow:
    """
    Full-screen reel display.

    Keyboard Mapping:
        ESC: Dismiss the result overlay, or exit when none is shown
        F: Toggle fullscreen
        R: Retry the prize load after a failure
        SPACE: Test spin (debug only)
        W: Test win overlay (debug only)
    Mouse click dismisses the result overlay, or retries a failed prize load.
    """

    def __init__(
        self,
        controller: ReelController,
        scheduler: FrameScheduler,
        renderer: ReelRenderer,
        config: WindowConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.controller = controller
        self.scheduler = scheduler
        self.renderer = renderer
        self.config = config or WindowConfig()
        self.event_bus = event_bus or controller.event_bus

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._surface: pygame.Surface | None = None
        self._running = False
        self._frame_count = 0
        self._fonts: dict[str, pygame.font.Font] = {}
        self._windowed_size = (self.config.width, self.config.height)
        self._retry_task: Optional[asyncio.Task] = None
        # None until the live channel reports in
        self.channel_live: Optional[bool] = None
        for event_type in (EventType.CHANNEL_CONNECTED, EventType.CHANNEL_DISCONNECTED, EventType.CHANNEL_ERROR):
            self.event_bus.subscribe(event_type, self._on_channel_event)

    @property
    def running(self) -> bool:
        return self._running

    def _init_pygame(self) -> None:
        """Initialize pygame and create the window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._set_mode(self.config.fullscreen)
        self._clock = pygame.time.Clock()
        pygame.font.init()
        self._load_fonts()
        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _load_fonts(self) -> None:
        # Player names and prizes may be Cyrillic
        for font_path in FONT_PATHS:
            if not os.path.exists(font_path):
                continue
            try:
                fonts = {k: pygame.font.Font(font_path, size) for k, size in FONT_SIZES.items()}
                fonts["normal"].render("ТЕСТ", True, (255, 255, 255))
            except (pygame.error, OSError) as e:
                logger.debug(f"Font {font_path} failed: {e}")
                continue
            self._fonts = fonts
            logger.info(f"Using font: {font_path}")
            return

        for font_name in SYSTEM_FONTS:
            if pygame.font.match_font(font_name):
                self._fonts = {k: pygame.font.SysFont(font_name, size) for k, size in FONT_SIZES.items()}
                logger.info(f"Using system font: {font_name}")
                return

        self._fonts = {k: pygame.font.SysFont(None, size) for k, size in FONT_SIZES.items()}
        logger.warning("No Cyrillic font found, using default")

    def _set_mode(self, fullscreen: bool) -> None:
        if fullscreen:
            info = pygame.display.Info()
            size = (info.current_w, info.current_h)
            flags = pygame.FULLSCREEN | pygame.DOUBLEBUF
        else:
            size = self._windowed_size
            flags = pygame.DOUBLEBUF
        self._screen = pygame.display.set_mode(size, flags)
        self.config.fullscreen = fullscreen
        self.config.width, self.config.height = size
        self.renderer.resize(*size)
        self._surface = pygame.Surface(size)
        # The reel spans the full window width
        self.controller.set_viewport(size[0])

    def _toggle_fullscreen(self) -> None:
        self._set_mode(not self.config.fullscreen)
        logger.info(f"Fullscreen: {self.config.fullscreen}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if self.controller.catalog.error is not None:
                    self._request_catalog_retry()
                else:
                    self.controller.dismiss_overlay()

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        key = event.key

        if key == pygame.K_ESCAPE:
            if not self.controller.dismiss_overlay():
                self._running = False
        elif key == pygame.K_f:
            self._toggle_fullscreen()
        elif key == pygame.K_r:
            self._request_catalog_retry()
        elif key == pygame.K_SPACE and self.config.debug:
            self.controller.trigger_test_spin()
        elif key == pygame.K_w and self.config.debug:
            self.controller.show_test_win()

    def _on_channel_event(self, event: Event) -> None:
        self.channel_live = event.type == EventType.CHANNEL_CONNECTED

    def _request_catalog_retry(self) -> bool:
        """Start a background prize reload unless one is already running."""
        if self.controller.catalog.error is None:
            return False
        if self._retry_task is not None and not self._retry_task.done():
            return False
        logger.info("Retrying prize load")
        self._retry_task = asyncio.create_task(self.controller.reload_catalog())
        return True

    def status_labels(self) -> list[Label]:
        """Channel status and the retry hint, drawn over the reel."""
        language = self.renderer.language
        labels = []
        if self.channel_live is not None:
            strings = CHANNEL_LIVE if self.channel_live else CHANNEL_OFFLINE
            color = (80, 220, 120) if self.channel_live else (230, 90, 90)
            labels.append(Label(strings.get(language, strings["en"]), 24, 24,
                                size="small", color=color, centered=False))
        if self.controller.catalog.error is not None:
            hint = RETRY_HINT.get(language, RETRY_HINT["en"])
            labels.append(Label(hint, self.config.width // 2, self.config.height // 2 + 40, size="small"))
        return labels

    def _render(self) -> None:
        if not self._screen or not self._surface:
            return

        frame = self.renderer.render(self.controller.strip, self.controller.snapshot())
        # surfarray expects (width, height, 3)
        pygame.surfarray.blit_array(self._surface, frame.buffer.swapaxes(0, 1))
        self._screen.blit(self._surface, (0, 0))

        for label in frame.labels + self.status_labels():
            self._draw_label(label)

        pygame.display.flip()

    def _draw_label(self, label: Label) -> None:
        font = self._fonts.get(label.size) or self._fonts.get("normal")
        if font is None or not label.text:
            return
        text = font.render(label.text, True, label.color)
        rect = text.get_rect()
        if label.centered:
            rect.center = (label.x, label.y)
        else:
            rect.midleft = (label.x, label.y)
        self._screen.blit(text, rect)

    async def run(self) -> None:
        """Main display loop."""
        self._init_pygame()
        self._running = True
        self.controller.start()

        logger.info("Display started")

        try:
            while self._running:
                self._handle_events()

                # Reel frame callbacks
                self.scheduler.pump()

                self._render()

                if self._clock:
                    self._clock.tick(self.config.fps)
                self._frame_count += 1

                # Yield to the live channel and image fetches
                await asyncio.sleep(0)
        finally:
            self.controller.stop()
            self._cleanup()

    def _cleanup(self) -> None:
        pygame.quit()
        logger.info("Display stopped")

    def stop(self) -> None:
        self._running = False
