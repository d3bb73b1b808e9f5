"""
Main entry point for the club reel display.

Loads the club's prizes and recent wins, subscribes to live spins and
runs the reel in a pygame window (or headless).
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from clubreel.animation.scheduler import FrameScheduler
from clubreel.api.client import ApiError, ClubApiClient
from clubreel.core.events import EventBus
from clubreel.feed.names import PlayerRoster
from clubreel.feed.win_feed import WinFeed
from clubreel.live.channel import LiveChannel
from clubreel.reel.catalog import PrizeCatalog
from clubreel.reel.controller import ReelController
from clubreel.settings import Settings

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )
    # Engine.IO logs every poll at INFO
    logging.getLogger("engineio").setLevel(logging.WARNING)
    logging.getLogger("socketio").setLevel(logging.WARNING)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="clubreel", description="Live loyalty roulette reel display")
    parser.add_argument("--club", dest="club_id", help="club id to display (overrides CLUBREEL_CLUB_ID)")
    parser.add_argument("--debug", action="store_true", default=None, help="debug logging and test keys")
    parser.add_argument("--headless", action="store_true", default=None, help="run without a window")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    return Settings(**overrides)


async def load_initial_state(
    api: ClubApiClient,
    catalog: PrizeCatalog,
    controller: ReelController,
    roster: PlayerRoster,
    feed: WinFeed,
    club_id: Optional[str],
) -> None:
    """Roster first so the seeded feed can resolve player names."""
    try:
        roster.update(await api.get_club_players())
        logger.info(f"Roster loaded: {len(roster)} players")
    except ApiError as e:
        logger.warning(f"Could not load club players: {e}")

    try:
        feed.replace(await api.get_recent_wins())
    except ApiError as e:
        logger.warning(f"Could not load recent wins: {e}")

    await catalog.load(club_id)
    controller.report_catalog_error()


async def run_display(settings: Settings) -> None:
    """Wire the components and run until the window closes."""
    from clubreel.display.headless import HeadlessRunner
    from clubreel.display.images import PrizeImageCache
    from clubreel.display.renderer import ReelRenderer

    event_bus = EventBus()
    scheduler = FrameScheduler()
    api = ClubApiClient(settings.api.base_url, token=settings.api.token, timeout=settings.api.timeout)
    catalog = PrizeCatalog(source=api)
    roster = PlayerRoster()
    feed = WinFeed(capacity=settings.feed.capacity, language=settings.language, roster=roster)
    controller = ReelController(settings, scheduler, catalog=catalog, feed=feed, event_bus=event_bus)
    channel = LiveChannel(
        settings.api.resolved_socket_url,
        on_job=controller.enqueue,
        roster=roster,
        event_bus=event_bus,
        language=settings.language,
    )
    card_w = int(settings.reel.card_width)
    images = PrizeImageCache(size=(card_w - 40, card_w - 40), timeout=settings.api.timeout)

    try:
        await load_initial_state(api, catalog, controller, roster, feed, settings.club_id)

        if settings.club_id:
            await channel.start(settings.club_id)
        else:
            logger.warning("No club id configured; live spins are disabled")

        if settings.headless:
            runner = HeadlessRunner(controller, scheduler, fps=settings.display.fps,
                                    viewport_width=settings.display.width)
            await runner.run()
        else:
            from clubreel.display.window import DisplayWindow, WindowConfig

            renderer = ReelRenderer(settings.display.width, settings.display.height,
                                    images=images, language=settings.language)
            config = WindowConfig(
                width=settings.display.width,
                height=settings.display.height,
                fullscreen=settings.display.fullscreen,
                fps=settings.display.fps,
                debug=settings.debug,
            )
            window = DisplayWindow(controller, scheduler, renderer, config=config, event_bus=event_bus)
            await window.run()
    finally:
        controller.stop()
        await channel.stop()
        await images.close()
        await api.close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    args = parse_args(argv)
    settings = build_settings(args)
    setup_logging(settings.debug)

    logger.info(f"Club reel starting (club={settings.club_id or 'default'})...")

    try:
        asyncio.run(run_display(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Club reel stopped")


if __name__ == "__main__":
    main()
