"""Tests for start-up wiring."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from clubreel.animation.scheduler import ManualFrameScheduler
from clubreel.api.client import ApiError
from clubreel.core.events import EventType
from clubreel.feed.names import PlayerRoster
from clubreel.feed.win_feed import WinFeed
from clubreel.main import build_settings, load_initial_state, parse_args
from clubreel.reel.catalog import PrizeCatalog
from clubreel.reel.controller import ReelController


def test_cli_overrides_only_given_flags(monkeypatch):
    monkeypatch.setenv("CLUBREEL_DEBUG", "true")
    settings = build_settings(parse_args(["--club", "c1"]))
    assert settings.club_id == "c1"
    assert settings.debug is True
    assert settings.headless is False

    settings = build_settings(parse_args(["--headless"]))
    assert settings.headless is True


@pytest.mark.asyncio
async def test_initial_load_seeds_roster_feed_and_catalog():
    api = MagicMock()
    api.get_club_players = AsyncMock(return_value=[{"id": "42", "name": "Ann"}])
    api.get_recent_wins = AsyncMock(return_value=[{"playerId": "42", "prizeName": "Cap"}])
    api.get_roulette_prizes = AsyncMock(return_value=[{"_id": "a", "name": "Cap", "slotIndex": 0}])

    roster = PlayerRoster()
    feed = WinFeed(roster=roster)
    catalog = PrizeCatalog(source=api)
    controller = ReelController(build_settings(parse_args([])), ManualFrameScheduler(),
                                catalog=catalog, feed=feed)

    await load_initial_state(api, catalog, controller, roster, feed, "c1")

    assert [e.text for e in feed.entries] == ["Ann won Cap"]
    assert len(catalog) == 1
    assert controller.strip.content_length == 1
    api.get_roulette_prizes.assert_awaited_once_with("c1")


@pytest.mark.asyncio
async def test_initial_load_survives_backend_failures():
    api = MagicMock()
    api.get_club_players = AsyncMock(side_effect=ApiError("down", network=True))
    api.get_recent_wins = AsyncMock(side_effect=ApiError("down", network=True))
    api.get_roulette_prizes = AsyncMock(side_effect=ApiError("down", network=True))

    catalog = PrizeCatalog(source=api)
    controller = ReelController(build_settings(parse_args([])), ManualFrameScheduler(), catalog=catalog)
    failures = []
    controller.event_bus.subscribe(EventType.CATALOG_FAILED, failures.append)

    await load_initial_state(api, catalog, controller, PlayerRoster(), controller.feed, None)

    assert catalog.error is not None and catalog.error.network
    assert len(failures) == 1
    assert failures[0].data["network"] is True
