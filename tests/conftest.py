"""Shared fixtures: a small deterministic reel.

Cards are 100 px with no gap or padding in a 400 px viewport, so one set
of four prizes is exactly one viewport wide.
"""
import random

import pytest

from clubreel.animation.scheduler import ManualFrameScheduler
from clubreel.core.events import EventBus
from clubreel.reel.catalog import Prize, PrizeCatalog
from clubreel.reel.controller import ReelController
from clubreel.settings import FeedSettings, ReelSettings, Settings, SpinSettings


def make_prizes(*names: str) -> list[Prize]:
    return [Prize(id=f"p-{name.lower()}", name=name, slot_index=i, probability=0.25)
            for i, name in enumerate(names)]


def make_settings(**feed_overrides) -> Settings:
    return Settings(
        debug=True,
        reel=ReelSettings(card_width=100, card_gap=0, padding_left=0, idle_speed=16,
                          min_copies=50, replenish_threshold=25, replenish_count=25),
        spin=SpinSettings(duration_ms=1000, extra_rotations=1),
        feed=FeedSettings(**{"capacity": 10, "overlay_timeout_ms": 500, **feed_overrides}),
    )


@pytest.fixture
def prizes():
    return make_prizes("A", "B", "C", "D")


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def controller(scheduler, prizes):
    """Started controller with a measured viewport and a loaded catalog."""
    ctrl = ReelController(make_settings(), scheduler, catalog=PrizeCatalog(),
                          event_bus=EventBus(), rng=random.Random(7))
    ctrl.set_viewport(400)
    ctrl.catalog.replace(prizes)
    ctrl.start()
    yield ctrl
    ctrl.stop()
