"""Tests for strip geometry, the copy buffer and idle drift."""
import pytest

from clubreel.reel.idle import IdleDrift
from clubreel.reel.strip import ReelLayout, ReelStrip


def make_strip(content_length=4, container_width=400.0, **kwargs):
    strip = ReelStrip(ReelLayout(card_width=100, card_gap=0, padding_left=0), **kwargs)
    strip.set_content_length(content_length)
    strip.container_width = container_width
    return strip


def test_layout_geometry():
    layout = ReelLayout(card_width=400, card_gap=24, padding_left=20)
    assert layout.item_width == 424
    assert layout.center_offset(1280) == pytest.approx(640 - 212)
    assert layout.one_set_width(5) == 2120
    assert layout.card_x(-100, 2) == pytest.approx(20 - 100 + 848)


def test_content_length_change_resets_copies():
    strip = make_strip(min_copies=3, replenish_threshold=2, replenish_count=2)
    strip.copies = 11
    strip.set_content_length(4)
    assert strip.copies == 11
    strip.set_content_length(5)
    assert strip.copies == 3


def test_replenish_grows_buffer_near_the_end():
    strip = make_strip(min_copies=3, replenish_threshold=2, replenish_count=2)
    # Right edge at 400 reaches (3 - 2) sets of 400 px
    assert strip.replenish() is True
    assert strip.copies == 5
    assert strip.replenish() is False


def test_ensure_covers_far_landing_position():
    strip = make_strip(min_copies=5, replenish_threshold=2, replenish_count=2)
    strip.ensure_covers(-2000)
    assert strip.copies * strip.one_set_width >= 400 + 2000
    assert strip.copies == 7


def test_visible_cards_wrap_content_indexes():
    strip = make_strip()
    strip.position = -50
    cards = list(strip.visible_cards())
    assert cards[0].strip_index == 0
    assert cards[0].x == pytest.approx(-50)
    assert [c.content_index for c in cards[:6]] == [0, 1, 2, 3, 0, 1]


def test_visible_cards_empty_without_viewport():
    strip = make_strip(container_width=None)
    assert list(strip.visible_cards()) == []


def test_idle_moves_left_by_speed_per_frame():
    strip = make_strip()
    idle = IdleDrift(strip, speed=16, max_frame_step=50)
    idle.resume(0)
    assert idle.tick(16) is True
    # dt = 16/16 = 1 frame unit; step = speed * dt / 16
    assert strip.position == pytest.approx(-1.0)


def test_idle_clamps_long_stalls():
    strip = make_strip()
    idle = IdleDrift(strip, speed=16, max_frame_step=50)
    idle.resume(0)
    idle.tick(100_000)
    assert strip.position == pytest.approx(-50.0)


def test_idle_wraps_by_one_set_width():
    strip = make_strip()
    idle = IdleDrift(strip, speed=16, max_frame_step=50)
    strip.position = -399.5
    idle.resume(0)
    idle.tick(16)
    assert strip.position == pytest.approx(-0.5)


def test_idle_folds_positions_many_sets_out():
    strip = make_strip()
    idle = IdleDrift(strip, speed=16, max_frame_step=50)
    strip.position = -2850
    idle.resume(0)
    idle.tick(16)
    assert -strip.one_set_width <= strip.position <= 0


def test_idle_skips_until_content_and_viewport_exist():
    strip = make_strip(content_length=0)
    idle = IdleDrift(strip, speed=16)
    idle.resume(0)
    assert idle.tick(16) is False
    assert strip.position == 0

    strip = make_strip(container_width=None)
    idle = IdleDrift(strip, speed=16)
    assert idle.tick(16) is False
    assert strip.position == 0


def test_long_idle_keeps_buffer_ahead_of_viewport():
    strip = make_strip(min_copies=3, replenish_threshold=2, replenish_count=2)
    idle = IdleDrift(strip, speed=16, max_frame_step=50)
    idle.resume(0)
    for frame in range(1, 2000):
        idle.tick(frame * 16)
        assert strip.visible_right_edge() < strip.copies * strip.one_set_width
