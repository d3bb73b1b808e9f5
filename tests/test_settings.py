"""Tests for environment-driven settings."""
from clubreel.settings import ApiSettings, Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.language == "en"
    assert settings.spin.duration_ms == 15000
    assert settings.spin.extra_rotations == 6
    assert settings.reel.item_width == 424
    assert settings.feed.capacity == 10
    assert settings.feed.max_pending_spins is None


def test_nested_env_overrides(monkeypatch):
    monkeypatch.setenv("CLUBREEL_CLUB_ID", "club-7")
    monkeypatch.setenv("CLUBREEL_SPIN__DURATION_MS", "11000")
    monkeypatch.setenv("CLUBREEL_API__BASE_URL", "https://loyalty.example/api")
    settings = Settings(_env_file=None)
    assert settings.club_id == "club-7"
    assert settings.spin.duration_ms == 11000
    assert settings.api.resolved_socket_url == "https://loyalty.example"


def test_explicit_socket_url_wins():
    api = ApiSettings(base_url="https://a/api", socket_url="https://ws.b")
    assert api.resolved_socket_url == "https://ws.b"
