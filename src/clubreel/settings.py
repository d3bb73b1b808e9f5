"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested groups use the ``CLUBREEL_<GROUP>__<FIELD>`` form, e.g.
``CLUBREEL_SPIN__DURATION_MS=11000``.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseModel):
    """Backend collaborator endpoints."""

    base_url: str = "http://localhost:3000/api"
    # Push channel host; falls back to base_url without the /api suffix
    socket_url: Optional[str] = None
    token: Optional[str] = None
    timeout: float = 30.0

    @property
    def resolved_socket_url(self) -> str:
        if self.socket_url:
            return self.socket_url
        url = self.base_url.rstrip("/")
        if url.endswith("/api"):
            url = url[: -len("/api")]
        return url


class ReelSettings(BaseModel):
    """Reel strip geometry and idle drift."""

    card_width: float = 400.0
    card_gap: float = 24.0
    # Left padding of the strip element; the first card starts here
    padding_left: float = 20.0

    # px per 16 frame-units of idle drift
    idle_speed: float = 15.5
    max_frame_step: float = 50.0

    # Copy buffer
    min_copies: int = Field(default=50, ge=1)
    replenish_threshold: int = Field(default=25, ge=0)
    replenish_count: int = Field(default=25, ge=1)

    @property
    def item_width(self) -> float:
        return self.card_width + self.card_gap


class SpinSettings(BaseModel):
    """Spin animation parameters."""

    duration_ms: float = Field(default=15000.0, gt=0)
    extra_rotations: int = Field(default=6, ge=0)
    easing: str = "ease_out_expo_decay"
    decay_rate: float = Field(default=8.0, gt=0)


class FeedSettings(BaseModel):
    """Win feed and result overlay."""

    capacity: int = Field(default=10, ge=1)
    overlay_timeout_ms: float = Field(default=7000.0, gt=0)
    # None keeps the spin queue unbounded
    max_pending_spins: Optional[int] = Field(default=None, ge=1)


class DisplaySettings(BaseModel):
    """Display window settings."""

    width: int = 1280
    height: int = 720
    fps: int = 60
    fullscreen: bool = False


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLUBREEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    club_id: Optional[str] = None
    language: Literal["ru", "en"] = "en"
    debug: bool = False
    headless: bool = False

    api: ApiSettings = Field(default_factory=ApiSettings)
    reel: ReelSettings = Field(default_factory=ReelSettings)
    spin: SpinSettings = Field(default_factory=SpinSettings)
    feed: FeedSettings = Field(default_factory=FeedSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)

