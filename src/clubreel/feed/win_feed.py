"""Bounded most-recent-first win feed."""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from clubreel.feed.names import PlayerRoster, WIN_VERB, win_display_name, win_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinEntry:
    id: str
    text: str


FeedListener = Callable[[list[WinEntry]], None]


class WinFeed:
    """Fixed-capacity list of rendered win lines, newest first."""

    def __init__(self, capacity: int = 10, language: str = "en",
                 roster: Optional[PlayerRoster] = None):
        self.capacity = capacity
        self.language = language
        self.roster = roster
        self._entries: list[WinEntry] = []
        self._ids = itertools.count(1)
        self._listeners: list[FeedListener] = []

    @property
    def entries(self) -> list[WinEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add_listener(self, callback: FeedListener) -> None:
        self._listeners.append(callback)

    def add(self, display_name: str, prize_name: str) -> WinEntry:
        """Prepend one win, evicting the oldest beyond capacity."""
        entry = WinEntry(id=f"win-{next(self._ids)}",
                         text=win_text(display_name, prize_name, self.language))
        self._entries = [entry] + self._entries[: self.capacity - 1]
        self._notify()
        return entry

    def replace(self, recent_wins: Sequence[Mapping[str, Any]]) -> None:
        """Replace the whole feed with a server-provided recent-wins list."""
        verb = WIN_VERB.get(self.language, WIN_VERB["en"])
        entries = []
        for i, item in enumerate(recent_wins[: self.capacity]):
            if not isinstance(item, Mapping):
                continue
            text = item.get("text")
            if not (isinstance(text, str) and verb in text):
                name = win_display_name(item, self.roster, self.language)
                text = win_text(name, str(item.get("prizeName") or ""), self.language)
            entries.append(WinEntry(id=f"win-{i}", text=text))
        self._entries = entries
        self._notify()

    def clear(self) -> None:
        self._entries = []
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.entries)
            except Exception as e:
                logger.error(f"Error in feed listener: {e}")
