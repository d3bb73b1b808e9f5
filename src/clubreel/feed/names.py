"""Player display names for the win feed and the "now spinning" label.

A real name always wins over a phone number; phones are masked so only
a few digits stay readable on the public screen.
"""

import logging
import random
import re
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")

GUEST_NAME = {"en": "Guest", "ru": "Гость"}
WIN_VERB = {"en": "won", "ru": "выиграл"}
TEST_PLAYER_NAME = {"en": "Test player", "ru": "Тестовый игрок"}
DEFAULT_PRIZE_NAME = {"en": "Prize", "ru": "Приз"}
NOW_SPINNING = {"en": "Now spinning", "ru": "Сейчас крутит"}
WINNING_PRIZE = {"en": "Winning prize", "ru": "Выигрыш"}
CHANNEL_LIVE = {"en": "Live", "ru": "В эфире"}
CHANNEL_OFFLINE = {"en": "Offline", "ru": "Нет связи"}
RETRY_HINT = {"en": "Press R to retry", "ru": "Нажмите R, чтобы повторить"}


def mask_phone(phone: str) -> str:
    """Mask a raw phone number, keeping four leading and one trailing digit.

    >>> mask_phone("+7 (771) 234-56-78")
    '+7 7712** *** *8'
    """
    digits = _NON_DIGITS.sub("", phone or "")
    if len(digits) < 5:
        return "+7 *** *** **"
    if digits[0] in "78":
        digits = digits[1:]
    return f"+7 {digits[:4]}** *** *{digits[-1]}"


def random_masked_phone(rng: Optional[random.Random] = None) -> str:
    """Placeholder in masked-phone form for fully anonymous spins."""
    rng = rng or random
    visible = "".join(str(rng.randrange(10)) for _ in range(4))
    return f"+7 {visible}** *** *{rng.randrange(10)}"


def clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def player_id_of(value: Any) -> Optional[str]:
    """Extract an id from a playerId field that is a string or an object."""
    if isinstance(value, str):
        return clean_text(value)
    if isinstance(value, Mapping):
        return clean_text(value.get("id")) or clean_text(value.get("_id"))
    return None


def player_object_name(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        return clean_text(value.get("name")) or clean_text(value.get("fio"))
    return None


class PlayerRoster:
    """Club players by id, for events that only carry a player id."""

    def __init__(self, names: Optional[Mapping[str, str]] = None):
        self._names: dict[str, str] = dict(names or {})

    def __len__(self) -> int:
        return len(self._names)

    def lookup(self, player_id: Optional[str]) -> Optional[str]:
        if not player_id:
            return None
        return self._names.get(player_id)

    def update(self, players: list[dict[str, Any]]) -> None:
        """Replace the roster from a /clubs/players response."""
        names = {}
        for player in players:
            if not isinstance(player, Mapping):
                continue
            name = player_object_name(player)
            if not name:
                continue
            for key in ("id", "_id"):
                pid = clean_text(player.get(key))
                if pid:
                    names[pid] = name
        self._names = names
        logger.debug(f"Player roster loaded: {len(names)} named players")


def win_display_name(item: Mapping[str, Any], roster: Optional[PlayerRoster] = None,
                     language: str = "en") -> str:
    """Name for one recent-wins item: name, roster, masked phone, then guest."""
    name = (
        clean_text(item.get("name"))
        or clean_text(item.get("playerName"))
        or player_object_name(item.get("playerId"))
    )
    if name:
        return name
    if roster is not None:
        resolved = roster.lookup(player_id_of(item.get("playerId")))
        if resolved:
            return resolved
    return clean_text(item.get("maskedPhone")) or GUEST_NAME.get(language, GUEST_NAME["en"])


def win_text(display_name: str, prize_name: str, language: str = "en") -> str:
    verb = WIN_VERB.get(language, WIN_VERB["en"])
    return f"{display_name} {verb} {prize_name}"
