"""Translate raw ``spin`` push payloads into queued spin jobs.

This is the only place that knows the event's wire shape::

    {
        "prize": {"_id", "name", "slotIndex", "image", ...},   # or spin.prize
        "playerPhone"?, "playerName"?, "name"?,
        "playerId"?: {"id"|"_id", "name", "fio"} | str,
        "recentWins"?: [WinItem, ...]
    }
"""

import logging
import random
from typing import Any, Mapping, Optional

from clubreel.feed.names import (
    DEFAULT_PRIZE_NAME,
    PlayerRoster,
    clean_text,
    mask_phone,
    player_id_of,
    player_object_name,
    random_masked_phone,
)
from clubreel.reel.catalog import Prize
from clubreel.reel.queue import RecentWinsUpdate, SingleWin, SpinJob

logger = logging.getLogger(__name__)


def extract_prize(payload: Any) -> Optional[dict[str, Any]]:
    if not isinstance(payload, Mapping):
        return None
    spin = payload.get("spin")
    if isinstance(spin, Mapping) and isinstance(spin.get("prize"), Mapping):
        return dict(spin["prize"])
    prize = payload.get("prize")
    if isinstance(prize, Mapping):
        return dict(prize)
    return None


def resolve_spinner_name(payload: Mapping[str, Any], roster: Optional[PlayerRoster]) -> Optional[str]:
    """Best known identity for the player: name, roster, then masked phone."""
    name = clean_text(payload.get("name")) or clean_text(payload.get("playerName"))
    if name:
        return name
    name = player_object_name(payload.get("playerId"))
    if name:
        return name
    if roster is not None:
        name = roster.lookup(player_id_of(payload.get("playerId")))
        if name:
            return name
    phone = clean_text(payload.get("playerPhone"))
    if phone:
        return mask_phone(phone)
    return None


def normalize_spin_event(
    payload: Any,
    roster: Optional[PlayerRoster] = None,
    language: str = "en",
    rng: Optional[random.Random] = None,
) -> Optional[SpinJob]:
    """Build a SpinJob from a push payload; None for malformed events."""
    prize_data = extract_prize(payload)
    if prize_data is None:
        logger.debug("Dropping spin event without a prize payload")
        return None

    prize = Prize.from_payload(prize_data)
    prize_name = prize.name or DEFAULT_PRIZE_NAME.get(language, DEFAULT_PRIZE_NAME["en"])
    spinner_name = resolve_spinner_name(payload, roster)

    recent_wins = payload.get("recentWins")
    if isinstance(recent_wins, list) and recent_wins:
        pending = RecentWinsUpdate(recent_wins=tuple(w for w in recent_wins if isinstance(w, Mapping)))
    else:
        # Anonymous spins still get a plausible masked line in the feed
        display_name = spinner_name or random_masked_phone(rng)
        pending = SingleWin(display_name=display_name, prize_name=prize_name)

    return SpinJob(prize=prize, pending_win=pending, spinner_name=spinner_name,
                   meta={"spin_id": payload.get("_id"), "created_at": payload.get("createdAt")})
