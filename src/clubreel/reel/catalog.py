"""Prize catalog snapshot.

The ordered list of prizes that fills the reel, plus the lookup that maps
a server-declared winner onto a position in the current local ordering.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple

from clubreel.api.client import ApiError

logger = logging.getLogger(__name__)


class PrizeTier(Enum):
    """Presentation bucket derived from the drop probability.

    Value is (label, RGB border color).
    """
    LEGENDARY = ("legendary", (231, 76, 60))
    RARE = ("rare", (155, 89, 182))
    UNCOMMON = ("uncommon", (46, 204, 113))
    COMMON = ("common", (52, 152, 219))
    ABUNDANT = ("abundant", (149, 165, 166))

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.value[1]

    @classmethod
    def from_probability(cls, probability: float) -> "PrizeTier":
        """Bucket a 0-1 probability by its percentage."""
        pct = (probability or 0.0) * 100
        if pct < 5:
            return cls.LEGENDARY
        if pct < 10:
            return cls.RARE
        if pct < 15:
            return cls.UNCOMMON
        if pct <= 20:
            return cls.COMMON
        return cls.ABUNDANT


@dataclass(frozen=True)
class Prize:
    """A prize as shown on one reel card."""

    id: str
    name: str
    slot_index: Optional[int] = None
    probability: float = 0.0
    image: Optional[str] = None
    background_image: Optional[str] = None
    description: str = ""
    is_active: bool = True

    @property
    def tier(self) -> PrizeTier:
        return PrizeTier.from_probability(self.probability)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Prize":
        """Build a prize from a backend or push-event payload."""
        raw_id = data.get("id") or data.get("_id") or ""
        slot = data.get("slotIndex")
        try:
            slot_index = int(slot) if slot is not None else None
        except (TypeError, ValueError):
            slot_index = None
        try:
            probability = float(data.get("probability") or 0.0)
        except (TypeError, ValueError):
            probability = 0.0
        # Some admin screens send percentages
        if probability > 1:
            probability /= 100.0
        return cls(
            id=str(raw_id),
            name=str(data.get("name") or ""),
            slot_index=slot_index,
            probability=probability,
            image=data.get("image") or None,
            background_image=data.get("backgroundImage") or None,
            description=str(data.get("description") or ""),
            is_active=data.get("isActive", True) is not False,
        )


def sort_prizes(prizes: Sequence[Prize]) -> list[Prize]:
    """Slot order, ties broken by id; prizes without a slot go last.

    Duplicate ids keep their first occurrence.
    """
    seen: set[str] = set()
    unique = []
    for prize in prizes:
        if prize.id in seen:
            continue
        seen.add(prize.id)
        unique.append(prize)

    def key(p: Prize) -> tuple[float, str]:
        slot = p.slot_index if p.slot_index is not None else math.inf
        return (slot, p.id)

    return sorted(unique, key=key)


class PrizeSource(Protocol):
    async def get_roulette_prizes(self, club_id: Optional[str] = None) -> list[dict[str, Any]]: ...


@dataclass(frozen=True)
class CatalogLoadError:
    """Retryable failure state exposed to the UI."""

    message: str
    network: bool = False


CatalogListener = Callable[[list[Prize]], None]


class PrizeCatalog:
    """Ordered, de-duplicated prize snapshot for one club."""

    def __init__(self, source: Optional[PrizeSource] = None):
        self._source = source
        self._prizes: list[Prize] = []
        self._club_id: Optional[str] = None
        self._error: Optional[CatalogLoadError] = None
        self._listeners: list[CatalogListener] = []

    @property
    def prizes(self) -> list[Prize]:
        return list(self._prizes)

    @property
    def error(self) -> Optional[CatalogLoadError]:
        return self._error

    def __len__(self) -> int:
        return len(self._prizes)

    def add_listener(self, callback: CatalogListener) -> None:
        """Called with the new snapshot after every successful load."""
        self._listeners.append(callback)

    def replace(self, prizes: Sequence[Prize]) -> list[Prize]:
        """Replace the snapshot with an already fetched prize list."""
        self._prizes = sort_prizes([p for p in prizes if p.is_active])
        self._error = None
        for listener in list(self._listeners):
            try:
                listener(self.prizes)
            except Exception as e:
                logger.error(f"Error in catalog listener: {e}")
        return self.prizes

    async def load(self, club_id: Optional[str] = None) -> list[Prize]:
        """Fetch the club's prizes and replace the snapshot.

        On failure the previous snapshot is kept and ``error`` is set;
        nothing is raised.
        """
        if self._source is None:
            raise RuntimeError("PrizeCatalog has no source to load from")
        self._club_id = club_id
        self._error = None
        try:
            payload = await self._source.get_roulette_prizes(club_id)
        except ApiError as e:
            logger.error(f"Failed to load roulette prizes for club {club_id}: {e}")
            if e.network:
                message = "Network unavailable: cannot reach the prize server."
            else:
                message = "Could not load prizes. Check the backend and API URL."
            self._error = CatalogLoadError(message=message, network=e.network)
            return self.prizes

        prizes = [Prize.from_payload(item) for item in payload if isinstance(item, dict)]
        loaded = self.replace(prizes)
        logger.info(f"Loaded {len(loaded)} roulette prizes for club {club_id or 'default'}")
        return loaded

    async def retry(self) -> list[Prize]:
        """Reload with the last requested club id."""
        return await self.load(self._club_id)

    def find_index(self, prize: Prize) -> Optional[int]:
        """Position of prize in the snapshot, matched by id then slot index."""
        for i, candidate in enumerate(self._prizes):
            if prize.id and candidate.id == prize.id:
                return i
        if prize.slot_index is not None:
            for i, candidate in enumerate(self._prizes):
                if candidate.slot_index == prize.slot_index:
                    return i
        return None

    def resolve_index(self, prize: Prize) -> int:
        """find_index with the lenient fallback to position 0."""
        index = self.find_index(prize)
        if index is None:
            logger.warning(
                f"Prize {prize.id or '?'} (slot {prize.slot_index}) not in the current "
                f"catalog of {len(self._prizes)}; landing on position 0"
            )
            return 0
        return index
