"""Tests for the prize catalog snapshot."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from clubreel.api.client import ApiError
from clubreel.reel.catalog import Prize, PrizeCatalog, PrizeTier, sort_prizes


def test_from_payload_reads_backend_fields():
    prize = Prize.from_payload({
        "_id": "abc", "name": "Cap", "slotIndex": "3", "probability": 25,
        "image": "http://img/cap.png", "backgroundImage": "", "isActive": False,
    })
    assert prize.id == "abc"
    assert prize.slot_index == 3
    assert prize.probability == pytest.approx(0.25)
    assert prize.background_image is None
    assert prize.is_active is False


def test_from_payload_tolerates_junk_numbers():
    prize = Prize.from_payload({"id": 7, "slotIndex": "x", "probability": "n/a"})
    assert prize.id == "7"
    assert prize.slot_index is None
    assert prize.probability == 0.0


@pytest.mark.parametrize("probability,tier", [
    (0.01, PrizeTier.LEGENDARY),
    (0.07, PrizeTier.RARE),
    (0.12, PrizeTier.UNCOMMON),
    (0.18, PrizeTier.COMMON),
    (0.50, PrizeTier.ABUNDANT),
])
def test_tiers_follow_probability(probability, tier):
    assert Prize(id="p", name="P", probability=probability).tier is tier


def test_sort_by_slot_then_id_with_unslotted_last():
    prizes = [
        Prize(id="z", name="Z"),
        Prize(id="b", name="B", slot_index=1),
        Prize(id="a", name="A", slot_index=1),
        Prize(id="c", name="C", slot_index=0),
        Prize(id="b", name="B again", slot_index=5),
    ]
    assert [p.id for p in sort_prizes(prizes)] == ["c", "a", "b", "z"]


def test_replace_drops_inactive_and_notifies():
    catalog = PrizeCatalog()
    listener = MagicMock()
    catalog.add_listener(listener)
    catalog.replace([Prize(id="a", name="A", slot_index=0),
                     Prize(id="b", name="B", slot_index=1, is_active=False)])
    assert [p.id for p in catalog.prizes] == ["a"]
    listener.assert_called_once()


def test_find_index_prefers_id_over_slot():
    catalog = PrizeCatalog()
    catalog.replace([Prize(id="a", name="A", slot_index=0), Prize(id="b", name="B", slot_index=1)])
    assert catalog.find_index(Prize(id="b", name="B", slot_index=0)) == 1
    assert catalog.find_index(Prize(id="", name="?", slot_index=1)) == 1
    assert catalog.find_index(Prize(id="x", name="X")) is None
    assert catalog.resolve_index(Prize(id="x", name="X")) == 0


@pytest.mark.asyncio
async def test_load_uses_club_scope():
    source = MagicMock()
    source.get_roulette_prizes = AsyncMock(return_value=[
        {"_id": "b", "name": "B", "slotIndex": 1},
        {"_id": "a", "name": "A", "slotIndex": 0},
        "garbage",
    ])
    catalog = PrizeCatalog(source)
    loaded = await catalog.load("club-1")

    source.get_roulette_prizes.assert_awaited_once_with("club-1")
    assert [p.name for p in loaded] == ["A", "B"]
    assert catalog.error is None


@pytest.mark.asyncio
async def test_failed_load_keeps_snapshot_and_reports_network_error():
    source = MagicMock()
    source.get_roulette_prizes = AsyncMock(side_effect=ApiError("down", network=True))
    catalog = PrizeCatalog(source)
    catalog.replace([Prize(id="a", name="A")])

    result = await catalog.load("club-1")

    assert [p.id for p in result] == ["a"]
    assert catalog.error is not None
    assert catalog.error.network is True
    assert "Network" in catalog.error.message


@pytest.mark.asyncio
async def test_retry_reloads_last_club():
    source = MagicMock()
    source.get_roulette_prizes = AsyncMock(side_effect=[ApiError("500", status=500), []])
    catalog = PrizeCatalog(source)
    await catalog.load("club-9")
    assert catalog.error is not None and catalog.error.network is False

    await catalog.retry()
    assert catalog.error is None
    assert source.get_roulette_prizes.await_args_list[-1].args == ("club-9",)


@pytest.mark.asyncio
async def test_load_without_source_raises():
    with pytest.raises(RuntimeError):
        await PrizeCatalog().load()
