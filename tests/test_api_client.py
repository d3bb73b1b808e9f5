"""Tests for the backend HTTP client."""
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from clubreel.api.client import ApiError, ClubApiClient


@pytest.mark.asyncio
async def test_roulette_prizes_scoped_to_club():
    client = ClubApiClient("http://api.local/api/")
    client._get_json = AsyncMock(return_value=[{"_id": "a"}])

    assert await client.get_roulette_prizes("c1") == [{"_id": "a"}]
    client._get_json.assert_awaited_once_with("/players/roulette-prizes", params={"club": "c1"})

    await client.get_roulette_prizes()
    assert client._get_json.await_args.kwargs["params"] is None


@pytest.mark.asyncio
async def test_non_list_prizes_is_an_error():
    client = ClubApiClient("http://api.local/api")
    client._get_json = AsyncMock(return_value={"error": "nope"})
    with pytest.raises(ApiError):
        await client.get_roulette_prizes("c1")


@pytest.mark.asyncio
async def test_feed_endpoints_tolerate_odd_payloads():
    client = ClubApiClient("http://api.local/api")
    client._get_json = AsyncMock(return_value={"unexpected": True})
    assert await client.get_recent_wins() == []
    assert await client.get_club_players() == []


@pytest.mark.asyncio
async def test_unreachable_server_is_a_network_error():
    client = ClubApiClient("http://api.local/api")
    session = MagicMock()
    session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))
    client._get_session = AsyncMock(return_value=session)

    with pytest.raises(ApiError) as excinfo:
        await client.get_recent_wins()
    assert excinfo.value.network is True
    assert excinfo.value.status is None


@pytest.mark.asyncio
async def test_close_without_session_is_noop():
    client = ClubApiClient("http://api.local/api", token="t")
    await client.close()
