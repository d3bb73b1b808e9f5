"""Tests for the Socket.IO live channel."""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from socketio.exceptions import ConnectionError as SocketConnectionError

from clubreel.core.events import EventBus, EventType
from clubreel.live.channel import TRANSPORTS, LiveChannel

PRIZE = {"_id": "p1", "name": "Cap", "slotIndex": 0}


def fake_client():
    client = MagicMock()
    client.connect = AsyncMock()
    client.disconnect = AsyncMock()
    client.connected = False
    return client


def handler_for(client, event):
    for call in client.on.call_args_list:
        if call.args[0] == event:
            return call.args[1]
    raise AssertionError(f"no handler for {event}")


def test_connection_url_carries_club_id():
    channel = LiveChannel("http://reel.local/", on_job=MagicMock())
    assert channel.connection_url("club 1") == "http://reel.local?clubId=club+1"


@pytest.mark.asyncio
async def test_start_connects_with_polling_first():
    client = fake_client()
    channel = LiveChannel("http://reel.local", on_job=MagicMock(), client_factory=lambda: client)
    await channel.start("c1")
    await asyncio.sleep(0)

    client.connect.assert_awaited_once_with("http://reel.local?clubId=c1", transports=TRANSPORTS, retry=True)
    assert TRANSPORTS == ["polling", "websocket"]
    await channel.stop()
    client.disconnect.assert_awaited_once()


@pytest.mark.asyncio
async def test_spin_events_are_queued():
    client = fake_client()
    on_job = MagicMock()
    channel = LiveChannel("http://reel.local", on_job=on_job, client_factory=lambda: client)
    await channel.start("c1")

    await handler_for(client, "spin")({"prize": PRIZE, "name": "Ann"})
    await handler_for(client, "spin")({"nothing": True})

    on_job.assert_called_once()
    job = on_job.call_args.args[0]
    assert job.prize.id == "p1"
    assert job.spinner_name == "Ann"
    await channel.stop()


@pytest.mark.asyncio
async def test_switching_club_ignores_old_connection():
    clients = [fake_client(), fake_client()]
    on_job = MagicMock()
    channel = LiveChannel("http://reel.local", on_job=on_job, client_factory=lambda: clients.pop(0))
    await channel.start("c1")
    old = channel._client
    await channel.switch_club("c2")

    old.disconnect.assert_awaited_once()
    await handler_for(old, "spin")({"prize": PRIZE})
    on_job.assert_not_called()
    assert channel.club_id == "c2"
    await channel.stop()


@pytest.mark.asyncio
async def test_switch_to_same_club_keeps_connection():
    factory = MagicMock(side_effect=lambda: fake_client())
    channel = LiveChannel("http://reel.local", on_job=MagicMock(), client_factory=factory)
    await channel.start("c1")
    await channel.switch_club("c1")
    assert factory.call_count == 1
    await channel.stop()


@pytest.mark.asyncio
async def test_connect_failure_is_reported_not_raised():
    client = fake_client()
    client.connect = AsyncMock(side_effect=SocketConnectionError("refused"))
    bus = EventBus()
    errors = []
    bus.subscribe(EventType.CHANNEL_ERROR, errors.append)
    channel = LiveChannel("http://reel.local", on_job=MagicMock(), event_bus=bus,
                          client_factory=lambda: client)
    await channel.start("c1")
    await asyncio.sleep(0)

    assert errors and errors[0].data["club_id"] == "c1"
    await channel.stop()


@pytest.mark.asyncio
async def test_connect_and_disconnect_events():
    client = fake_client()
    bus = EventBus()
    seen = []
    bus.subscribe_all(seen.append)
    channel = LiveChannel("http://reel.local", on_job=MagicMock(), event_bus=bus,
                          client_factory=lambda: client)
    await channel.start("c1")
    await handler_for(client, "connect")()
    await handler_for(client, "disconnect")("transport close")
    await handler_for(client, "connect_error")({"message": "bad club"})

    assert [e.type for e in seen] == [
        EventType.CHANNEL_CONNECTED, EventType.CHANNEL_DISCONNECTED, EventType.CHANNEL_ERROR,
    ]
    assert seen[-1].data["error"] == "bad club"
    await channel.stop()
