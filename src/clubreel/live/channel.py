"""Socket.IO push channel scoped to one club.

Connects with ``clubId`` in the query string and turns every ``spin``
event into a queued SpinJob. Polling is tried first and upgraded to a
websocket when the proxy allows it. Reconnection is left to the
Socket.IO client's own policy; errors are only logged.
"""

import asyncio
import logging
import random
from typing import Any, Callable, Optional
from urllib.parse import urlencode

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from clubreel.core.events import EventBus, EventType, channel_event
from clubreel.feed.names import PlayerRoster
from clubreel.live.normalizer import normalize_spin_event
from clubreel.reel.queue import SpinJob

logger = logging.getLogger(__name__)

TRANSPORTS = ["polling", "websocket"]

JobSink = Callable[[SpinJob], None]


class LiveChannel:
    """One live connection for the currently displayed club."""

    def __init__(
        self,
        url: str,
        on_job: JobSink,
        roster: Optional[PlayerRoster] = None,
        event_bus: Optional[EventBus] = None,
        language: str = "en",
        rng: Optional[random.Random] = None,
        client_factory: Callable[[], socketio.AsyncClient] | None = None,
    ):
        self._url = url.rstrip("/")
        self._on_job = on_job
        self.roster = roster
        self._event_bus = event_bus
        self._language = language
        self._rng = rng
        self._client_factory = client_factory or (lambda: socketio.AsyncClient(reconnection=True))

        self._client: Optional[socketio.AsyncClient] = None
        self._connect_task: Optional[asyncio.Task] = None
        self.club_id: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self._client is not None and self._client.connected

    def connection_url(self, club_id: str) -> str:
        return f"{self._url}?{urlencode({'clubId': club_id})}"

    async def start(self, club_id: str) -> None:
        """Open the channel for ``club_id``, replacing any previous one."""
        if self._client is not None:
            await self.stop()

        self.club_id = club_id
        client = self._client_factory()
        self._register_handlers(client, club_id)
        self._client = client
        self._connect_task = asyncio.create_task(self._connect(client, club_id))

    async def switch_club(self, club_id: str) -> None:
        if club_id != self.club_id:
            await self.start(club_id)

    async def _connect(self, client: socketio.AsyncClient, club_id: str) -> None:
        try:
            await client.connect(self.connection_url(club_id), transports=TRANSPORTS, retry=True)
        except SocketConnectionError as e:
            logger.warning(f"Socket.IO connect failed for club {club_id}: {e}")
            self._emit(EventType.CHANNEL_ERROR, club_id, error=str(e))

    def _register_handlers(self, client: socketio.AsyncClient, club_id: str) -> None:
        async def on_connect() -> None:
            logger.info(f"Live channel connected for club {club_id}")
            self._emit(EventType.CHANNEL_CONNECTED, club_id)

        async def on_disconnect(*args: Any) -> None:
            logger.info(f"Live channel disconnected for club {club_id}")
            self._emit(EventType.CHANNEL_DISCONNECTED, club_id)

        async def on_connect_error(data: Any = None) -> None:
            message = data.get("message") if isinstance(data, dict) else data
            logger.warning(f"Socket.IO connect_error: {message}")
            self._emit(EventType.CHANNEL_ERROR, club_id, error=str(message))

        async def on_spin(payload: Any = None) -> None:
            if client is not self._client:
                return
            self.handle_spin(payload)

        client.on("connect", on_connect)
        client.on("disconnect", on_disconnect)
        client.on("connect_error", on_connect_error)
        client.on("spin", on_spin)

    def handle_spin(self, payload: Any) -> Optional[SpinJob]:
        """Normalize one spin payload and hand it to the queue."""
        job = normalize_spin_event(payload, roster=self.roster, language=self._language, rng=self._rng)
        if job is None:
            return None
        self._on_job(job)
        return job

    async def stop(self) -> None:
        """Close the connection and forget its handlers."""
        client, self._client = self._client, None
        task, self._connect_task = self._connect_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if client is not None:
            try:
                await client.disconnect()
            except Exception as e:
                logger.warning(f"Error closing live channel: {e}")

    def _emit(self, event_type: EventType, club_id: str, **extra: Any) -> None:
        if self._event_bus is not None:
            self._event_bus.emit(channel_event(event_type, club_id, **extra))
