"""HTTP client for the loyalty backend.

Only the read endpoints the club display needs: the roulette prize list,
the recent wins feed and the club's player roster.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Request to the backend failed.

    Attributes:
        status: HTTP status, if a response was received
        network: True when the server could not be reached at all
    """

    def __init__(self, message: str, status: Optional[int] = None, network: bool = False):
        super().__init__(message)
        self.status = status
        self.network = network


class ClubApiClient:
    """Read-only client for the club display endpoints."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            headers = {"Content-Type": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=headers,
            )
        return self._session

    async def _get_json(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            session = await self._get_session()
            async with session.get(url, params=params) as response:
                if response.status >= 400:
                    raise ApiError(f"GET {path} returned HTTP {response.status}", status=response.status)
                try:
                    return await response.json()
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise ApiError(f"GET {path} returned invalid JSON: {e}", status=response.status)
        except asyncio.TimeoutError:
            raise ApiError(f"GET {path} timed out", network=True)
        except aiohttp.ClientError as e:
            raise ApiError(f"GET {path} failed: {e}", network=True)

    async def get_roulette_prizes(self, club_id: Optional[str] = None) -> list[dict[str, Any]]:
        """Prizes on the club's reel (global default set when club_id is None)."""
        params = {"club": club_id} if club_id else None
        data = await self._get_json("/players/roulette-prizes", params=params)
        if not isinstance(data, list):
            raise ApiError("Roulette prizes response is not a list")
        return data

    async def get_recent_wins(self) -> list[dict[str, Any]]:
        """Last wins for seeding the feed before any live event arrives."""
        data = await self._get_json("/players/recent-wins")
        return data if isinstance(data, list) else []

    async def get_club_players(self) -> list[dict[str, Any]]:
        """Players of the authenticated club, used to resolve names by id."""
        data = await self._get_json("/clubs/players")
        return data if isinstance(data, list) else []

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
