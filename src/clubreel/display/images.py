"""Prize image cache.

Images are fetched in the background, decoded with Pillow and kept as
card-sized numpy arrays so the per-frame renderer only does a blit.
"""

import asyncio
import io
import logging
from typing import Dict, Optional, Set

import aiohttp
import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageOps

logger = logging.getLogger(__name__)


def decode_image(data: bytes, size: tuple[int, int]) -> NDArray[np.uint8]:
    """Decode image bytes and fit them into ``size`` (width, height), RGB."""
    with Image.open(io.BytesIO(data)) as img:
        img = ImageOps.exif_transpose(img).convert("RGB")
        fitted = ImageOps.contain(img, size, Image.Resampling.LANCZOS)
    return np.asarray(fitted, dtype=np.uint8).copy()


class PrizeImageCache:
    """URL -> decoded image, filled asynchronously."""

    def __init__(self, size: tuple[int, int], timeout: float = 15.0):
        self._size = size
        self._timeout = timeout
        self._images: Dict[str, NDArray[np.uint8]] = {}
        self._failed: Set[str] = set()
        self._tasks: Dict[str, asyncio.Task] = {}
        self._session: Optional[aiohttp.ClientSession] = None

    def get(self, url: Optional[str]) -> Optional[NDArray[np.uint8]]:
        if not url:
            return None
        return self._images.get(url)

    def request(self, url: Optional[str]) -> None:
        """Start fetching ``url`` unless it is cached, in flight or failed."""
        if not url or url in self._images or url in self._failed or url in self._tasks:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._tasks[url] = loop.create_task(self._fetch(url))

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout))
        return self._session

    async def _fetch(self, url: str) -> None:
        try:
            session = await self._get_session()
            async with session.get(url) as response:
                response.raise_for_status()
                data = await response.read()
            self._images[url] = decode_image(data, self._size)
            logger.debug(f"Prize image cached: {url}")
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.warning(f"Could not load prize image {url}: {e}")
            self._failed.add(url)
        finally:
            self._tasks.pop(url, None)

    async def close(self) -> None:
        for task in list(self._tasks.values()):
            task.cancel()
        self._tasks.clear()
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
