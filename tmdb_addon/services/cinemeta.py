"""
Cinemeta API Client
Looks up IMDb ratings for titles by IMDb id.
"""
import aiohttp
import asyncio
import logging
from typing import Optional
from tmdb_addon.core.config import settings
from tmdb_addon.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class CinemetaClient:
    BASE_URL = "https://v3-cinemeta.strem.io/meta"

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self.session = session
        self._owns_session = session is None

    async def get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT)
            )
            self._owns_session = True
        return self.session

    async def close(self):
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch_imdb_rating(self, media_type: str, imdb_id: str) -> Optional[str]:
        """IMDb rating string ("7.9") for a movie or series, None when unrated."""
        url = f"{self.BASE_URL}/{media_type}/{imdb_id}.json"
        try:
            session = await self.get_session()
            async with session.get(url) as resp:
                if resp.status != 200:
                    raise UpstreamError("Cinemeta", imdb_id, resp.status)
                data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise UpstreamError("Cinemeta", f"{imdb_id}: {exc!r}") from exc

        rating = (data.get("meta") or {}).get("imdbRating")
        if not rating:
            logger.debug("Cinemeta has no rating for %s", imdb_id)
            return None
        return str(rating)
