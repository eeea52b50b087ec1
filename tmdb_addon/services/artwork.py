"""
Artwork Service
Logos from fanart.tv (TMDB images as fallback) and rating-poster probing
"""
import aiohttp
import asyncio
import logging
from typing import Any, Dict, List, Optional
from tmdb_addon.core.config import settings
from tmdb_addon.core.exceptions import UpstreamError
from tmdb_addon.services.cache import TTLCache
from tmdb_addon.services.tmdb import IMAGE_BASE_URL, TMDBClient

logger = logging.getLogger(__name__)

LOGO_BLACKLIST = frozenset({
    "https://assets.fanart.tv/fanart/tv/0/hdtvlogo/-60a02798b7eea.png",
})


def process_logo(logo: Optional[str]) -> Optional[str]:
    """Drop blacklisted logos and force https"""
    if not logo or logo in LOGO_BLACKLIST:
        return None
    processed = logo.replace("http://", "https://", 1)
    if processed in LOGO_BLACKLIST:
        return None
    return processed


def pick_logo(candidates: List[Dict[str, Any]], languages: List[str]) -> Optional[str]:
    """
    Choose the best logo for the preferred languages

    Args:
        candidates: Dicts with "url", "lang" and optional "likes"
        languages: ISO 639-1 codes in order of preference

    Returns:
        URL of the most liked logo in the first language that has one,
        else the most liked logo overall
    """
    if not candidates:
        return None

    def likes(candidate: Dict[str, Any]) -> float:
        try:
            return float(candidate.get("likes") or 0)
        except (TypeError, ValueError):
            return 0.0

    ranked = sorted(candidates, key=likes, reverse=True)
    for language in languages:
        for candidate in ranked:
            if candidate.get("lang") == language and candidate.get("url"):
                return candidate["url"]
    for candidate in ranked:
        if candidate.get("url"):
            return candidate["url"]
    return None


class ArtworkService:
    """Fetches logos and verifies rating-poster URLs"""

    FANART_URL = "https://webservice.fanart.tv/v3"

    def __init__(
        self,
        tmdb: TMDBClient,
        session: Optional[aiohttp.ClientSession] = None,
        fanart_api_key: Optional[str] = None,
        poster_check_cache: Optional[TTLCache] = None,
    ):
        self.tmdb = tmdb
        self.session = session
        self._owns_session = session is None
        self.fanart_api_key = fanart_api_key or settings.FANART_API_KEY
        if poster_check_cache is None:
            poster_check_cache = TTLCache(settings.CACHE_TTL_POSTER_CHECK, name="poster-check")
        self.poster_check_cache = poster_check_cache

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

    async def _fanart(self, path: str) -> Optional[Dict[str, Any]]:
        if not self.fanart_api_key:
            return None
        url = f"{self.FANART_URL}/{path}"
        try:
            session = await self.get_session()
            async with session.get(url, params={"api_key": self.fanart_api_key}) as resp:
                if resp.status == 404:
                    return None
                if resp.status != 200:
                    raise UpstreamError("fanart.tv", path, resp.status)
                return await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise UpstreamError("fanart.tv", f"{path}: {exc!r}") from exc

    async def _tmdb_logos(
        self, tmdb: TMDBClient, media_type: str, tmdb_id: int, languages: List[str]
    ) -> List[Dict[str, Any]]:
        images = await tmdb.get_images(media_type, tmdb_id, languages)
        if not images:
            return []
        return [
            {
                "url": f"{IMAGE_BASE_URL}/original{logo['file_path']}",
                "lang": logo.get("iso_639_1"),
                "likes": logo.get("vote_average"),
            }
            for logo in images.get("logos", [])
            if logo.get("file_path")
        ]

    async def get_logo(
        self,
        media_type: str,
        tmdb_id: int,
        language: str,
        original_language: Optional[str] = None,
        tvdb_id: Optional[int] = None,
        tmdb: Optional[TMDBClient] = None,
    ) -> Optional[str]:
        """
        Logo URL for a title, None if there is none

        Movies are looked up on fanart.tv by TMDB id, series by TVDB id.
        TMDB's own logos are used when fanart.tv has nothing or fails.
        """
        languages = [language.split("-")[0]]
        if original_language and original_language not in languages:
            languages.append(original_language)
        if "en" not in languages:
            languages.append("en")

        candidates: List[Dict[str, Any]] = []
        fanart_path = None
        if media_type == "movie":
            fanart_path = f"movies/{tmdb_id}"
        elif tvdb_id:
            fanart_path = f"tv/{tvdb_id}"
        if fanart_path:
            try:
                data = await self._fanart(fanart_path)
            except UpstreamError as exc:
                logger.warning("fanart.tv lookup failed, using TMDB logos: %s", exc)
                data = None
            if data:
                if media_type == "movie":
                    candidates = data.get("hdmovielogo") or data.get("movielogo") or []
                else:
                    candidates = data.get("hdtvlogo") or data.get("clearlogo") or []

        if not candidates:
            candidates = await self._tmdb_logos(tmdb or self.tmdb, media_type, tmdb_id, languages)

        return pick_logo(candidates, languages)

    async def poster_exists(self, url: str) -> bool:
        """HEAD-probe a poster URL; results are cached for a short TTL"""
        cached = self.poster_check_cache.get(url)
        if cached is not None:
            return cached
        try:
            session = await self.get_session()
            async with session.head(url, allow_redirects=True) as resp:
                exists = resp.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.debug("Poster probe failed for %s: %r", url, exc)
            return False
        self.poster_check_cache.set(url, exists)
        return exists
