"""
TMDB API Client
Async client for The Movie Database API
"""
import aiohttp
import asyncio
import logging
from typing import List, Dict, Optional, Any
from tmdb_addon.core.config import settings
from tmdb_addon.core.exceptions import ConfigError, NotFoundError, UpstreamError
from tmdb_addon.services.cache import TTLCache
from tmdb_addon.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DETAIL_APPEND = "videos,credits,external_ids"


def tmdb_media_type(media_type: str) -> str:
    """Map Stremio's "movie"/"series" onto TMDB's "movie"/"tv" path segment"""
    return "movie" if media_type == "movie" else "tv"


class TMDBClient:
    """Async client for TMDB API"""

    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        genre_cache: Optional[TTLCache] = None,
    ):
        self.api_key = api_key or settings.TMDB_API_KEY
        self.session = session
        self._owns_session = session is None
        self.genre_cache = (
            genre_cache if genre_cache is not None
            else TTLCache(settings.CACHE_TTL_GENRES, name="tmdb-genres")
        )
        self.rate_limiter = RateLimiter.for_service("tmdb", settings.TMDB_RATE_LIMIT)

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT)
            )
            self._owns_session = True
        return self.session

    async def close(self):
        """Close aiohttp session"""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def with_api_key(self, api_key: Optional[str]) -> "TMDBClient":
        """Client for a user-supplied key sharing this client's session and genre cache"""
        if not api_key or api_key == self.api_key:
            return self
        return TMDBClient(api_key, session=await self.get_session(), genre_cache=self.genre_cache)

    async def _request(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        required: bool = False,
    ) -> Optional[Dict[str, Any]]:
        """
        Make a single GET request to TMDB.

        Args:
            endpoint: Path below the API root, e.g. "/discover/movie"
            params: Query parameters (the API key is added here)
            required: Raise instead of returning None on failure

        Returns:
            Decoded JSON body, or None on failure when not required
        """
        if not self.api_key:
            if required:
                raise ConfigError("TMDB API key not configured")
            logger.error("TMDB API key not configured")
            return None

        await self.rate_limiter.acquire()

        request_params = {"api_key": self.api_key}
        if params:
            request_params.update({k: v for k, v in params.items() if v is not None})

        try:
            session = await self.get_session()
            url = f"{self.BASE_URL}{endpoint}"
            async with session.get(url, params=request_params) as response:
                if response.status == 200:
                    return await response.json()
                if response.status == 404:
                    logger.debug("TMDB 404 for %s", endpoint)
                    if required:
                        raise NotFoundError("TMDB resource", endpoint)
                    return None
                if response.status == 429:
                    logger.warning("TMDB rate limit exceeded for %s", endpoint)
                else:
                    logger.error("TMDB API error: %s for %s", response.status, endpoint)
                if required:
                    raise UpstreamError("TMDB", endpoint, response.status)
                return None

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("TMDB request error for %s: %r", endpoint, e)
            if required:
                raise UpstreamError("TMDB", f"{endpoint}: {e!r}") from e
            return None

    async def discover(self, media_type: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Run a discover query

        Args:
            media_type: "movie" or "series"
            params: Upstream query parameters from the parameter builder

        Returns:
            Result items, empty on failure
        """
        response = await self._request(f"/discover/{tmdb_media_type(media_type)}", params)
        if response and "results" in response:
            return response["results"]
        return []

    async def search(
        self,
        media_type: str,
        query: str,
        language: str,
        page: int = 1,
    ) -> List[Dict[str, Any]]:
        """Free-text title search; empty on failure"""
        params = {"query": query, "language": language, "page": page, "include_adult": "false"}
        response = await self._request(f"/search/{tmdb_media_type(media_type)}", params)
        if response and "results" in response:
            return response["results"]
        return []

    async def get_details(self, media_type: str, tmdb_id: int, language: str) -> Dict[str, Any]:
        """
        Get movie/tv info with videos, credits and external ids appended

        Raises:
            NotFoundError: TMDB has no such id
            UpstreamError: request failed
        """
        endpoint = f"/{tmdb_media_type(media_type)}/{tmdb_id}"
        return await self._request(
            endpoint,
            {"language": language, "append_to_response": DETAIL_APPEND},
            required=True,
        )

    async def get_videos(self, media_type: str, tmdb_id: int, language: str) -> Dict[str, Any]:
        """Standalone videos list, used when the localized list is empty"""
        endpoint = f"/{tmdb_media_type(media_type)}/{tmdb_id}/videos"
        return await self._request(endpoint, {"language": language}, required=True)

    async def get_season(self, tmdb_id: int, season_number: int, language: str) -> Dict[str, Any]:
        """Episodes of one season of a series"""
        endpoint = f"/tv/{tmdb_id}/season/{season_number}"
        return await self._request(endpoint, {"language": language}, required=True)

    async def get_images(
        self,
        media_type: str,
        tmdb_id: int,
        languages: List[str],
    ) -> Optional[Dict[str, Any]]:
        """Artwork listing (logos, posters, backdrops) filtered by language"""
        endpoint = f"/{tmdb_media_type(media_type)}/{tmdb_id}/images"
        params = {"include_image_language": ",".join(languages + ["null"])}
        return await self._request(endpoint, params)

    async def get_genres(self, media_type: str, language: str) -> List[Dict[str, Any]]:
        """
        Genre id/name pairs for a (language, media type) scope

        Fetched lazily and cached; failures are not cached.
        """
        cache_key = ("genres", tmdb_media_type(media_type), language)
        cached = self.genre_cache.get(cache_key)
        if cached is not None:
            return cached

        response = await self._request(
            f"/genre/{tmdb_media_type(media_type)}/list", {"language": language}
        )
        if not response or "genres" not in response:
            return []
        genres = response["genres"]
        self.genre_cache.set(cache_key, genres)
        return genres

    async def get_languages(self) -> List[Dict[str, Any]]:
        """ISO 639-1 languages known to TMDB (iso_639_1, english_name, name)"""
        cache_key = ("languages",)
        cached = self.genre_cache.get(cache_key)
        if cached is not None:
            return cached

        response = await self._request("/configuration/languages")
        if not isinstance(response, list):
            return []
        self.genre_cache.set(cache_key, response)
        return response

    async def find_by_imdb_id(
        self, imdb_id: str, media_type: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find TMDB entry by IMDB ID

        Args:
            imdb_id: IMDB ID (e.g., "tt1234567")
            media_type: "movie" or "series" to prefer that kind of match

        Returns:
            First matching movie or tv entry with "media_type" set, or None
        """
        response = await self._request(f"/find/{imdb_id}", {"external_source": "imdb_id"})
        if not response:
            return None
        kinds = [("movie_results", "movie"), ("tv_results", "series")]
        if media_type == "series":
            kinds.reverse()
        for results_key, kind in kinds:
            if response.get(results_key):
                result = response[results_key][0]
                result["media_type"] = kind
                return result
        return None
