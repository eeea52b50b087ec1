"""
Meta Service
Builds full movie/series detail records from TMDB with secondary enrichment
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from tmdb_addon.core.config import settings
from tmdb_addon.core.exceptions import NotFoundError
from tmdb_addon.models.config import UserConfig
from tmdb_addon.models.stremio import AppExtras, Meta, MetaResponse, Video
from tmdb_addon.services.artwork import ArtworkService, process_logo
from tmdb_addon.services.cache import TTLCache
from tmdb_addon.services.cinemeta import CinemetaClient
from tmdb_addon.services.tmdb import TMDBClient
from tmdb_addon.utils.helpers import LookupResult, attempt, gather_in_batches
from tmdb_addon.utils import parsers

logger = logging.getLogger(__name__)

FALLBACK_VIDEO_LANGUAGE = "en-US"

# Value used for each enrichment field when its lookup fails or finds nothing.
# The poster falls back to the TMDB poster of the title itself.
ENRICHMENT_DEFAULTS: Dict[str, Any] = {
    "logo": None,
    "imdb_rating": None,
    "episodes": [],
}


class MetaService:
    """Resolves meta ids and assembles Stremio meta records"""

    def __init__(
        self,
        tmdb: TMDBClient,
        artwork: ArtworkService,
        cinemeta: CinemetaClient,
        cache: Optional[TTLCache] = None,
        rating_cache: Optional[TTLCache] = None,
    ):
        self.tmdb = tmdb
        self.artwork = artwork
        self.cinemeta = cinemeta
        if cache is None:
            cache = TTLCache(settings.CACHE_TTL_META, name="meta")
        if rating_cache is None:
            # IMDb ratings are kept for the lifetime of the process
            rating_cache = TTLCache(None, name="imdb-rating")
        self.cache = cache
        self.rating_cache = rating_cache

    async def resolve_tmdb_id(self, tmdb: TMDBClient, media_type: str, meta_id: str) -> int:
        """
        TMDB id for "tmdb:123", "123" or "tt1234567" style ids

        Raises:
            NotFoundError: the id cannot be mapped to a TMDB id
        """
        if meta_id.startswith("tmdb:"):
            meta_id = meta_id.split(":", 1)[1]
        if meta_id.isdigit():
            return int(meta_id)
        if meta_id.startswith("tt"):
            imdb_id = meta_id.split(":", 1)[0]
            found = await tmdb.find_by_imdb_id(imdb_id, media_type)
            if found:
                return int(found["id"])
        raise NotFoundError(f"{media_type} meta", meta_id)

    async def get_meta(
        self,
        media_type: str,
        language: str,
        meta_id: str,
        config: UserConfig,
    ) -> MetaResponse:
        """
        Full detail record for one title

        Cached per (type, language, TMDB id, rating poster key) for
        CACHE_TTL_META seconds.

        Raises:
            NotFoundError: unknown id
            UpstreamError: the TMDB info call failed
        """
        tmdb = await self.tmdb.with_api_key(config.tmdb_api_key)
        tmdb_id = await self.resolve_tmdb_id(tmdb, media_type, meta_id)

        cache_key = (media_type, language, tmdb_id, config.rpdb_api_key)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Meta cache hit for %s", cache_key)
            return MetaResponse(meta=cached)

        details = await tmdb.get_details(media_type, tmdb_id, language)
        if media_type == "movie":
            meta = await self._build_movie(tmdb, details, language, tmdb_id, config)
        else:
            meta = await self._build_series(tmdb, details, language, tmdb_id, config)

        self.cache.set(cache_key, meta)
        return MetaResponse(meta=meta)

    # -- secondary lookups -------------------------------------------------

    async def _poster(self, media_type: str, tmdb_id: int, poster_path: Optional[str], language: str, config: UserConfig) -> Optional[str]:
        tmdb_poster = parsers.tmdb_image(poster_path)
        if config.rpdb_api_key:
            rating_poster = parsers.get_rpdb_poster(media_type, tmdb_id, language, config.rpdb_api_key)
            if await self.artwork.poster_exists(rating_poster):
                return rating_poster
        return tmdb_poster

    async def _imdb_rating(self, media_type: str, imdb_id: Optional[str]) -> Optional[str]:
        if not imdb_id:
            return None
        cached = self.rating_cache.get(imdb_id)
        if cached is not None:
            return cached
        rating = await self.cinemeta.fetch_imdb_rating(media_type, imdb_id)
        if rating:
            self.rating_cache.set(imdb_id, rating)
        return rating

    async def _episodes(
        self,
        tmdb: TMDBClient,
        tmdb_id: int,
        imdb_id: Optional[str],
        seasons: List[Dict[str, Any]],
        language: str,
        hide_thumbnails: bool,
    ) -> List[Video]:
        season_numbers = [s["season_number"] for s in seasons if s.get("season_number") is not None]
        payloads = await gather_in_batches(
            season_numbers,
            lambda number: tmdb.get_season(tmdb_id, number, language),
            settings.MAX_CONCURRENT_API_CALLS,
        )
        fetched = []
        for number, payload in zip(season_numbers, payloads):
            if isinstance(payload, Exception):
                logger.warning("Season %s of %s failed: %r", number, tmdb_id, payload)
                continue
            fetched.append(payload)
        return parsers.parse_episodes(fetched, tmdb_id, imdb_id, hide_thumbnails)

    async def _ensure_videos(self, tmdb: TMDBClient, details: Dict[str, Any], media_type: str, tmdb_id: int) -> Dict[str, Any]:
        """Localized video list, or the en-US list when the former is empty"""
        videos = details.get("videos") or {}
        if videos.get("results"):
            return videos
        fallback = await attempt(
            "fallback_videos", tmdb.get_videos(media_type, tmdb_id, FALLBACK_VIDEO_LANGUAGE)
        )
        if fallback.ok and fallback.value and fallback.value.get("results"):
            return fallback.value
        return videos

    async def _enrich(self, lookups: Dict[str, Any]) -> Dict[str, LookupResult]:
        """Run secondary lookups concurrently; one failing never aborts the others"""
        names = list(lookups)
        results = await asyncio.gather(*(attempt(name, lookups[name]) for name in names))
        return dict(zip(names, results))

    # -- builders ----------------------------------------------------------

    def _links(self, imdb_rating: str, imdb_id: Optional[str], title: str, media_type: str, genres: List[str], cast, directors, writers, language: str):
        links = []
        if imdb_id:
            links.append(parsers.parse_imdb_link(imdb_rating, imdb_id))
        links.append(parsers.parse_share_link(title, imdb_id, media_type))
        links.extend(parsers.parse_genre_links(genres, media_type, language))
        links.extend(parsers.parse_credits_links(cast, directors, writers))
        return links

    async def _build_movie(self, tmdb: TMDBClient, res: Dict[str, Any], language: str, tmdb_id: int, config: UserConfig) -> Meta:
        external_ids = res.get("external_ids") or {}
        imdb_id = external_ids.get("imdb_id") or res.get("imdb_id") or None

        enriched = await self._enrich({
            "poster": self._poster("movie", tmdb_id, res.get("poster_path"), language, config),
            "logo": self.artwork.get_logo("movie", tmdb_id, language, res.get("original_language"), tmdb=tmdb),
            "imdb_rating": self._imdb_rating("movie", imdb_id),
        })
        videos = await self._ensure_videos(tmdb, res, "movie", tmdb_id)

        imdb_rating = (
            enriched["imdb_rating"].or_default(ENRICHMENT_DEFAULTS["imdb_rating"])
            or parsers.format_rating(res.get("vote_average"))
            or "N/A"
        )
        title = res.get("title") or ""
        genres = parsers.parse_genres(res.get("genres"))
        cast = parsers.parse_cast(res.get("credits"))
        directors = parsers.parse_director(res.get("credits"))
        writers = parsers.parse_writer(res.get("credits"))
        release_date = res.get("release_date") or ""

        return Meta(
            id=f"tmdb:{tmdb_id}",
            type="movie",
            name=title,
            imdb_id=imdb_id,
            imdbRating=imdb_rating,
            description=res.get("overview"),
            genre=genres,
            genres=genres,
            director=directors,
            writer=writers,
            released=f"{release_date}T00:00:00.000Z" if release_date else None,
            releaseInfo=release_date[:4],
            year=release_date[:4],
            runtime=parsers.parse_runtime(res.get("runtime")),
            country=parsers.parse_country(res.get("production_countries")),
            slug=parsers.parse_slug("movie", title, imdb_id),
            poster=enriched["poster"].or_default(parsers.tmdb_image(res.get("poster_path"))),
            background=parsers.tmdb_image(res.get("backdrop_path"), "original"),
            logo=process_logo(enriched["logo"].or_default(ENRICHMENT_DEFAULTS["logo"])),
            trailers=parsers.parse_trailers(videos),
            links=self._links(imdb_rating, imdb_id, title, "movie", genres, cast, directors, writers, language),
            behaviorHints={
                "defaultVideoId": imdb_id or f"tmdb:{tmdb_id}",
                "hasScheduledVideos": False,
            },
            app_extras=AppExtras(cast=cast),
        )

    async def _build_series(self, tmdb: TMDBClient, res: Dict[str, Any], language: str, tmdb_id: int, config: UserConfig) -> Meta:
        external_ids = res.get("external_ids") or {}
        imdb_id = external_ids.get("imdb_id") or None
        runtime = (
            (res.get("episode_run_time") or [None])[0]
            or (res.get("last_episode_to_air") or {}).get("runtime")
            or (res.get("next_episode_to_air") or {}).get("runtime")
        )

        enriched = await self._enrich({
            "poster": self._poster("series", tmdb_id, res.get("poster_path"), language, config),
            "logo": self.artwork.get_logo(
                "series", tmdb_id, language, res.get("original_language"),
                tvdb_id=external_ids.get("tvdb_id"), tmdb=tmdb,
            ),
            "imdb_rating": self._imdb_rating("series", imdb_id),
            "episodes": self._episodes(
                tmdb, tmdb_id, imdb_id, res.get("seasons") or [], language, config.hide_episode_thumbnails
            ),
        })
        videos = await self._ensure_videos(tmdb, res, "series", tmdb_id)

        imdb_rating = (
            enriched["imdb_rating"].or_default(ENRICHMENT_DEFAULTS["imdb_rating"])
            or parsers.format_rating(res.get("vote_average"))
            or "N/A"
        )
        title = res.get("name") or ""
        genres = parsers.parse_genres(res.get("genres"))
        cast = parsers.parse_cast(res.get("credits"))
        writers = parsers.parse_created_by(res.get("created_by"))
        year = parsers.parse_year(res.get("status"), res.get("first_air_date"), res.get("last_air_date"))
        first_air_date = res.get("first_air_date") or ""

        return Meta(
            id=f"tmdb:{tmdb_id}",
            type="series",
            name=title,
            imdb_id=imdb_id,
            imdbRating=imdb_rating,
            description=res.get("overview"),
            genre=genres,
            genres=genres,
            writer=writers,
            released=f"{first_air_date}T00:00:00.000Z" if first_air_date else None,
            releaseInfo=year,
            year=year,
            runtime=parsers.parse_runtime(runtime),
            country=parsers.parse_country(res.get("production_countries")),
            status=res.get("status"),
            slug=parsers.parse_slug("series", title, imdb_id),
            poster=enriched["poster"].or_default(parsers.tmdb_image(res.get("poster_path"))),
            background=parsers.tmdb_image(res.get("backdrop_path"), "original"),
            logo=process_logo(enriched["logo"].or_default(ENRICHMENT_DEFAULTS["logo"])),
            videos=enriched["episodes"].or_default(ENRICHMENT_DEFAULTS["episodes"]),
            trailers=parsers.parse_trailers(videos),
            links=self._links(imdb_rating, imdb_id, title, "series", genres, cast, [], writers, language),
            behaviorHints={
                "defaultVideoId": None,
                "hasScheduledVideos": True,
            },
            app_extras=AppExtras(cast=cast),
        )
