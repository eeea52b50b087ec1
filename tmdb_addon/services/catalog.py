"""
Catalog Service
Resolves catalog ids into upstream queries and normalizes the results
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from tmdb_addon.core.catalog_types import PAGE_SIZE, STREAMING_PROVIDERS, StreamingProvider
from tmdb_addon.core.config import settings
from tmdb_addon.core.exceptions import ConfigError, NotFoundError
from tmdb_addon.models.config import UserConfig
from tmdb_addon.models.stremio import CatalogMeta, CatalogResponse
from tmdb_addon.services.artwork import ArtworkService
from tmdb_addon.services.mdblist import MDBListClient
from tmdb_addon.services.tmdb import TMDBClient
from tmdb_addon.utils.helpers import deduplicate, gather_in_batches
from tmdb_addon.utils.parsers import get_rpdb_poster, parse_mdblist_items, parse_media

logger = logging.getLogger(__name__)

TOP_GENRE = "Top"

CERTIFICATIONS = {
    "movie": ("G", "PG", "PG-13", "R"),
    "series": ("TV-G", "TV-PG", "TV-14", "TV-MA"),
}
# Number of certification levels allowed per age rating; NC-17 adds no filter
AGE_RATING_LEVELS = {"G": 1, "PG": 2, "PG-13": 3, "R": 4}

STREAMING_MONETIZATION = "flatrate|free|ads"
TOP_SERIES_MONETIZATION = "flatrate|free|ads|rent|buy"


@dataclass(frozen=True)
class CatalogRequest:
    """Structured form of one catalog call"""
    provider: str  # "tmdb" or "mdblist"
    media_type: str
    filter_kind: str  # top | year | language | streaming | mdblist | search | unknown
    raw_id: str
    page: int = 1
    genre_or_year: Optional[str] = None
    list_id: Optional[str] = None
    streaming_provider: Optional[StreamingProvider] = None
    search: Optional[str] = None


def resolve_catalog_id(
    catalog_id: str,
    media_type: str,
    config: UserConfig,
    page: int = 1,
    genre: Optional[str] = None,
    search: Optional[str] = None,
) -> CatalogRequest:
    """
    Classify a catalog id

    Raises:
        ConfigError: MDBList catalog requested without an MDBList key
        NotFoundError: unknown streaming provider key
    """
    if catalog_id.startswith("mdblist_"):
        parts = catalog_id.split("_")
        if not config.mdblist_api_key:
            raise ConfigError("MDBList API key is required for MDBList catalogs")
        list_id = parts[1] if len(parts) > 1 else ""
        list_type = parts[2] if len(parts) > 2 and parts[2] in CERTIFICATIONS else media_type
        return CatalogRequest(
            provider="mdblist",
            media_type=list_type,
            filter_kind="mdblist",
            raw_id=catalog_id,
            page=page,
            genre_or_year=genre,
            list_id=list_id,
        )

    if "streaming" in catalog_id:
        parts = catalog_id.split(".")
        provider_key = parts[1] if len(parts) > 1 else ""
        provider = STREAMING_PROVIDERS.get(provider_key)
        if provider is None:
            raise NotFoundError("Streaming provider", provider_key)
        return CatalogRequest(
            provider="tmdb",
            media_type=media_type,
            filter_kind="streaming",
            raw_id=catalog_id,
            page=page,
            genre_or_year=genre,
            streaming_provider=provider,
        )

    filter_kind = {
        "tmdb.top": "top",
        "tmdb.year": "year",
        "tmdb.language": "language",
        "tmdb.search": "search",
    }.get(catalog_id, "unknown")
    return CatalogRequest(
        provider="tmdb",
        media_type=media_type,
        filter_kind=filter_kind,
        raw_id=catalog_id,
        page=page,
        genre_or_year=genre,
        search=search,
    )


def find_genre_id(genre_name: Optional[str], genre_list: List[Dict[str, Any]]) -> Optional[int]:
    """Genre name -> TMDB id; "Top" and unknown names mean no filter"""
    if not genre_name or genre_name == TOP_GENRE:
        return None
    for genre in genre_list:
        if genre.get("name") == genre_name:
            return genre["id"]
    return None


def find_language_code(name: str, languages: List[Dict[str, Any]]) -> Optional[str]:
    """Language display name (English or native) -> ISO 639-1 code"""
    for language in languages:
        if name in (language.get("english_name"), language.get("name")):
            return language["iso_639_1"].split("-")[0]
    return None


def certification_filter(age_rating: Optional[str], media_type: str) -> Optional[str]:
    """Pipe-joined cumulative certification list for an age rating"""
    levels = AGE_RATING_LEVELS.get(age_rating or "")
    if not levels:
        return None
    return "|".join(CERTIFICATIONS[media_type][:levels])


def build_parameters(
    request: CatalogRequest,
    language: str,
    age_rating: Optional[str],
    genre_list: List[Dict[str, Any]],
    languages: Optional[List[Dict[str, Any]]] = None,
    current_year: Optional[int] = None,
) -> Dict[str, Any]:
    """
    TMDB discover parameters for a catalog request

    Args:
        request: Resolved catalog request
        language: User language tag, e.g. "en-US"
        age_rating: G, PG, PG-13, R, NC-17 or None
        genre_list: Genres for resolving genre names to ids
        languages: TMDB language list, needed for the language catalog
        current_year: Default year for the year catalog

    Returns:
        Query parameters; unknown filter kinds leave the base parameters
    """
    parameters: Dict[str, Any] = {"language": language, "page": request.page, "vote_count.gte": 10}
    media_type = request.media_type
    argument = request.genre_or_year

    certification = certification_filter(age_rating, media_type)
    if certification:
        parameters["certification_country"] = "US"
        parameters["certification"] = certification

    if request.filter_kind == "streaming":
        provider = request.streaming_provider
        genre_id = find_genre_id(argument, genre_list)
        if genre_id is not None:
            parameters["with_genres"] = genre_id
        parameters["with_watch_providers"] = provider.watch_provider_id
        parameters["watch_region"] = provider.country
        parameters["with_watch_monetization_types"] = STREAMING_MONETIZATION

    elif request.filter_kind == "top":
        genre_id = find_genre_id(argument, genre_list)
        if genre_id is not None:
            parameters["with_genres"] = genre_id
        if media_type == "series":
            region = language.split("-")[1] if "-" in language else None
            if region:
                parameters["watch_region"] = region
            parameters["with_watch_monetization_types"] = TOP_SERIES_MONETIZATION

    elif request.filter_kind == "year":
        year = argument or str(current_year or date.today().year)
        field = "primary_release_year" if media_type == "movie" else "first_air_date_year"
        parameters[field] = year

    elif request.filter_kind == "language":
        code = find_language_code(argument, languages or []) if argument else None
        parameters["with_original_language"] = code or language.split("-")[0]

    return parameters


class CatalogService:
    """Builds catalog responses for TMDB and MDBList catalogs"""

    def __init__(self, tmdb: TMDBClient, artwork: ArtworkService):
        self.tmdb = tmdb
        self.artwork = artwork

    async def mdblist_client(self, config: UserConfig) -> MDBListClient:
        """Per-user MDBList client on the shared TMDB session"""
        return MDBListClient(config.mdblist_api_key, session=await self.tmdb.get_session())

    async def get_catalog(
        self,
        media_type: str,
        language: str,
        page: int,
        catalog_id: str,
        genre: Optional[str],
        config: UserConfig,
        search: Optional[str] = None,
    ) -> CatalogResponse:
        """
        Build one catalog page

        Args:
            media_type: "movie" or "series"
            language: Language tag for titles and genre names
            page: 1-based page number
            catalog_id: e.g. "tmdb.top", "streaming.nfx", "mdblist_42_movie"
            genre: Genre, year or language option chosen by the user
            config: User configuration
            search: Free-text query for the search catalog

        Returns:
            CatalogResponse; upstream list failures yield an empty page
        """
        request = resolve_catalog_id(catalog_id, media_type, config, page, genre, search)

        if request.provider == "mdblist":
            return await self._mdblist_catalog(request, config)

        tmdb = await self.tmdb.with_api_key(config.tmdb_api_key)
        genre_list = await tmdb.get_genres(media_type, language)

        if request.filter_kind == "search":
            if not request.search:
                return CatalogResponse(metas=[])
            results = await tmdb.search(media_type, request.search, language, page)
        else:
            languages = []
            if request.filter_kind == "language" and request.genre_or_year:
                languages = await tmdb.get_languages()
            parameters = build_parameters(request, language, config.age_rating, genre_list, languages)
            results = await tmdb.discover(media_type, parameters)

        metas = [parse_media(item, media_type, genre_list) for item in results if item.get("id")]
        logger.info("Catalog %s (%s) page %s returned %s items", catalog_id, media_type, page, len(metas))
        return CatalogResponse(metas=metas)

    async def _mdblist_catalog(self, request: CatalogRequest, config: UserConfig) -> CatalogResponse:
        client = await self.mdblist_client(config)
        items = await client.get_items(request.list_id)
        logger.info("MDBList list %s returned %s raw items", request.list_id, len(items))

        metas = deduplicate(parse_mdblist_items(items, request.media_type), key=lambda meta: meta.id)
        available_genres = sorted({genre for meta in metas for genre in meta.genre})

        selected = request.genre_or_year
        if selected and selected != TOP_GENRE:
            metas = [meta for meta in metas if selected in meta.genre]

        start = (request.page - 1) * PAGE_SIZE
        metas = metas[start:start + PAGE_SIZE]

        if config.rpdb_api_key:
            metas = await self._apply_rating_posters(metas, request.media_type, config)

        return CatalogResponse(metas=metas, availableGenres=available_genres)

    async def _apply_rating_posters(
        self,
        metas: List[CatalogMeta],
        media_type: str,
        config: UserConfig,
    ) -> List[CatalogMeta]:
        """Swap in rating posters where they exist, a bounded number of probes at a time"""

        async def with_rating_poster(meta: CatalogMeta) -> CatalogMeta:
            if not meta.id.startswith("tmdb:"):
                return meta
            url = get_rpdb_poster(media_type, meta.id.split(":", 1)[1], config.language, config.rpdb_api_key)
            if await self.artwork.poster_exists(url):
                return meta.model_copy(update={"poster": url})
            return meta

        results = await gather_in_batches(metas, with_rating_poster, settings.MAX_CONCURRENT_API_CALLS)
        return [
            result if isinstance(result, CatalogMeta) else meta
            for meta, result in zip(metas, results)
        ]
