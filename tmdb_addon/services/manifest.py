"""
Manifest Service
Assembles the addon manifest from the user's catalog selection
"""
import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from tmdb_addon.core.catalog_types import (
    DEFAULT_CATALOGS,
    PAGE_SIZE,
    YEAR_OPTIONS_COUNT,
    CatalogDefinition,
    get_catalog_definition,
)
from tmdb_addon.core.config import settings
from tmdb_addon.models.config import CatalogConfig, UserConfig
from tmdb_addon.models.stremio import CatalogExtra, Manifest, ManifestCatalog
from tmdb_addon.services.catalog import TOP_GENRE
from tmdb_addon.services.mdblist import MDBListClient
from tmdb_addon.services.tmdb import TMDBClient
from tmdb_addon.core.translations import load_translations
from tmdb_addon.utils.parsers import mdblist_genres

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Stremio addon that provides rich metadata for movies and TV shows from TMDB, "
    "featuring customizable catalogs, MDBList lists, multi-language support, "
    "ratings and IMDb integration."
)


def generate_years(count: int = YEAR_OPTIONS_COUNT, current_year: Optional[int] = None) -> List[str]:
    """Years from the current one back ``count`` years, newest first"""
    latest = current_year or date.today().year
    return [str(year) for year in range(latest, latest - count - 1, -1)]


def order_languages(language: str, languages: List[Dict[str, Any]]) -> List[str]:
    """
    Language option names, the user's language first and the rest alphabetical

    Args:
        language: User language tag, e.g. "nl-NL"
        languages: TMDB configuration/languages payload
    """
    code = language.split("-")[0]
    names = sorted(
        (entry.get("english_name") or entry.get("name") or "" for entry in languages),
    )
    preferred = [
        entry.get("english_name") or entry.get("name")
        for entry in languages
        if entry.get("iso_639_1") == code
    ]
    ordered: List[str] = []
    for name in preferred + names:
        if name and name not in ordered:
            ordered.append(name)
    return ordered


def default_catalogs() -> List[CatalogConfig]:
    """Every default catalog kind for movies and series"""
    return [
        CatalogConfig(id=f"tmdb.{key}", type=media_type, show_in_home=True)
        for key in DEFAULT_CATALOGS
        for media_type in ("movie", "series")
    ]


def describe_settings(config: UserConfig, catalog_count: int) -> str:
    """One-line summary of active settings for the manifest description"""
    return " | ".join([
        f"Language: {config.language}",
        f"MDBList: {'Connected' if config.mdblist_api_key else 'Not Connected'}",
        f"IMDb Integration: {'Enabled' if config.provide_imdb_id else 'Disabled'}",
        f"RPDB Integration: {'Enabled' if config.rpdb_api_key else 'Disabled'}",
        f"Search: {'Enabled' if config.search_enabled else 'Disabled'}",
        f"Active Catalogs: {catalog_count}",
    ])


class ManifestService:
    """Builds per-user manifests"""

    def __init__(self, tmdb: TMDBClient):
        self.tmdb = tmdb

    def _display_name(self, name_key: str, translations: Dict[str, str], config: UserConfig) -> str:
        name = translations.get(name_key, name_key)
        return f"TMDB - {name}" if config.tmdb_prefix else name

    def _catalog(
        self,
        user_catalog: CatalogConfig,
        definition: CatalogDefinition,
        options: List[str],
        translations: Dict[str, str],
        config: UserConfig,
    ) -> ManifestCatalog:
        extra = []
        if "genre" in definition.extra_supported:
            extra.append(CatalogExtra(name="genre", options=options, isRequired=not user_catalog.show_in_home))
        if "search" in definition.extra_supported:
            extra.append(CatalogExtra(name="search"))
        if "skip" in definition.extra_supported:
            extra.append(CatalogExtra(name="skip"))

        return ManifestCatalog(
            id=user_catalog.id,
            type=user_catalog.type,
            name=self._display_name(definition.name_key, translations, config),
            pageSize=PAGE_SIZE,
            extra=extra,
        )

    async def _mdblist_catalog(self, user_catalog: CatalogConfig, config: UserConfig) -> ManifestCatalog:
        """MDBList catalog with genre options taken from the list's own items"""
        list_id = user_catalog.id.split("_")[1] if "_" in user_catalog.id else ""
        genres: List[str] = []
        if config.mdblist_api_key:
            client = MDBListClient(config.mdblist_api_key, session=await self.tmdb.get_session())
            genres = mdblist_genres(await client.get_items(list_id))

        return ManifestCatalog(
            id=user_catalog.id,
            type=user_catalog.type,
            name=user_catalog.name or list_id,
            pageSize=PAGE_SIZE,
            extra=[
                CatalogExtra(name="genre", options=genres, isRequired=False),
                CatalogExtra(name="skip"),
            ],
            showInHome=user_catalog.show_in_home,
        )

    async def build_manifest(self, config: UserConfig) -> Manifest:
        """
        Manifest for a user configuration

        Args:
            config: Decoded user configuration

        Returns:
            Manifest listing the enabled catalogs, plus search catalogs
            when search is enabled
        """
        language = config.language
        translations = load_translations(language)
        user_catalogs = [c for c in (config.catalogs or default_catalogs()) if c.enabled]

        tmdb = await self.tmdb.with_api_key(config.tmdb_api_key)
        movie_genres, series_genres, languages = await asyncio.gather(
            tmdb.get_genres("movie", language),
            tmdb.get_genres("series", language),
            tmdb.get_languages(),
        )
        genre_names = {
            "movie": sorted(genre["name"] for genre in movie_genres),
            "series": sorted(genre["name"] for genre in series_genres),
        }
        years = generate_years()
        language_names = order_languages(language, languages)

        def options_for(definition: CatalogDefinition, user_catalog: CatalogConfig) -> List[str]:
            if definition.name_key == "year":
                return years
            if definition.name_key == "language":
                return language_names
            genres = genre_names[user_catalog.type]
            return genres if user_catalog.show_in_home else [TOP_GENRE] + genres

        catalogs: List[Optional[ManifestCatalog]] = []
        pending = {}
        for user_catalog in user_catalogs:
            if user_catalog.id.startswith("mdblist_"):
                pending[len(catalogs)] = self._mdblist_catalog(user_catalog, config)
                catalogs.append(None)
                continue
            definition = get_catalog_definition(user_catalog.id)
            if definition is None:
                logger.warning("Skipping unknown catalog %s", user_catalog.id)
                continue
            catalogs.append(self._catalog(
                user_catalog, definition, options_for(definition, user_catalog), translations, config
            ))

        # MDBList genre options need one list fetch each; run them together
        fetched = await asyncio.gather(*pending.values())
        for index, catalog in zip(pending, fetched):
            catalogs[index] = catalog

        if config.search_enabled:
            for media_type in ("movie", "series"):
                catalogs.append(ManifestCatalog(
                    id="tmdb.search",
                    type=media_type,
                    name=self._display_name("search", translations, config),
                    extra=[CatalogExtra(name="search", isRequired=True, options=[])],
                ))

        base_url = settings.BASE_URL.rstrip("/")
        return Manifest(
            description=f"{DESCRIPTION} Current settings: {describe_settings(config, len(catalogs))}",
            favicon=f"{base_url}/favicon.png",
            logo=f"{base_url}/logo.png",
            background=f"{base_url}/background.png",
            idPrefixes=["tmdb:", "tt"] if config.provide_imdb_id else ["tmdb:"],
            catalogs=catalogs,
        )
