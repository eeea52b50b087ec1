"""
Addon Services
Process-wide container wiring the upstream clients to the catalog, meta and manifest services
"""
import logging
from typing import Optional

from tmdb_addon.services.artwork import ArtworkService
from tmdb_addon.services.catalog import CatalogService
from tmdb_addon.services.cinemeta import CinemetaClient
from tmdb_addon.services.manifest import ManifestService
from tmdb_addon.services.meta import MetaService
from tmdb_addon.services.tmdb import TMDBClient

logger = logging.getLogger(__name__)


class AddonServices:
    """Owns the shared clients and caches for the lifetime of the app"""

    def __init__(
        self,
        tmdb: Optional[TMDBClient] = None,
        artwork: Optional[ArtworkService] = None,
        cinemeta: Optional[CinemetaClient] = None,
    ):
        self.tmdb = tmdb or TMDBClient()
        self.artwork = artwork or ArtworkService(self.tmdb)
        self.cinemeta = cinemeta or CinemetaClient()

        self.catalog = CatalogService(self.tmdb, self.artwork)
        self.meta = MetaService(self.tmdb, self.artwork, self.cinemeta)
        self.manifest = ManifestService(self.tmdb)

    def cache_metrics(self) -> dict:
        """Hit/miss counters of the in-memory caches"""
        return {
            "meta": self.meta.cache.get_metrics_snapshot(),
            "imdb_rating": self.meta.rating_cache.get_metrics_snapshot(),
            "poster_check": self.artwork.poster_check_cache.get_metrics_snapshot(),
            "genres": self.tmdb.genre_cache.get_metrics_snapshot(),
        }

    async def close(self):
        """Close every client session this container opened"""
        await self.tmdb.close()
        await self.artwork.close()
        await self.cinemeta.close()
        logger.info("Addon client sessions closed")
