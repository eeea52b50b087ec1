"""
Manifest Endpoint
Returns the Stremio addon manifest for a user configuration
"""
import logging
from fastapi import APIRouter, Depends, Response
from tmdb_addon.api.dependencies import get_services, get_user_config
from tmdb_addon.models.config import UserConfig
from tmdb_addon.services.addon import AddonServices

logger = logging.getLogger(__name__)
router = APIRouter()


def _no_cache(response: Response):
    # Stremio keeps stale catalog names otherwise
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"


@router.get("/manifest.json")
async def get_default_manifest(
    response: Response,
    services: AddonServices = Depends(get_services),
):
    """Manifest with the default catalogs and settings"""
    _no_cache(response)
    manifest = await services.manifest.build_manifest(UserConfig())
    return manifest.model_dump(exclude_none=True)


@router.get("/{config}/manifest.json")
async def get_manifest(
    response: Response,
    config: UserConfig = Depends(get_user_config),
    services: AddonServices = Depends(get_services),
):
    """
    Return addon manifest with user-specific configuration

    The manifest defines what catalogs this addon provides
    """
    _no_cache(response)
    manifest = await services.manifest.build_manifest(config)
    logger.info("Manifest generated with %s catalogs", len(manifest.catalogs))
    return manifest.model_dump(exclude_none=True)
