"""
Meta Endpoint
Returns full movie/series details
"""
from fastapi import APIRouter, Depends, Path, Response

from tmdb_addon.api.dependencies import check_media_type, get_services, get_user_config
from tmdb_addon.core.config import settings
from tmdb_addon.models.config import UserConfig
from tmdb_addon.services.addon import AddonServices

router = APIRouter()


@router.get("/{config}/meta/{type}/{id}.json")
async def get_meta(
    response: Response,
    type: str = Path(..., description="Content type: movie or series"),
    id: str = Path(..., description="tmdb:<id> or IMDb id"),
    config: UserConfig = Depends(get_user_config),
    services: AddonServices = Depends(get_services),
):
    check_media_type(type)
    meta = await services.meta.get_meta(type, config.language, id, config)
    response.headers["Cache-Control"] = f"max-age={settings.CACHE_TTL_META}"
    return meta.model_dump(exclude_none=True)
