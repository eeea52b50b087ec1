"""
Catalog Endpoint
Returns TMDB and MDBList catalog pages
"""
import logging
from typing import Dict, Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Path, Request, Response

from tmdb_addon.api.dependencies import check_media_type, get_services, get_user_config
from tmdb_addon.core.catalog_types import PAGE_SIZE
from tmdb_addon.core.config import settings
from tmdb_addon.models.config import UserConfig
from tmdb_addon.services.addon import AddonServices
from tmdb_addon.utils.helpers import skip_to_page

logger = logging.getLogger(__name__)
router = APIRouter()


def parse_extra(extra: Optional[str]) -> Dict[str, str]:
    """
    Parse Stremio's extra path segment, e.g. "genre=Action&skip=40"

    Values are percent-decoded; unknown keys are kept as-is.
    """
    if not extra:
        return {}
    if extra.endswith(".json"):
        extra = extra[:-len(".json")]
    return dict(parse_qsl(extra, keep_blank_values=True))


def _raw_extra(request: Request, extra: str) -> str:
    # The decoded path param loses "&" inside values such as "Action & Adventure"
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1").split("?", 1)[0].rsplit("/", 1)[-1]
    return extra


async def _catalog_page(
    response: Response,
    services: AddonServices,
    config: UserConfig,
    media_type: str,
    catalog_id: str,
    extra: Dict[str, str],
):
    check_media_type(media_type)
    page = skip_to_page(extra.get("skip"), PAGE_SIZE)
    catalog = await services.catalog.get_catalog(
        media_type,
        config.language,
        page,
        catalog_id,
        extra.get("genre") or None,
        config,
        search=extra.get("search"),
    )
    response.headers["Cache-Control"] = f"max-age={settings.CACHE_TTL_CATALOG}"
    return catalog.model_dump(exclude_none=True)


@router.get("/{config}/catalog/{type}/{id}.json")
async def get_catalog(
    response: Response,
    type: str = Path(..., description="Content type: movie or series"),
    id: str = Path(..., description="Catalog ID, e.g. tmdb.top or streaming.nfx"),
    config: UserConfig = Depends(get_user_config),
    services: AddonServices = Depends(get_services),
):
    """First page of a catalog without filters"""
    return await _catalog_page(response, services, config, type, id, {})


@router.get("/{config}/catalog/{type}/{id}/{extra}.json")
async def get_catalog_with_extra(
    request: Request,
    response: Response,
    type: str = Path(..., description="Content type: movie or series"),
    id: str = Path(..., description="Catalog ID"),
    extra: str = Path(..., description="Extra filters, e.g. genre=Action&skip=20"),
    config: UserConfig = Depends(get_user_config),
    services: AddonServices = Depends(get_services),
):
    """Catalog page with genre/year/language, skip or search extras"""
    parsed = parse_extra(_raw_extra(request, extra))
    logger.debug("Catalog %s/%s extras: %s", type, id, parsed)
    return await _catalog_page(response, services, config, type, id, parsed)
