"""
Health Check Endpoint
"""
from fastapi import APIRouter, Depends, Query
from tmdb_addon.api.dependencies import get_services
from tmdb_addon.core.config import settings
from tmdb_addon.services.addon import AddonServices

router = APIRouter()


@router.get("/health")
async def health_check(
    include_cache: bool = Query(False, description="Include in-memory cache metrics"),
    services: AddonServices = Depends(get_services),
):
    """Health check endpoint for monitoring"""
    payload = {
        "status": "healthy",
        "version": "1.0.0",
        "base_url": settings.BASE_URL,
    }

    if include_cache:
        payload["cache_metrics"] = services.cache_metrics()

    return payload
