"""
Configuration Endpoint
Turns a configuration payload into an install URL
"""
from fastapi import APIRouter
from tmdb_addon.core.config import settings
from tmdb_addon.models.config import UserConfig
from tmdb_addon.utils.token import encode_config

router = APIRouter()


@router.post("/install-url")
async def generate_install_url(config: UserConfig):
    """
    Encode a user configuration into the addon's install URL

    Accepts the configuration page's field names (tmdbkey, ageRating, ...)
    """
    token = encode_config(config)
    base_url = str(settings.BASE_URL).rstrip("/")

    return {
        "success": True,
        "token": token,
        "install_url": f"{base_url}/{token}/manifest.json",
    }
