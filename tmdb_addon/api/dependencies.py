"""
Endpoint Dependencies
Shared FastAPI dependencies for the addon routes
"""
from fastapi import Path, Request

from tmdb_addon.core.exceptions import NotFoundError
from tmdb_addon.models.config import UserConfig
from tmdb_addon.services.addon import AddonServices
from tmdb_addon.utils.token import decode_config

MEDIA_TYPES = ("movie", "series")


def get_services(request: Request) -> AddonServices:
    return request.app.state.services


def get_user_config(config: str = Path(..., description="Encoded user configuration")) -> UserConfig:
    return decode_config(config)


def check_media_type(media_type: str) -> str:
    if media_type not in MEDIA_TYPES:
        raise NotFoundError("Content type", media_type)
    return media_type
