"""
User Configuration Models
Pydantic models for user-specific configuration
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional

from tmdb_addon.core.config import settings


AgeRating = Literal["G", "PG", "PG-13", "R", "NC-17"]


class CatalogConfig(BaseModel):
    """A catalog the user enabled on the configuration page"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: Literal["movie", "series"]
    name: Optional[str] = None
    enabled: bool = True
    show_in_home: bool = Field(False, alias="showInHome")


class UserConfig(BaseModel):
    """User configuration embedded in addon URL"""
    model_config = ConfigDict(populate_by_name=True)

    language: str = Field(settings.DEFAULT_LANGUAGE, description="TMDB language tag, e.g. en-US")
    age_rating: Optional[AgeRating] = Field(None, alias="ageRating")
    tmdb_api_key: Optional[str] = Field(
        None,
        alias="tmdbkey",
        description="TMDB API key; falls back to the server key when unset",
    )
    mdblist_api_key: Optional[str] = Field(None, alias="mdblistkey")
    rpdb_api_key: Optional[str] = Field(None, alias="rpdbkey", description="RatingPosterDB API key")
    provide_imdb_id: bool = Field(False, alias="provideImdbId")
    tmdb_prefix: bool = Field(False, alias="tmdbPrefix")
    hide_episode_thumbnails: bool = Field(False, alias="hideEpisodeThumbnails")
    search_enabled: bool = Field(True, alias="searchEnabled")
    catalogs: List[CatalogConfig] = Field(default_factory=list)

    @field_validator("age_rating", mode="before")
    @classmethod
    def empty_age_rating(cls, value):
        # The configuration page sends "" when no rating is selected
        return value or None

    @field_validator("language")
    @classmethod
    def validate_language(cls, value: str) -> str:
        return value.strip() or settings.DEFAULT_LANGUAGE
