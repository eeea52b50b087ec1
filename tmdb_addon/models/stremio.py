"""
Stremio Protocol Models
Pydantic models for Stremio addon protocol
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Literal


class CatalogExtra(BaseModel):
    """Extra filter capability advertised by a catalog"""
    name: str
    options: Optional[List[str]] = None
    isRequired: Optional[bool] = None


class ManifestCatalog(BaseModel):
    """Catalog definition in manifest"""
    type: Literal["movie", "series"]
    id: str
    name: str
    pageSize: Optional[int] = None
    extra: List[CatalogExtra] = Field(default_factory=list)
    showInHome: Optional[bool] = None


class Manifest(BaseModel):
    """Stremio addon manifest"""
    id: str = "org.stremio.tmdb-addon"
    version: str = "1.0.0"
    name: str = "The Movie Database"
    description: str = ""
    favicon: Optional[str] = None
    logo: Optional[str] = None
    background: Optional[str] = None

    resources: List[str] = ["catalog", "meta"]
    types: List[str] = ["movie", "series"]
    idPrefixes: List[str] = ["tmdb:"]

    catalogs: List[ManifestCatalog]

    behaviorHints: dict = {
        "configurable": True,
        "configurationRequired": False,
    }


class CatalogMeta(BaseModel):
    """Catalog item (poster) metadata, shared by TMDB and MDBList catalogs"""
    id: str  # tmdb:<id> or IMDB ID
    type: Literal["movie", "series"]
    name: str
    poster: Optional[str] = None
    posterShape: str = "regular"
    background: Optional[str] = None
    genre: List[str] = Field(default_factory=list)
    year: Optional[str] = None
    imdbRating: Optional[str] = None
    description: Optional[str] = None


class CatalogResponse(BaseModel):
    """Catalog endpoint response"""
    metas: List[CatalogMeta]
    availableGenres: Optional[List[str]] = None


class Trailer(BaseModel):
    name: str
    externalUrl: str


class Link(BaseModel):
    name: str
    category: str
    url: str


class CastMember(BaseModel):
    name: str
    character: Optional[str] = None
    photo: Optional[str] = None


class AppExtras(BaseModel):
    cast: List[CastMember] = Field(default_factory=list)


class Video(BaseModel):
    """Series episode entry"""
    id: str
    name: str
    season: int
    episode: int
    number: int
    released: Optional[str] = None
    overview: Optional[str] = None
    thumbnail: Optional[str] = None


class Meta(BaseModel):
    """Full detail record for a single movie or series"""
    id: str
    type: Literal["movie", "series"]
    name: str
    imdb_id: Optional[str] = None
    imdbRating: Optional[str] = None
    description: Optional[str] = None
    genre: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    director: List[str] = Field(default_factory=list)
    writer: List[str] = Field(default_factory=list)
    released: Optional[str] = None
    releaseInfo: str = ""
    year: str = ""
    runtime: str = ""
    country: str = ""
    status: Optional[str] = None
    slug: str = ""
    poster: Optional[str] = None
    background: Optional[str] = None
    logo: Optional[str] = None
    trailers: List[Trailer] = Field(default_factory=list)
    videos: List[Video] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
    behaviorHints: dict = Field(default_factory=dict)
    app_extras: AppExtras = Field(default_factory=AppExtras)


class MetaResponse(BaseModel):
    """Meta endpoint response"""
    meta: Meta
