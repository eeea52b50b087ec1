"""
Catalog Definitions
Static tables of the catalog kinds and streaming providers the addon serves
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class CatalogDefinition:
    """A catalog kind that can be enabled for movies and/or series"""
    key: str
    name_key: str
    extra_supported: Tuple[str, ...]


@dataclass(frozen=True)
class StreamingProvider:
    """TMDB watch provider backing a ``streaming.<key>`` catalog"""
    key: str
    name_key: str
    watch_provider_id: str
    country: str


DEFAULT_CATALOGS: Dict[str, CatalogDefinition] = {
    "top": CatalogDefinition("top", "popular", ("genre", "skip")),
    "year": CatalogDefinition("year", "year", ("genre", "skip")),
    "language": CatalogDefinition("language", "language", ("genre", "skip")),
}

STREAMING_PROVIDERS: Dict[str, StreamingProvider] = {
    provider.key: provider
    for provider in (
        StreamingProvider("nfx", "netflix", "8", "US"),
        StreamingProvider("nfk", "netflix_kids", "175", "US"),
        StreamingProvider("hbm", "max", "1899", "US"),
        StreamingProvider("dnp", "disney_plus", "337", "US"),
        StreamingProvider("amp", "prime_video", "119", "US"),
        StreamingProvider("atp", "apple_tv_plus", "350", "US"),
        StreamingProvider("pmp", "paramount_plus", "531", "US"),
        StreamingProvider("pcp", "peacock", "386", "US"),
        StreamingProvider("hlu", "hulu", "15", "US"),
        StreamingProvider("cru", "crunchyroll", "283", "US"),
        StreamingProvider("mgl", "magellan_tv", "551", "US"),
        StreamingProvider("cts", "curiosity_stream", "190", "US"),
        StreamingProvider("zee", "zee5", "232", "IN"),
        StreamingProvider("hay", "hayu", "223", "GB"),
        StreamingProvider("clv", "claro_video", "167", "BR"),
        StreamingProvider("gop", "globoplay", "307", "BR"),
        StreamingProvider("vil", "videoland", "72", "NL"),
        StreamingProvider("sst", "skyshowtime", "1773", "NL"),
        StreamingProvider("nlz", "npo_start", "1872", "NL"),
        StreamingProvider("cpd", "canal_plus", "381", "FR"),
        StreamingProvider("dpe", "discovery_plus", "510", "GB"),
    )
}

STREAMING_DEFINITION = CatalogDefinition("streaming", "streaming", ("genre", "skip"))

PAGE_SIZE = 20
YEAR_OPTIONS_COUNT = 20


def get_catalog_definition(catalog_id: str) -> Optional[CatalogDefinition]:
    """Resolve ``tmdb.top`` / ``streaming.nfx`` style ids to their definition"""
    parts = catalog_id.split(".")
    if len(parts) < 2:
        return None
    group, key = parts[0], parts[1]
    if group == "streaming":
        provider = STREAMING_PROVIDERS.get(key)
        if provider is None:
            return None
        return CatalogDefinition(key, provider.name_key, STREAMING_DEFINITION.extra_supported)
    return DEFAULT_CATALOGS.get(key)
