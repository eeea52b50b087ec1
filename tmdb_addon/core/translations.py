"""
Catalog Translations
Localized catalog names and MDBList genre labels
"""
from typing import Dict

from tmdb_addon.core.config import settings

CATALOG_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en-US": {
        "popular": "Popular",
        "year": "Year",
        "language": "Language",
        "search": "Search",
        "streaming": "Streaming",
        "netflix": "Netflix",
        "netflix_kids": "Netflix Kids",
        "max": "Max",
        "disney_plus": "Disney+",
        "prime_video": "Prime Video",
        "apple_tv_plus": "Apple TV+",
        "paramount_plus": "Paramount+",
        "peacock": "Peacock",
        "hulu": "Hulu",
        "crunchyroll": "Crunchyroll",
        "magellan_tv": "MagellanTV",
        "curiosity_stream": "Curiosity Stream",
        "zee5": "ZEE5",
        "hayu": "hayu",
        "claro_video": "Claro Video",
        "globoplay": "Globoplay",
        "videoland": "Videoland",
        "skyshowtime": "SkyShowtime",
        "npo_start": "NPO Start",
        "canal_plus": "Canal+",
        "discovery_plus": "discovery+",
    },
    "nl-NL": {
        "popular": "Populair",
        "year": "Jaar",
        "language": "Taal",
        "search": "Zoeken",
    },
    "de-DE": {
        "popular": "Beliebt",
        "year": "Jahr",
        "language": "Sprache",
        "search": "Suche",
    },
    "fr-FR": {
        "popular": "Populaire",
        "year": "Année",
        "language": "Langue",
        "search": "Rechercher",
    },
    "es-ES": {
        "popular": "Popular",
        "year": "Año",
        "language": "Idioma",
        "search": "Buscar",
    },
    "pt-BR": {
        "popular": "Popular",
        "year": "Ano",
        "language": "Idioma",
        "search": "Buscar",
    },
}

# MDBList returns lowercase slugs; unknown tags are title-cased
GENRE_TRANSLATIONS: Dict[str, str] = {
    "action": "Action",
    "adventure": "Adventure",
    "animation": "Animation",
    "anime": "Anime",
    "biography": "Biography",
    "comedy": "Comedy",
    "crime": "Crime",
    "documentary": "Documentary",
    "drama": "Drama",
    "family": "Family",
    "fantasy": "Fantasy",
    "film-noir": "Film Noir",
    "history": "History",
    "horror": "Horror",
    "kids": "Kids",
    "music": "Music",
    "musical": "Musical",
    "mystery": "Mystery",
    "news": "News",
    "reality": "Reality",
    "reality-tv": "Reality",
    "romance": "Romance",
    "science-fiction": "Science Fiction",
    "sci-fi": "Science Fiction",
    "sci-fi-fantasy": "Sci-Fi & Fantasy",
    "soap": "Soap",
    "sport": "Sport",
    "talk": "Talk",
    "talk-show": "Talk",
    "thriller": "Thriller",
    "tv-movie": "TV Movie",
    "war": "War",
    "war-politics": "War & Politics",
    "western": "Western",
}


def load_translations(language: str) -> Dict[str, str]:
    """Catalog names for a language, falling back per key to the default language, then English"""
    translations = dict(CATALOG_TRANSLATIONS["en-US"])
    translations.update(CATALOG_TRANSLATIONS.get(settings.DEFAULT_LANGUAGE, {}))
    translations.update(CATALOG_TRANSLATIONS.get(language, {}))
    return translations


def translate_genre(tag: str) -> str:
    """Display label for a raw MDBList genre tag"""
    key = tag.strip().lower()
    if key in GENRE_TRANSLATIONS:
        return GENRE_TRANSLATIONS[key]
    return key.replace("-", " ").title()
