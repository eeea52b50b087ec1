"""
Response Parsers
Map TMDB and MDBList payloads onto Stremio catalog and meta shapes
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from tmdb_addon.core.config import settings
from tmdb_addon.core.translations import translate_genre
from tmdb_addon.models.stremio import CastMember, CatalogMeta, Link, Trailer, Video
from tmdb_addon.services.tmdb import IMAGE_BASE_URL

logger = logging.getLogger(__name__)

MDBLIST_MEDIATYPES = {"movie": "movie", "series": "show"}

EXCLUDE_KEYWORDS = (
    "review",
    "reaction",
    "analysis",
    "breakdown",
    "essay",
    "discussion",
    "shorts",
    "short",
    "scene",
    "clip",
    "fan",
    "spoiler",
    "interview",
    "featurette",
)
TRAILER_DISCARD_SCORE = -100


def tmdb_image(path: Optional[str], size: str = "w500") -> Optional[str]:
    """Full TMDB image URL for a file path, None when the path is missing"""
    if not path:
        return None
    return f"{IMAGE_BASE_URL}/{size}{path}"


def format_rating(vote_average: Any) -> Optional[str]:
    """Vote average with one decimal, None for missing or zero votes"""
    try:
        value = float(vote_average)
    except (TypeError, ValueError):
        return None
    return f"{value:.1f}" if value else None


# -- catalog items ---------------------------------------------------------

def parse_media(item: Dict[str, Any], media_type: str, genre_list: List[Dict[str, Any]]) -> CatalogMeta:
    """
    Convert a TMDB discover/search result into a catalog item

    Args:
        item: TMDB result entry
        media_type: "movie" or "series"
        genre_list: Genre id/name pairs for the request's language

    Returns:
        CatalogMeta with genre ids resolved to names ("Unknown" when unmapped)
    """
    names = {genre["id"]: genre["name"] for genre in genre_list}
    genres = [names.get(genre_id, "Unknown") for genre_id in item.get("genre_ids") or []]

    if media_type == "movie":
        name = item.get("title")
        date = item.get("release_date")
    else:
        name = item.get("name")
        date = item.get("first_air_date")

    return CatalogMeta(
        id=f"tmdb:{item['id']}",
        type="movie" if media_type == "movie" else "series",
        name=name or "",
        genre=genres,
        poster=tmdb_image(item.get("poster_path")),
        background=tmdb_image(item.get("backdrop_path"), "original"),
        imdbRating=format_rating(item.get("vote_average")) or "N/A",
        year=date[:4] if date else "",
        description=item.get("overview"),
    )


def parse_mdblist_item(item: Dict[str, Any], media_type: str) -> Optional[CatalogMeta]:
    """
    Convert an MDBList list item into a catalog item

    Returns None for items lacking an id, a title or a poster.
    """
    item_id = None
    if item.get("id"):
        item_id = f"tmdb:{item['id']}"
    elif str(item.get("imdb_id") or "").startswith("tt"):
        item_id = item["imdb_id"]

    name = item.get("title")
    poster = item.get("poster")
    if poster and poster.startswith("/"):
        poster = tmdb_image(poster)

    if not item_id or not name or not poster:
        logger.debug("Skipping incomplete MDBList item: %s", item.get("title") or item.get("id"))
        return None

    year = item.get("release_year")
    return CatalogMeta(
        id=item_id,
        type="movie" if media_type == "movie" else "series",
        name=name,
        poster=poster,
        genre=[translate_genre(tag) for tag in item.get("genre") or [] if isinstance(tag, str) and tag],
        year=str(year) if year else None,
        description=item.get("description"),
    )


def parse_mdblist_items(items: Iterable[Dict[str, Any]], media_type: str) -> List[CatalogMeta]:
    """Keep items whose mediatype tag matches and that parse completely"""
    tag = MDBLIST_MEDIATYPES[media_type]
    metas = []
    for item in items:
        if item.get("mediatype") != tag:
            continue
        meta = parse_mdblist_item(item, media_type)
        if meta is not None:
            metas.append(meta)
    return metas


def mdblist_genres(items: Iterable[Dict[str, Any]]) -> List[str]:
    """Sorted distinct display genres found on MDBList items"""
    genres = {
        translate_genre(tag)
        for item in items
        for tag in item.get("genre") or []
        if isinstance(tag, str) and tag.strip()
    }
    return sorted(genres)


def get_rpdb_poster(media_type: str, tmdb_id: Any, language: str, rpdb_key: str) -> str:
    """RatingPosterDB poster URL; non-English requires a paid tier"""
    tier = rpdb_key.split("-")[0]
    lang = language.split("-")[0]
    url = f"https://api.ratingposterdb.com/{rpdb_key}/tmdb/poster-default/{media_type}-{tmdb_id}.jpg?fallback=true"
    if tier in ("t0", "t1") or lang == "en":
        return url
    return f"{url}&lang={lang}"


# -- meta fields -----------------------------------------------------------

def parse_runtime(runtime: Optional[int]) -> str:
    """45 -> "45min", 90 -> "1h30min", 0/None -> "" """
    if not runtime:
        return ""
    if runtime < 60:
        return f"{runtime}min"
    hours, minutes = divmod(runtime, 60)
    return f"{hours}h{minutes}min"


def parse_year(status: Optional[str], first_air_date: Optional[str], last_air_date: Optional[str]) -> str:
    """Year range ("2008-2013") for ended series, start year otherwise"""
    if status == "Ended" and first_air_date and last_air_date:
        return first_air_date[:5] + last_air_date[:4]
    return first_air_date[:4] if first_air_date else ""


def parse_country(production_countries: Optional[List[Dict[str, Any]]]) -> str:
    return ", ".join(country["name"] for country in production_countries or [])


def parse_genres(genres: Optional[List[Dict[str, Any]]]) -> List[str]:
    return [genre["name"] for genre in genres or []]


def parse_cast(credits: Optional[Dict[str, Any]], limit: int = 5) -> List[CastMember]:
    if not credits or not isinstance(credits.get("cast"), list):
        return []
    return [
        CastMember(
            name=person["name"],
            character=person.get("character"),
            photo=tmdb_image(person.get("profile_path"), "w276_and_h350_face"),
        )
        for person in credits["cast"][:limit]
    ]


def _crew_with_job(credits: Optional[Dict[str, Any]], job: str) -> List[str]:
    if not credits or not isinstance(credits.get("crew"), list):
        return []
    return [person["name"] for person in credits["crew"] if person.get("job") == job]


def parse_director(credits: Optional[Dict[str, Any]]) -> List[str]:
    return _crew_with_job(credits, "Director")


def parse_writer(credits: Optional[Dict[str, Any]]) -> List[str]:
    return _crew_with_job(credits, "Writer")


def parse_created_by(created_by: Optional[List[Dict[str, Any]]]) -> List[str]:
    return [person["name"] for person in created_by or []]


def parse_slug(media_type: str, title: str, imdb_id: Optional[str]) -> str:
    """Stremio share slug, e.g. "movie/fight-club-0137523" """
    cleaned = re.sub(r"[^a-z0-9\-]", "", (title or "").lower().replace(" ", "-"))
    suffix = imdb_id.replace("tt", "") if imdb_id else ""
    return f"{media_type}/{cleaned}-{suffix}"


# -- trailers --------------------------------------------------------------

def has_excluded_keyword(name: Optional[str]) -> bool:
    lowered = (name or "").lower()
    return any(keyword in lowered for keyword in EXCLUDE_KEYWORDS)


def score_video(video: Dict[str, Any]) -> float:
    """Rank a TMDB video entry; commentary and clips get a heavy penalty"""
    score = 0.0
    if video.get("official") is True:
        score += 100

    video_type = video.get("type")
    if video_type == "Trailer":
        score += 50
    elif video_type == "Teaser":
        score += 20
    elif video_type == "Featurette":
        score += 10

    name = video.get("name") or ""
    if re.search("trailer", name, re.IGNORECASE):
        score += 10

    try:
        size = float(video.get("size") or 0)
    except (TypeError, ValueError):
        size = 0
    if size:
        score += min(size, 2160) / 10

    if str(video.get("iso_639_1") or "").lower() == "en":
        score += 5

    if has_excluded_keyword(name):
        score -= 200
    return score


def parse_trailers(videos: Optional[Dict[str, Any]]) -> List[Trailer]:
    """
    Ordered YouTube trailers from a TMDB videos payload

    Reviews, clips and other excluded names are dropped, as is anything
    scoring at or below -100. Duplicates by key keep the higher score;
    the rest is sorted by score descending.
    """
    if not videos or not isinstance(videos.get("results"), list):
        return []

    best: Dict[str, Dict[str, Any]] = {}
    for video in videos["results"]:
        if not video or not video.get("key"):
            continue
        if str(video.get("site") or "").lower() != "youtube" or has_excluded_keyword(video.get("name")):
            continue
        score = score_video(video)
        if score <= TRAILER_DISCARD_SCORE:
            continue
        key = str(video["key"])
        if key not in best or best[key]["score"] < score:
            best[key] = {"score": score, "video": video}

    ranked = sorted(best.items(), key=lambda entry: entry[1]["score"], reverse=True)
    return [
        Trailer(
            name=entry["video"].get("name") or "Trailer",
            externalUrl=f"https://www.youtube.com/watch?v={key}",
        )
        for key, entry in ranked
    ]


# -- links -----------------------------------------------------------------

def parse_imdb_link(imdb_rating: Optional[str], imdb_id: str) -> Link:
    return Link(name=imdb_rating or "N/A", category="imdb", url=f"https://imdb.com/title/{imdb_id}")


def parse_share_link(title: str, imdb_id: Optional[str], media_type: str) -> Link:
    return Link(
        name=title,
        category="share",
        url=f"https://www.strem.io/s/{parse_slug(media_type, title, imdb_id)}",
    )


def parse_genre_links(genres: List[str], media_type: str, config_segment: str) -> List[Link]:
    """Deep links opening the addon's popular catalog filtered by genre"""
    manifest_url = quote(f"{settings.BASE_URL}/{config_segment}/manifest.json", safe="")
    return [
        Link(
            name=genre,
            category="Genres",
            url=f"stremio:///discover/{manifest_url}/{media_type}/tmdb.top?genre={quote(genre)}",
        )
        for genre in genres
    ]


def _search_links(names: List[str], category: str) -> List[Link]:
    return [
        Link(name=name, category=category, url=f"stremio:///search?search={quote(name)}")
        for name in names
    ]


def parse_credits_links(cast: List[CastMember], directors: List[str], writers: List[str]) -> List[Link]:
    return (
        _search_links([member.name for member in cast], "Cast")
        + _search_links(directors, "Directors")
        + _search_links(writers, "Writers")
    )


# -- episodes --------------------------------------------------------------

def parse_episodes(
    seasons: List[Dict[str, Any]],
    tmdb_id: int,
    imdb_id: Optional[str],
    hide_thumbnails: bool = False,
) -> List[Video]:
    """
    Flatten TMDB season payloads into Stremio videos

    Episodes are ordered by season, then episode number. Ids use the
    IMDb id when known so stream addons can match them.
    """
    videos = []
    for season in sorted(seasons, key=lambda s: s.get("season_number") or 0):
        for episode in sorted(season.get("episodes") or [], key=lambda e: e.get("episode_number") or 0):
            season_number = episode.get("season_number", season.get("season_number"))
            number = episode.get("episode_number")
            if season_number is None or number is None:
                continue
            prefix = imdb_id if imdb_id else f"tmdb:{tmdb_id}"
            air_date = episode.get("air_date")
            videos.append(
                Video(
                    id=f"{prefix}:{season_number}:{number}",
                    name=episode.get("name") or f"Episode {number}",
                    season=season_number,
                    episode=number,
                    number=number,
                    released=f"{air_date}T00:00:00.000Z" if air_date else None,
                    overview=episode.get("overview"),
                    thumbnail=None if hide_thumbnails else tmdb_image(episode.get("still_path")),
                )
            )
    return videos
