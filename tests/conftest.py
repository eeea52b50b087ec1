"""
Test configuration and fixtures
"""
import pytest
from unittest.mock import AsyncMock, MagicMock


class FakeClock:
    """Manually advanced time source for TTL tests"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sample_user_config():
    """Sample user configuration with realistic fake credentials"""
    from tmdb_addon.models.config import UserConfig

    return UserConfig(
        language="en-US",
        tmdb_api_key="9a3b6df7b9285e1b338a8ca4b2970365",  # Fake 32-char hex
        mdblist_api_key="fake1234567890abcdefghijklmnop",  # Fake 30-char alphanumeric
    )


@pytest.fixture
def movie_genres():
    return [
        {"id": 28, "name": "Action"},
        {"id": 18, "name": "Drama"},
        {"id": 35, "name": "Comedy"},
    ]


@pytest.fixture
def series_genres():
    return [
        {"id": 18, "name": "Drama"},
        {"id": 10759, "name": "Action & Adventure"},
    ]


@pytest.fixture
def tmdb_languages():
    return [
        {"iso_639_1": "en", "english_name": "English", "name": "English"},
        {"iso_639_1": "nl", "english_name": "Dutch", "name": "Nederlands"},
        {"iso_639_1": "fr", "english_name": "French", "name": "Français"},
    ]


@pytest.fixture
def sample_tmdb_movie():
    """Sample TMDB discover result for a movie"""
    return {
        "id": 550,
        "title": "Fight Club",
        "poster_path": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
        "backdrop_path": "/fCayJrkfRaCRCTh8GqN30f8oyQF.jpg",
        "overview": "A ticking-time-bomb insomniac...",
        "release_date": "1999-10-15",
        "vote_average": 8.4,
        "genre_ids": [18, 9999],
    }


@pytest.fixture
def sample_movie_details():
    """TMDB movie info with videos, credits and external ids appended"""
    return {
        "id": 550,
        "title": "Fight Club",
        "imdb_id": "tt0137523",
        "overview": "A ticking-time-bomb insomniac...",
        "release_date": "1999-10-15",
        "runtime": 139,
        "vote_average": 8.4,
        "original_language": "en",
        "poster_path": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
        "backdrop_path": "/fCayJrkfRaCRCTh8GqN30f8oyQF.jpg",
        "genres": [{"id": 18, "name": "Drama"}],
        "production_countries": [{"iso_3166_1": "US", "name": "United States of America"}],
        "credits": {
            "cast": [
                {"name": "Edward Norton", "character": "The Narrator", "profile_path": "/norton.jpg"},
                {"name": "Brad Pitt", "character": "Tyler Durden", "profile_path": None},
            ],
            "crew": [
                {"name": "David Fincher", "job": "Director"},
                {"name": "Jim Uhls", "job": "Screenplay"},
            ],
        },
        "external_ids": {"imdb_id": "tt0137523"},
        "videos": {
            "results": [
                {"key": "SUXWAEX2jlg", "site": "YouTube", "type": "Trailer", "official": True, "name": "Official Trailer", "size": 1080},
            ]
        },
    }


@pytest.fixture
def sample_series_details():
    """TMDB tv info with appended data"""
    return {
        "id": 1396,
        "name": "Breaking Bad",
        "overview": "A high school chemistry teacher...",
        "status": "Ended",
        "first_air_date": "2008-01-20",
        "last_air_date": "2013-09-29",
        "episode_run_time": [],
        "last_episode_to_air": {"runtime": 47},
        "vote_average": 8.9,
        "original_language": "en",
        "poster_path": "/ggFHVNu6YYI5L9pCfOacjizRGt.jpg",
        "backdrop_path": "/tsRy63Mu5cu8etL1X7ZLyf7UP1M.jpg",
        "genres": [{"id": 18, "name": "Drama"}],
        "created_by": [{"name": "Vince Gilligan"}],
        "production_countries": [],
        "seasons": [{"season_number": 1}, {"season_number": 2}],
        "credits": {"cast": [], "crew": []},
        "external_ids": {"imdb_id": "tt0903747", "tvdb_id": 81189},
        "videos": {"results": []},
    }


@pytest.fixture
def sample_mdblist_items():
    """MDBList list items as returned with append_to_response=genre,poster"""
    return [
        {
            "id": 550,
            "imdb_id": "tt0137523",
            "title": "Fight Club",
            "mediatype": "movie",
            "release_year": 1999,
            "poster": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
            "genre": ["drama", "thriller"],
        },
        {
            "id": 603,
            "imdb_id": "tt0133093",
            "title": "The Matrix",
            "mediatype": "movie",
            "release_year": 1999,
            "poster": "https://image.tmdb.org/t/p/w500/matrix.jpg",
            "genre": ["science-fiction", "action"],
        },
        {
            "id": 1396,
            "imdb_id": "tt0903747",
            "title": "Breaking Bad",
            "mediatype": "show",
            "release_year": 2008,
            "poster": "/bb.jpg",
            "genre": ["drama", "crime"],
        },
        {
            # No poster: dropped
            "id": 13,
            "title": "Forrest Gump",
            "mediatype": "movie",
            "genre": ["drama"],
        },
    ]


@pytest.fixture
def mock_tmdb():
    """TMDB client double with the methods the services call"""
    from tmdb_addon.services.tmdb import TMDBClient

    tmdb = MagicMock(spec=TMDBClient)
    tmdb.api_key = "server_key"
    tmdb.with_api_key = AsyncMock(return_value=tmdb)
    tmdb.get_session = AsyncMock(return_value=MagicMock())
    tmdb.get_genres = AsyncMock(return_value=[])
    tmdb.get_languages = AsyncMock(return_value=[])
    tmdb.discover = AsyncMock(return_value=[])
    tmdb.search = AsyncMock(return_value=[])
    tmdb.get_details = AsyncMock()
    tmdb.get_videos = AsyncMock(return_value={"results": []})
    tmdb.get_season = AsyncMock()
    tmdb.get_images = AsyncMock(return_value=None)
    tmdb.find_by_imdb_id = AsyncMock(return_value=None)
    tmdb.close = AsyncMock()
    return tmdb


@pytest.fixture
def mock_artwork():
    from tmdb_addon.services.artwork import ArtworkService

    artwork = MagicMock(spec=ArtworkService)
    artwork.get_logo = AsyncMock(return_value=None)
    artwork.poster_exists = AsyncMock(return_value=False)
    artwork.close = AsyncMock()
    return artwork


@pytest.fixture
def mock_cinemeta():
    from tmdb_addon.services.cinemeta import CinemetaClient

    cinemeta = MagicMock(spec=CinemetaClient)
    cinemeta.fetch_imdb_rating = AsyncMock(return_value=None)
    cinemeta.close = AsyncMock()
    return cinemeta


def session_returning(status, payload=None, exc=None, method="get"):
    """aiohttp session double whose get()/head() yields one response"""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)

    context = MagicMock()
    if exc is not None:
        context.__aenter__ = AsyncMock(side_effect=exc)
    else:
        context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.closed = False
    setattr(session, method, MagicMock(return_value=context))
    return session


@pytest.fixture
def make_session():
    return session_returning
