"""
Tests for logos, rating-poster probing and IMDb ratings
"""
import aiohttp
import pytest
from unittest.mock import AsyncMock, patch

from tmdb_addon.core.exceptions import UpstreamError
from tmdb_addon.services.artwork import ArtworkService, pick_logo, process_logo
from tmdb_addon.services.cache import TTLCache
from tmdb_addon.services.cinemeta import CinemetaClient


def test_process_logo():
    assert process_logo("http://assets.fanart.tv/logo.png") == "https://assets.fanart.tv/logo.png"
    assert process_logo("http://assets.fanart.tv/fanart/tv/0/hdtvlogo/-60a02798b7eea.png") is None
    assert process_logo(None) is None


def test_pick_logo_prefers_language_then_likes():
    candidates = [
        {"url": "en-low", "lang": "en", "likes": "1"},
        {"url": "en-high", "lang": "en", "likes": "9"},
        {"url": "nl", "lang": "nl", "likes": "2"},
        {"url": "xx", "lang": "xx", "likes": "50"},
    ]

    assert pick_logo(candidates, ["nl", "en"]) == "nl"
    assert pick_logo(candidates, ["de", "en"]) == "en-high"
    assert pick_logo(candidates, ["de"]) == "xx"
    assert pick_logo([], ["en"]) is None


@pytest.mark.asyncio
async def test_movie_logo_from_fanart(mock_tmdb):
    service = ArtworkService(mock_tmdb, fanart_api_key="fanart_key")
    fanart = {"hdmovielogo": [{"url": "https://assets.fanart.tv/nl.png", "lang": "nl", "likes": "3"}]}

    with patch.object(service, "_fanart", new=AsyncMock(return_value=fanart)) as mock_fanart:
        logo = await service.get_logo("movie", 550, "nl-NL", "en")

    mock_fanart.assert_awaited_once_with("movies/550")
    assert logo == "https://assets.fanart.tv/nl.png"
    mock_tmdb.get_images.assert_not_awaited()


@pytest.mark.asyncio
async def test_series_logo_falls_back_to_tmdb(mock_tmdb):
    service = ArtworkService(mock_tmdb, fanart_api_key="fanart_key")
    mock_tmdb.get_images.return_value = {"logos": [
        {"file_path": "/ja.png", "iso_639_1": "ja", "vote_average": 5.0},
        {"file_path": "/en.png", "iso_639_1": "en", "vote_average": 3.0},
    ]}

    with patch.object(service, "_fanart", new=AsyncMock(return_value=None)) as mock_fanart:
        logo = await service.get_logo("series", 1396, "fr-FR", "ja", tvdb_id=81189)

    mock_fanart.assert_awaited_once_with("tv/81189")
    mock_tmdb.get_images.assert_awaited_once_with("series", 1396, ["fr", "ja", "en"])
    assert logo == "https://image.tmdb.org/t/p/original/ja.png"


@pytest.mark.asyncio
async def test_fanart_without_key(mock_tmdb):
    service = ArtworkService(mock_tmdb)
    service.fanart_api_key = None

    assert await service._fanart("movies/550") is None


@pytest.mark.asyncio
async def test_fanart_error_raises(mock_tmdb, make_session):
    service = ArtworkService(mock_tmdb, session=make_session(503), fanart_api_key="fanart_key")

    with pytest.raises(UpstreamError):
        await service._fanart("movies/550")


@pytest.mark.asyncio
async def test_poster_exists_is_cached(mock_tmdb, make_session, fake_clock):
    session = make_session(200, method="head")
    service = ArtworkService(
        mock_tmdb, session=session, poster_check_cache=TTLCache(600, clock=fake_clock)
    )
    url = "https://api.ratingposterdb.com/t1-abc/tmdb/poster-default/movie-550.jpg?fallback=true"

    assert await service.poster_exists(url) is True
    assert await service.poster_exists(url) is True
    assert session.head.call_count == 1

    fake_clock.advance(600)
    await service.poster_exists(url)
    assert session.head.call_count == 2


@pytest.mark.asyncio
async def test_poster_missing_and_network_error(mock_tmdb, make_session):
    service = ArtworkService(mock_tmdb, session=make_session(404, method="head"))
    assert await service.poster_exists("https://example.org/missing.jpg") is False

    service.session = make_session(0, exc=aiohttp.ClientConnectionError("reset"), method="head")
    assert await service.poster_exists("https://example.org/other.jpg") is False
    assert service.poster_check_cache.get("https://example.org/other.jpg") is None


@pytest.mark.asyncio
async def test_cinemeta_rating(make_session):
    session = make_session(200, {"meta": {"imdbRating": 8.8}})
    client = CinemetaClient(session=session)

    assert await client.fetch_imdb_rating("movie", "tt0137523") == "8.8"
    assert session.get.call_args.args[0] == "https://v3-cinemeta.strem.io/meta/movie/tt0137523.json"


@pytest.mark.asyncio
async def test_cinemeta_unrated_and_errors(make_session):
    assert await CinemetaClient(session=make_session(200, {"meta": {}})).fetch_imdb_rating("series", "tt1") is None

    with pytest.raises(UpstreamError):
        await CinemetaClient(session=make_session(500)).fetch_imdb_rating("series", "tt1")


@pytest.mark.asyncio
async def test_fanart_outage_falls_back_to_tmdb_logos(mock_tmdb):
    service = ArtworkService(mock_tmdb, fanart_api_key="fanart_key")
    mock_tmdb.get_images.return_value = {"logos": [
        {"file_path": "/en.png", "iso_639_1": "en", "vote_average": 4.0},
    ]}
    outage = UpstreamError("fanart.tv", "movies/550", 503)

    with patch.object(service, "_fanart", new=AsyncMock(side_effect=outage)):
        logo = await service.get_logo("movie", 550, "en-US", "en")

    assert logo == "https://image.tmdb.org/t/p/original/en.png"
    mock_tmdb.get_images.assert_awaited_once()
