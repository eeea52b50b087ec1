"""
Tests for API endpoints
"""
import pytest
from unittest.mock import AsyncMock, patch
from httpx import ASGITransport, AsyncClient

from tmdb_addon.core.app import create_app
from tmdb_addon.core.exceptions import UpstreamError
from tmdb_addon.models.config import UserConfig
from tmdb_addon.models.stremio import CatalogResponse
from tmdb_addon.services.addon import AddonServices
from tmdb_addon.utils.token import decode_config, encode_config


@pytest.fixture
def services(mock_tmdb, mock_artwork, mock_cinemeta):
    return AddonServices(tmdb=mock_tmdb, artwork=mock_artwork, cinemeta=mock_cinemeta)


@pytest.fixture
async def client(services):
    app = create_app(services)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def token(sample_user_config):
    return encode_config(sample_user_config)


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint"""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_default_manifest(client):
    response = await client.get("/manifest.json")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "org.stremio.tmdb-addon"
    assert data["behaviorHints"]["configurable"] is True
    assert response.headers["cache-control"].startswith("no-cache")


@pytest.mark.asyncio
async def test_configured_manifest(client, token):
    response = await client.get(f"/{token}/manifest.json")

    assert response.status_code == 200
    ids = {(c["id"], c["type"]) for c in response.json()["catalogs"]}
    assert ("tmdb.search", "series") in ids


@pytest.mark.asyncio
async def test_manifest_invalid_config(client):
    response = await client.get("/%7Bbroken/manifest.json")

    assert response.status_code == 400
    assert response.json()["error"] == "ConfigError"


@pytest.mark.asyncio
async def test_catalog(client, mock_tmdb, token, sample_tmdb_movie, movie_genres):
    mock_tmdb.get_genres.return_value = movie_genres
    mock_tmdb.discover.return_value = [sample_tmdb_movie]

    response = await client.get(f"/{token}/catalog/movie/tmdb.top.json")

    assert response.status_code == 200
    metas = response.json()["metas"]
    assert metas[0]["id"] == "tmdb:550"
    assert "availableGenres" not in response.json()


@pytest.mark.asyncio
async def test_catalog_extra_parsing(client, services, token):
    with patch.object(services.catalog, "get_catalog", new=AsyncMock(return_value=CatalogResponse(metas=[]))) as mock_catalog:
        response = await client.get(
            f"/{token}/catalog/series/tmdb.top/genre=Action%20%26%20Adventure&skip=20.json"
        )

    assert response.status_code == 200
    args = mock_catalog.await_args.args
    assert args[:5] == ("series", "en-US", 2, "tmdb.top", "Action & Adventure")
    assert mock_catalog.await_args.kwargs["search"] is None


@pytest.mark.asyncio
async def test_catalog_search_extra(client, mock_tmdb, token):
    response = await client.get(f"/{token}/catalog/movie/tmdb.search/search=fight%20club.json")

    assert response.status_code == 200
    mock_tmdb.search.assert_awaited_once_with("movie", "fight club", "en-US", 1)


@pytest.mark.asyncio
async def test_mdblist_catalog_without_key(client):
    token = encode_config(UserConfig())

    response = await client.get(f"/{token}/catalog/movie/mdblist_42_movie.json")

    assert response.status_code == 400
    assert response.json()["error"] == "ConfigError"


@pytest.mark.asyncio
async def test_unknown_streaming_provider(client, token):
    response = await client.get(f"/{token}/catalog/movie/streaming.xyz.json")

    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"


@pytest.mark.asyncio
async def test_invalid_media_type(client, token):
    response = await client.get(f"/{token}/catalog/anime/tmdb.top.json")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_meta(client, mock_tmdb, sample_movie_details):
    mock_tmdb.get_details.return_value = sample_movie_details

    response = await client.get("/en-US/meta/movie/tmdb:550.json")

    assert response.status_code == 200
    meta = response.json()["meta"]
    assert meta["name"] == "Fight Club"
    assert meta["runtime"] == "2h19min"


@pytest.mark.asyncio
async def test_meta_not_found(client, token):
    response = await client.get(f"/{token}/meta/movie/tt0000000.json")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_meta_upstream_error(client, mock_tmdb, token):
    mock_tmdb.get_details.side_effect = UpstreamError("TMDB", "/movie/550", 500)

    response = await client.get(f"/{token}/meta/movie/tmdb:550.json")

    assert response.status_code == 502
    assert response.json()["error"] == "UpstreamError"


@pytest.mark.asyncio
async def test_install_url_endpoint(client):
    response = await client.post("/install-url", json={
        "language": "fr-FR",
        "tmdbkey": "test_tmdb_key",
        "ageRating": "PG-13",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["install_url"].endswith(f"/{data['token']}/manifest.json")

    decoded = decode_config(data["token"])
    assert decoded.language == "fr-FR"
    assert decoded.tmdb_api_key == "test_tmdb_key"
    assert decoded.age_rating == "PG-13"


@pytest.mark.asyncio
async def test_install_url_rejects_invalid_config(client):
    response = await client.post("/install-url", json={"ageRating": "X"})

    assert response.status_code == 422
