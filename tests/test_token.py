"""
Tests for config token encoding/decoding
"""
import base64
import json
from urllib.parse import quote

import pytest

from tmdb_addon.core.exceptions import ConfigError
from tmdb_addon.models.config import UserConfig
from tmdb_addon.utils.token import decode_config, encode_config


def test_encode_decode_config(sample_user_config):
    token = encode_config(sample_user_config)
    decoded = decode_config(token)

    assert "=" not in token
    assert decoded == sample_user_config


def test_encode_uses_page_field_names():
    token = encode_config(UserConfig(tmdbkey="abc", ageRating="PG"))
    payload = json.loads(base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)))

    assert payload["tmdbkey"] == "abc"
    assert payload["ageRating"] == "PG"
    assert "tmdb_api_key" not in payload


def test_decode_raw_json():
    raw = quote(json.dumps({"language": "de-DE", "rpdbkey": "t0-key", "catalogs": [
        {"id": "tmdb.top", "type": "movie", "showInHome": True},
    ]}))

    config = decode_config(raw)

    assert config.language == "de-DE"
    assert config.rpdb_api_key == "t0-key"
    assert config.catalogs[0].show_in_home is True


def test_decode_bare_language():
    config = decode_config("nl-NL")

    assert config.language == "nl-NL"


def test_decode_empty_age_rating():
    config = decode_config(quote(json.dumps({"ageRating": ""})))

    assert config.age_rating is None


@pytest.mark.parametrize("segment", [
    quote("{not json"),
    quote(json.dumps({"ageRating": "X"})),
    quote(json.dumps({"catalogs": [{"id": "tmdb.top", "type": "anime"}]})),
    base64.urlsafe_b64encode(b"[1, 2, 3]").decode(),
])
def test_decode_invalid_config(segment):
    with pytest.raises(ConfigError):
        decode_config(segment)
