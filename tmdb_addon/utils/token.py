"""
Config Token Utilities
Handles encoding/decoding of user configuration in URLs
"""
import base64
import binascii
import json
from typing import Any, Dict
from urllib.parse import unquote

from pydantic import ValidationError

from tmdb_addon.core.exceptions import ConfigError
from tmdb_addon.models.config import UserConfig


def encode_config(config: UserConfig) -> str:
    """
    Encode user configuration into a URL path segment

    Args:
        config: User configuration object

    Returns:
        Unpadded urlsafe base64 of the JSON config, using the
        configuration page's field names
    """
    config_json = config.model_dump_json(by_alias=True, exclude_none=True)
    token = base64.urlsafe_b64encode(config_json.encode("utf-8")).decode("utf-8")
    return token.rstrip("=")


def _load_segment(segment: str) -> Any:
    text = unquote(segment).strip()
    if text.startswith(("{", "[")):
        return json.loads(text)

    padded = text + "=" * (-len(text) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        decoded = ""
    if decoded.lstrip().startswith(("{", "[")):
        return json.loads(decoded)

    # Older install links carry just the language tag
    return {"language": text}


def decode_config(segment: str) -> UserConfig:
    """
    Decode the user configuration carried in a URL path segment

    Args:
        segment: urlsafe base64 JSON, raw (percent-encoded) JSON,
            or a bare language tag such as "nl-NL"

    Returns:
        Validated UserConfig

    Raises:
        ConfigError: the segment is not a valid configuration
    """
    try:
        payload: Dict[str, Any] = _load_segment(segment)
        if not isinstance(payload, dict):
            raise ConfigError("Configuration must be a JSON object")
        return UserConfig.model_validate(payload)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid configuration JSON: {e.msg}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e.error_count()} error(s)") from e
