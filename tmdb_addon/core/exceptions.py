"""
Addon Exceptions
Error taxonomy shared by the catalog, meta and manifest services
"""
from typing import Optional


class AddonError(Exception):
    """Base class for errors surfaced to the addon caller"""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigError(AddonError):
    """A required credential or setting is missing from the user config"""

    status_code = 400


class NotFoundError(AddonError):
    """A catalog, provider or item could not be resolved"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found"
        if resource_id:
            message += f": {resource_id}"
        super().__init__(message)


class UpstreamError(AddonError):
    """An upstream API call failed (network error or non-2xx status)"""

    status_code = 502

    def __init__(self, service: str, message: str, upstream_status: Optional[int] = None):
        self.service = service
        self.upstream_status = upstream_status
        prefix = f"{service} error"
        if upstream_status:
            prefix += f" {upstream_status}"
        super().__init__(f"{prefix}: {message}")
