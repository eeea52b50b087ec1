"""MDBList API Client
Async client for MDBList list items
"""
import aiohttp
import asyncio
import logging
from typing import List, Dict, Optional, Any
from tmdb_addon.core.config import settings

logger = logging.getLogger(__name__)


class MDBListClient:
    """Async client for MDBList API"""

    BASE_URL = "https://api.mdblist.com"

    def __init__(self, api_key: Optional[str] = None, session: Optional[aiohttp.ClientSession] = None):
        self.api_key = api_key
        self.session = session
        self._owns_session = session is None

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT)
            )
            self._owns_session = True
        return self.session

    async def close(self):
        """Close aiohttp session"""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def get_list_items(
        self,
        list_id: str,
        with_extras: bool = True,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Get the items of a list

        Args:
            list_id: MDBList list id
            with_extras: Ask for the "genre" and "poster" fields

        Returns:
            {"movies": [...], "shows": [...]}; both empty on any failure
        """
        empty: Dict[str, List[Dict[str, Any]]] = {"movies": [], "shows": []}
        if not self.api_key:
            logger.warning("MDBList API key not configured")
            return empty

        params = {"apikey": self.api_key}
        if with_extras:
            params["append_to_response"] = "genre,poster"

        try:
            session = await self.get_session()
            url = f"{self.BASE_URL}/lists/{list_id}/items"
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    logger.error("MDBList API error: %s for list %s", response.status, list_id)
                    return empty
                data = await response.json()

        except asyncio.TimeoutError:
            logger.error("MDBList request timeout for list %s", list_id)
            return empty
        except aiohttp.ClientError as e:
            logger.error("MDBList request error for list %s: %r", list_id, e)
            return empty

        if not isinstance(data, dict):
            return empty
        return {
            "movies": data.get("movies") or [],
            "shows": data.get("shows") or [],
        }

    async def get_items(self, list_id: str) -> List[Dict[str, Any]]:
        """Movies and shows of a list concatenated, in list order"""
        data = await self.get_list_items(list_id)
        return data["movies"] + data["shows"]
