"""
API Base Module
================
Base class with shared state and HTTP client management.
"""

from typing import Dict, Optional

import httpx

from rebrick.api.credentials import Credentials
from rebrick.services.debug_logger import get_logger

logger = get_logger("api.base")

API_HOST = "rebrickable.com"
API_VERSION = 3
BASE_URL = f"https://{API_HOST}/api/v{API_VERSION}"


class BaseAPI:
    """
    Base API class with shared state and HTTP client management.

    This class provides:
    - HTTP client lifecycle management
    - The ``Authorization: Key ...`` header built from the credentials
    - Constants and configuration
    """

    USER_AGENT = "rebrick-python/3.0"
    DEFAULT_TIMEOUT = 30.0  # seconds

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = client
        # Injected clients belong to the caller and are not closed here
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with proper headers"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url + "/",
                headers={
                    "User-Agent": self.USER_AGENT,
                    "Accept": "application/json",
                },
                timeout=self.timeout,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def _auth_headers(self) -> Dict[str, str]:
        """Headers carried by every request. The API key is always required."""
        return {"Authorization": f"Key {self.credentials.api_key}"}

    def _build_url(self, path: str) -> str:
        """Absolute URL for a normalized endpoint path, always with a trailing slash"""
        return f"{self.base_url}/{path}/" if path else f"{self.base_url}/"

    async def close(self):
        """Close the HTTP client"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
