"""
Rebrickable API Client
======================
Top level client for the Rebrickable v3 API (https://rebrickable.com/api/v3/docs/).
"""

from pathlib import Path
from typing import Any, Mapping, Optional

import httpx

from rebrick.api.auth import Authenticator
from rebrick.api.base import BASE_URL, BaseAPI
from rebrick.api.credentials import Credentials
from rebrick.api.lego import LegoAPI
from rebrick.api.request_handler import RequestHandler
from rebrick.api.users import UsersAPI
from rebrick.services.cache_manager import DEFAULT_TTL, TTLCache, get_cache
from rebrick.services.debug_logger import get_logger, init_logging
from rebrick.utils.config import Settings, load_settings

logger = get_logger("api.client")


class Rebrick:
    """
    Rebrickable API client.

    Usage:
        async with Rebrick("api-key") as rebrick:
            color = await rebrick.lego.get_color(7)

        # user endpoints, logging in with a password
        rebrick = Rebrick("api-key", username="me", password="secret")
        sets = await rebrick.users.get_sets()

        # or with a user token obtained earlier
        rebrick = Rebrick("api-key", username="me", user_token="abc...")

    A user token given here is never replaced by a password login.
    Responses are cached in the process-wide cache unless ``cache`` is given.
    """

    def __init__(
        self,
        api_key: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        user_token: Optional[str] = None,
        *,
        cache: Optional[TTLCache] = None,
        base_url: str = BASE_URL,
        cache_ttl: float = DEFAULT_TTL,
        timeout: float = BaseAPI.DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.credentials = Credentials(
            api_key,
            username=username,
            password=password,
            user_token=user_token,
        )
        self.cache = cache if cache is not None else get_cache()
        self.requests = RequestHandler(
            self.credentials,
            self.cache,
            base_url=base_url,
            cache_ttl=cache_ttl,
            timeout=timeout,
            client=http_client,
        )
        self.auth = Authenticator(self.credentials, self.requests)
        self.lego = LegoAPI(self.requests)
        self.users = UsersAPI(self.requests, self.auth)

    @classmethod
    def from_settings(cls, settings: Settings, *, configure_logging: bool = False, **kwargs) -> "Rebrick":
        """
        Create a client from loaded Settings; kwargs go to the constructor.

        With ``configure_logging`` the ``rebrick`` logger is set up at
        ``settings.log_level`` through ``init_logging``.
        """
        if configure_logging:
            init_logging(settings.log_level)
        return cls(
            settings.api_key,
            username=settings.username,
            password=settings.password,
            user_token=settings.user_token,
            base_url=settings.base_url,
            cache_ttl=settings.cache_ttl,
            timeout=settings.timeout,
            **kwargs,
        )

    @classmethod
    def from_env(cls, path: Optional[Path] = None, *, configure_logging: bool = True, **kwargs) -> "Rebrick":
        """
        Create a client from the config file and REBRICKABLE_* environment
        variables. Logging is configured from the settings unless
        ``configure_logging`` is False.
        """
        return cls.from_settings(load_settings(path), configure_logging=configure_logging, **kwargs)

    @property
    def is_authenticated(self) -> bool:
        return self.credentials.is_authenticated

    async def request(
        self,
        method: str = "GET",
        path: str = "",
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Request any endpoint directly. See RequestHandler.request."""
        return await self.requests.request(method, path, query, body)

    async def login(self, username: Optional[str] = None, password: Optional[str] = None) -> "Rebrick":
        """Log in (no-op if already holding a token) and return the client."""
        await self.auth.login(username, password)
        return self

    async def close(self):
        await self.requests.close()

    async def __aenter__(self) -> "Rebrick":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
