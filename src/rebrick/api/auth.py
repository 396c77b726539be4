"""
Authentication
==============
Exchanges username/password for a user token, once per client.
"""

import asyncio
from typing import Any, Optional

from rebrick.api.credentials import AuthState, Credentials
from rebrick.api.exceptions import AuthenticationError
from rebrick.api.request_handler import RequestHandler
from rebrick.api.results import NO_RESULT
from rebrick.services.debug_logger import get_logger

logger = get_logger("api.auth")


class Authenticator:
    """
    Authentication flow for user-scoped endpoints:
    - Token exchange with username/password (``POST users/_token/``)
    - Idempotent login: a client holding a token never logs in again
    - A lock so racing endpoint calls perform at most one exchange
    """

    TOKEN_ENDPOINT = "users/_token/"

    def __init__(self, credentials: Credentials, requests: RequestHandler):
        self.credentials = credentials
        self.requests = requests
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[str]:
        return self.credentials.user_token

    @property
    def state(self) -> AuthState:
        return self.credentials.state

    @property
    def is_authenticated(self) -> bool:
        return self.credentials.is_authenticated

    async def get_token(self, username: str, password: str, use_cache: bool = True) -> Any:
        """
        Retrieve a user token for the given login.

        Returns:
            The token string, or ``NO_RESULT`` if the API rejected the login
        """
        response = await self.requests.request(
            "POST",
            self.TOKEN_ENDPOINT,
            None,
            {"username": username, "password": password},
            use_cache=use_cache,
        )
        if not isinstance(response, dict) or not response.get("user_token"):
            return NO_RESULT
        return response["user_token"]

    async def login(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        force: bool = False,
    ) -> bool:
        """
        Log in and keep the user token for the lifetime of the client.

        A no-op when a token is already held, so user endpoints call it
        unconditionally. Username/password given at construction take
        precedence over the arguments.

        Args:
            username: Used only if no username is stored yet
            password: Used only if no password is stored yet
            force: Exchange again even when a token is held, bypassing the cache.
                The current token is only replaced once a new one arrives.

        Returns:
            True if a token was already held or the exchange succeeded

        Raises:
            AuthenticationError: No token and no username/password to exchange
            TransportError: The token request itself failed
        """
        if self.credentials.is_authenticated and not force:
            return True

        async with self._lock:
            # Another caller may have logged in while we waited
            if self.credentials.is_authenticated and not force:
                return True

            creds = self.credentials
            creds.username = creds.username or username
            creds.password = creds.password or password
            if not creds.has_login():
                raise AuthenticationError("A username and password are required to log in")

            # A held token stays in place until a new one arrives
            creds.begin_authentication()
            token = None
            try:
                result = await self.get_token(creds.username, creds.password, use_cache=not force)
                if result is not NO_RESULT:
                    token = result
            finally:
                creds.end_authentication(token)

            if token is None:
                if creds.is_authenticated:
                    logger.warning(f"Re-login failed for {creds.username}, keeping the current token")
                else:
                    logger.warning(f"Login failed for {creds.username}")
                return False

            logger.info(f"Logged in as: {creds.username}")
            return True
