"""
Credential State
================
Holder of the API key, login and session token for one client.
"""

import enum
from typing import Optional


class AuthState(enum.Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


def _mask(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return f"{value[:4]}***" if len(value) > 8 else "***"


class Credentials:
    """
    Credentials shared by the request handler and the authenticator.

    The API key is sent with every request and cannot be changed after
    construction. Once ``user_token`` is set the client is logged in and
    username/password are no longer needed.
    """

    def __init__(
        self,
        api_key: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        user_token: Optional[str] = None,
    ):
        if not api_key:
            raise ValueError("An API key is required")
        self._api_key = api_key
        self.username = username
        self.password = password
        self.user_token = user_token
        self._authenticating = False

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_token)

    @property
    def state(self) -> AuthState:
        if self.is_authenticated:
            return AuthState.AUTHENTICATED
        if self._authenticating:
            return AuthState.AUTHENTICATING
        return AuthState.ANONYMOUS

    def has_login(self) -> bool:
        """Check if both username and password are known"""
        return bool(self.username and self.password)

    def begin_authentication(self):
        self._authenticating = True

    def end_authentication(self, token: Optional[str] = None):
        """Leave the AUTHENTICATING state, storing ``token`` when the exchange succeeded."""
        self._authenticating = False
        if token:
            self.user_token = token

    def __repr__(self) -> str:
        password = "***" if self.password else None
        return (
            f"Credentials(api_key={_mask(self._api_key)!r}, username={self.username!r}, "
            f"password={password!r}, user_token={_mask(self.user_token)!r}, "
            f"state={self.state.value})"
        )
