"""
API Exceptions
==============
Errors raised by the rebrick client.

API-level errors (a JSON payload carrying ``detail``) are never raised; they
are logged and reported through ``NO_RESULT`` / ``RequestOutcome`` instead.
"""

from typing import Optional


class RebrickError(Exception):
    """Base class for every error raised by this package."""


class TransportError(RebrickError):
    """
    The HTTP call itself failed: DNS, refused connection, timeout, or a
    response body that is not valid JSON.
    """

    def __init__(self, message: str, url: Optional[str] = None, method: Optional[str] = None):
        super().__init__(message)
        self.url = url
        self.method = method

    def __str__(self) -> str:
        message = super().__str__()
        if self.url:
            return f"{message} ({self.method or 'GET'} {self.url})"
        return message


class AuthenticationError(RebrickError):
    """A token exchange was requested without a username and password."""
