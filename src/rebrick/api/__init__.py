"""
Rebrickable API Package
=======================
Async Rebrickable v3 API client with authentication and response caching.

The Rebrick client is composed from explicitly injected parts:
- Credentials: API key, login and user token
- RequestHandler: fingerprinting, caching and dispatch of every call
- Authenticator: user token exchange
- LegoAPI: catalog endpoints
- UsersAPI: user collection endpoints
"""

from .client import Rebrick
from .results import NO_RESULT

__all__ = ['Rebrick', 'NO_RESULT']
