"""Async client for the Rebrickable API."""

from rebrick.api.auth import Authenticator
from rebrick.api.client import Rebrick
from rebrick.api.credentials import AuthState, Credentials
from rebrick.api.exceptions import AuthenticationError, RebrickError, TransportError
from rebrick.api.fingerprint import fingerprint, normalize_path, split_url
from rebrick.api.options import (
    MinifigSearch,
    OrderingOptions,
    PageOptions,
    PartSearch,
    SetSearch,
    UserPartSearch,
    UserSetSearch,
)
from rebrick.api.request_handler import RequestHandler
from rebrick.api.results import NO_RESULT, OutcomeStatus, RequestOutcome
from rebrick.services.cache_manager import TTLCache, get_cache
from rebrick.services.debug_logger import init_logging
from rebrick.utils.config import ConfigError, Settings, load_settings

__version__ = "3.0.0"

__all__ = [
    "AuthState",
    "AuthenticationError",
    "Authenticator",
    "ConfigError",
    "Credentials",
    "MinifigSearch",
    "NO_RESULT",
    "OrderingOptions",
    "OutcomeStatus",
    "PageOptions",
    "PartSearch",
    "Rebrick",
    "RebrickError",
    "RequestHandler",
    "RequestOutcome",
    "SetSearch",
    "Settings",
    "TTLCache",
    "TransportError",
    "UserPartSearch",
    "UserSetSearch",
    "fingerprint",
    "get_cache",
    "init_logging",
    "load_settings",
    "normalize_path",
    "split_url",
]
