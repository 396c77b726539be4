"""
Request Results
===============
The "no result" sentinel and the tagged outcome of a single request.
"""

import enum
from dataclasses import dataclass
from typing import Any, Optional

from rebrick.api.exceptions import TransportError


class _NoResult:
    """Singleton returned in place of a payload when the API reported an error."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RESULT"

    def __reduce__(self):
        return (_NoResult, ())


NO_RESULT = _NoResult()


class OutcomeStatus(enum.Enum):
    OK = "ok"
    API_ERROR = "api_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class RequestOutcome:
    """
    Tagged result of one logical request.

    Exactly one of ``payload`` (OK), ``detail`` (API_ERROR) or ``error``
    (TRANSPORT_ERROR) is meaningful, selected by ``status``.
    """

    status: OutcomeStatus
    payload: Any = None
    detail: Optional[str] = None
    error: Optional[TransportError] = None
    from_cache: bool = False

    @classmethod
    def success(cls, payload: Any, from_cache: bool = False) -> "RequestOutcome":
        return cls(OutcomeStatus.OK, payload=payload, from_cache=from_cache)

    @classmethod
    def api_error(cls, detail: str) -> "RequestOutcome":
        return cls(OutcomeStatus.API_ERROR, detail=detail)

    @classmethod
    def transport_error(cls, error: TransportError) -> "RequestOutcome":
        return cls(OutcomeStatus.TRANSPORT_ERROR, error=error)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    def unwrap(self) -> Any:
        """Payload on success, ``NO_RESULT`` on an API error; re-raises transport errors."""
        if self.status is OutcomeStatus.TRANSPORT_ERROR:
            raise self.error
        if self.status is OutcomeStatus.API_ERROR:
            return NO_RESULT
        return self.payload
