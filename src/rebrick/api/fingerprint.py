"""
Request Fingerprints
====================
Deterministic cache keys for logical requests.
"""

import hashlib
import json
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx


def normalize_path(path: str, base_url: str = "") -> str:
    """
    Reduce an endpoint to its bare form.

    ``https://rebrickable.com/api/v3/lego/sets/``, ``/lego/sets`` and
    ``lego/sets`` all normalize to ``lego/sets``.
    """
    path = path or ""
    base = base_url.rstrip("/")
    if base and path.startswith(base):
        path = path[len(base):]
    return path.strip("/")


def split_url(path: str, base_url: str = "") -> Tuple[str, Dict[str, str]]:
    """
    Split an endpoint that may carry its own query string, such as a
    paginated ``next`` link, into its normalized path and query params.

    ``https://rebrickable.com/api/v3/lego/sets/?page=2`` becomes
    ``("lego/sets", {"page": "2"})``.
    """
    path, _, query_string = (path or "").partition("?")
    params = dict(httpx.QueryParams(query_string)) if query_string else {}
    return normalize_path(path, base_url), params


def _wire_value(value: Any) -> Any:
    # Values as they go out on the wire, so {"page": 2} and ?page=2 match
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (str, int, float)):
        return str(value)
    return value


def fingerprint(
    method: str,
    path: str,
    query: Optional[Mapping[str, Any]] = None,
    body: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    SHA-256 of the request's method, path, query and body.

    Keys are serialized in sorted order so two requests built with different
    insertion orders share one key. Query values are compared in their wire
    form.
    """
    payload = {
        "method": (method or "GET").upper(),
        "path": path,
        "query": {k: _wire_value(v) for k, v in (query or {}).items()},
        "body": dict(body) if body is not None else None,
    }
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()
