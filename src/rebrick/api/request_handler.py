"""
Request Handler
===============
The single chokepoint every endpoint call goes through: fingerprint, cache
lookup, dispatch, response classification and cache population.
"""

import asyncio
import json
from typing import Any, Dict, Mapping, Optional

import httpx

from rebrick.api.base import BASE_URL, BaseAPI
from rebrick.api.credentials import Credentials
from rebrick.api.exceptions import TransportError
from rebrick.api.fingerprint import fingerprint, split_url
from rebrick.api.results import RequestOutcome
from rebrick.services.cache_manager import DEFAULT_TTL, TTLCache
from rebrick.services.debug_logger import get_logger, log_exception, log_request

logger = get_logger("api.request")

_MISSING = object()


def _url_params(query: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop absent/empty values; they stay in the fingerprint but not in the URL."""
    return {k: v for k, v in query.items() if v is not None and v != ""}


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _form_body(query: Mapping[str, Any], body: Mapping[str, Any]) -> Dict[str, str]:
    """Query fields merged with body fields (body wins) for a form-encoded payload."""
    merged = _url_params(query)
    merged.update({k: v for k, v in body.items() if v is not None})
    return {k: _form_value(v) for k, v in merged.items()}


class RequestHandler(BaseAPI):
    """
    Request engine with response caching:

    1. Cache lookup - identical requests within the TTL never reach the network
    2. Request Deduplication - concurrent identical GETs share one dispatch
    3. Error classification - payloads carrying ``detail`` are API errors,
       logged and never cached
    """

    def __init__(
        self,
        credentials: Credentials,
        cache: TTLCache,
        base_url: str = BASE_URL,
        cache_ttl: float = DEFAULT_TTL,
        timeout: float = BaseAPI.DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(credentials, base_url=base_url, timeout=timeout, client=client)
        self.cache = cache
        self.cache_ttl = cache_ttl
        self._pending_requests: Dict[str, asyncio.Task] = {}  # fingerprint -> in-flight dispatch

    def cache_key(
        self,
        method: str = "GET",
        path: str = "",
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Fingerprint a logical request the same way ``request`` does"""
        path, query = self._resolve(path, query)
        return fingerprint(method, path, query, body)

    def _resolve(self, path: str, query: Optional[Mapping[str, Any]]):
        """Normalize the path; a query string embedded in it merges under ``query``."""
        path, embedded = split_url(path, self.base_url)
        return path, {**embedded, **(query or {})}

    async def request(
        self,
        method: str = "GET",
        path: str = "",
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        *,
        use_cache: bool = True,
    ) -> Any:
        """
        Request a resource from the API.

        Args:
            method: HTTP method, GET by default
            path: Endpoint path, bare (``lego/sets``) or fully qualified
            query: Query parameters; folded into the form body when ``body`` is given
            body: Form fields; presence turns the call into a form-encoded request
            use_cache: Set to False to bypass the response cache entirely

        Returns:
            The parsed JSON payload, or ``NO_RESULT`` if the API reported an error

        Raises:
            TransportError: The HTTP call failed or returned something other than JSON
        """
        outcome = await self.fetch(method, path, query, body, use_cache=use_cache)
        return outcome.unwrap()

    async def fetch(
        self,
        method: str = "GET",
        path: str = "",
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        *,
        use_cache: bool = True,
    ) -> RequestOutcome:
        """Same as ``request`` but returns the tagged outcome instead of unwrapping it."""
        method = (method or "GET").upper()
        path, query = self._resolve(path, query)
        key = fingerprint(method, path, query, body)

        if use_cache:
            cached = self.cache.get(key, _MISSING)
            if cached is not _MISSING:
                logger.debug(f"Cache hit: {method} {path}")
                return RequestOutcome.success(cached, from_cache=True)

        # Merge concurrent identical GETs into one dispatch
        if method == "GET" and key in self._pending_requests:
            logger.debug(f"Merging duplicate request: {path}")
            return await asyncio.shield(self._pending_requests[key])

        if method != "GET":
            return await self._dispatch(method, path, query, body, key, use_cache)

        task = asyncio.ensure_future(self._dispatch(method, path, query, body, key, use_cache))
        self._pending_requests[key] = task
        # Outlives a cancelled caller, so only the task itself clears the entry
        task.add_done_callback(lambda done: self._request_done(key, done))
        return await asyncio.shield(task)

    def _request_done(self, key: str, task: asyncio.Task):
        if self._pending_requests.get(key) is task:
            del self._pending_requests[key]
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Request {key[:12]} failed: {task.exception()!r}")

    async def _dispatch(
        self,
        method: str,
        path: str,
        query: Dict[str, Any],
        body: Optional[Mapping[str, Any]],
        key: str,
        use_cache: bool,
    ) -> RequestOutcome:
        client = await self._get_client()
        url = self._build_url(path)
        kwargs: Dict[str, Any] = {"headers": self._auth_headers()}
        if body is not None:
            kwargs["data"] = _form_body(query, body)
        else:
            kwargs["params"] = _url_params(query)

        log_request(logger, method, url)
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            # Connection failures, timeouts, undecodable bodies, redirect loops
            log_exception(logger, e, f"{method} {url}")
            error = TransportError(f"Request failed: {e}", url=url, method=method)
            error.__cause__ = e
            return RequestOutcome.transport_error(error)
        log_request(logger, method, url, status=response.status_code)

        try:
            payload = response.json() if response.content else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log_exception(logger, e, f"{method} {url}")
            error = TransportError(f"Response is not valid JSON: {e}", url=url, method=method)
            error.__cause__ = e
            return RequestOutcome.transport_error(error)

        detail = None
        if isinstance(payload, dict) and "detail" in payload:
            detail = str(payload["detail"])
        elif not response.is_success:
            detail = f"HTTP {response.status_code}"

        if detail is not None:
            # Operator side channel; the caller only sees NO_RESULT
            logger.error(f"{detail}\n{url}\n{json.dumps(query, default=str)}")
            return RequestOutcome.api_error(detail)

        if use_cache:
            self.cache.set(key, payload, self.cache_ttl)
        return RequestOutcome.success(payload)
