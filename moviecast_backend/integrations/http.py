"""
Shared HTTP boundary for the external API clients.

Errors raised here (`UpstreamUnavailableError`, `MalformedResponseError`) are
caught inside `CachingApiClient._fetch` and turned into an absent result plus a
logged diagnostic. They never propagate past a client.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, Mapping, TypeVar

import requests
from pydantic import ValidationError

from moviecast_backend.cache import ResponseCache

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20.0

T = TypeVar("T")


class UpstreamError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


class UpstreamUnavailableError(UpstreamError):
    """Network failure, timeout, or non-success HTTP status."""


class MalformedResponseError(UpstreamError):
    """Success status, but the payload is not the expected JSON shape."""


def request_json(
    session: requests.Session,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """Perform exactly one GET and return the JSON object body."""
    headers = {"accept": "application/json"}
    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise UpstreamUnavailableError(f"Request failed: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        raise UpstreamUnavailableError(
            f"Request failed with HTTP {resp.status_code}.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise MalformedResponseError(
            "Upstream returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc

    if not isinstance(payload, dict):
        raise MalformedResponseError(
            "Upstream returned unexpected JSON shape (not an object).",
            status_code=resp.status_code,
        )
    return payload


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CachingApiClient:
    """
    Base class for the provider clients: cache lookup, one upstream call on a
    miss, DTO parsing, and failure normalization to `None`.
    """

    provider_name = "upstream"

    def __init__(
        self,
        cache: ResponseCache,
        *,
        base_url: str,
        session: requests.Session | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds

    def _default_params(self) -> dict[str, Any]:
        return {}

    async def _fetch(
        self,
        *,
        cache_key: str,
        label: str,
        path: str,
        parse: Callable[[dict[str, Any]], T],
        ttl_seconds: float | None,
        params: Mapping[str, Any] | None = None,
    ) -> T | None:
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"{self.provider_name} {label} cache HIT key={cache_key}")
            return cached

        url = f"{self.base_url}/{path.lstrip('/')}"
        query = {**self._default_params(), **dict(params or {})}
        logger.info(f"{self.provider_name} {label} request endpoint=/{path.lstrip('/')} at={_now_utc_iso()}")

        try:
            payload = await asyncio.to_thread(
                request_json,
                self.session,
                url,
                params=query,
                timeout_seconds=self.timeout_seconds,
            )
            result = parse(payload)
        except UpstreamError as exc:
            logger.error(
                f"{self.provider_name} {label} failed endpoint=/{path.lstrip('/')} "
                f"status={exc.status_code} error={exc} body={exc.body_snippet!r} at={_now_utc_iso()}"
            )
            return None
        except ValidationError as exc:
            logger.error(
                f"{self.provider_name} {label} malformed payload endpoint=/{path.lstrip('/')} "
                f"errors={exc.error_count()} at={_now_utc_iso()}"
            )
            return None
        except Exception as exc:
            logger.error(
                f"{self.provider_name} {label} unexpected error endpoint=/{path.lstrip('/')} "
                f"error={type(exc).__name__}: {exc} at={_now_utc_iso()}"
            )
            return None

        self.cache.set(cache_key, result, ttl_seconds=ttl_seconds)
        return result
