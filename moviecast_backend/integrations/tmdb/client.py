from __future__ import annotations

import logging
import os
import re

import requests

from moviecast_backend.cache import (
    CONFIGURATION_TTL_SECONDS,
    DETAILS_TTL_SECONDS,
    IMAGES_TTL_SECONDS,
    SEARCH_TTL_SECONDS,
    ResponseCache,
)
from moviecast_backend.integrations.http import DEFAULT_TIMEOUT_SECONDS, CachingApiClient
from moviecast_backend.models.tmdb import ImageConfiguration, MovieDetails, MovieImages, SearchPage

logger = logging.getLogger(__name__)

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
CONFIGURATION_CACHE_KEY = "tmdb_configuration"


def parse_tmdb_movie_id(value: str | int) -> int:
    if isinstance(value, int):
        return value

    raw = str(value).strip()
    if not raw:
        raise ValueError("TMDb movie value is empty.")

    if raw.isdigit():
        return int(raw)

    # Examples:
    # - https://www.themoviedb.org/movie/603
    # - https://www.themoviedb.org/movie/603-the-matrix?language=en-US
    match = re.search(r"/movie/([0-9]+)", raw)
    if match:
        return int(match.group(1))

    raise ValueError(f"Unable to parse TMDb movie id from: {value!r}")


def resolve_api_key(api_key: str | None = None) -> str | None:
    """
    Best-effort API key resolution; callers continue when the key is missing.
    """

    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    return resolved or None


def search_cache_key(query: str, page: int) -> str:
    return f"tmdb_search::{query.lower()}::page::{page}"


def details_cache_key(tmdb_id: int) -> str:
    return f"tmdb_details::{int(tmdb_id)}"


def images_cache_key(tmdb_id: int) -> str:
    return f"tmdb_images::{int(tmdb_id)}"


def _require_positive_id(tmdb_id: int) -> int:
    tmdb_id_int = int(tmdb_id)
    if tmdb_id_int <= 0:
        raise ValueError(f"TMDb movie id must be positive, got {tmdb_id!r}")
    return tmdb_id_int


class TmdbClient(CachingApiClient):
    """
    TMDb movie client for `/search/movie`, `/movie/{id}`, `/movie/{id}/images`
    and `/configuration`.

    Every call returns the parsed DTO or `None` when the provider is unreachable,
    answers with a non-success status, or sends a payload of the wrong shape.
    """

    provider_name = "TMDb"

    def __init__(
        self,
        cache: ResponseCache,
        *,
        api_key: str | None = None,
        session: requests.Session | None = None,
        base_url: str = TMDB_API_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(cache, base_url=base_url, session=session, timeout_seconds=timeout_seconds)
        self.api_key = resolve_api_key(api_key) or ""
        if not self.api_key:
            logger.warning("TMDB_API_KEY is not set; TMDb requests will be sent without a valid key and rejected.")

    def _default_params(self) -> dict[str, str]:
        return {"api_key": self.api_key}

    async def search_movies(self, query: str, page: int = 1) -> SearchPage | None:
        if not query or not query.strip():
            raise ValueError("Search query must not be empty.")
        if page < 1:
            raise ValueError(f"Search page must be >= 1, got {page!r}")
        return await self._fetch(
            cache_key=search_cache_key(query, page),
            label="search",
            path="search/movie",
            params={"query": query, "page": page},
            parse=SearchPage.model_validate,
            ttl_seconds=SEARCH_TTL_SECONDS,
        )

    async def get_movie_details(self, tmdb_id: int) -> MovieDetails | None:
        tmdb_id_int = _require_positive_id(tmdb_id)
        return await self._fetch(
            cache_key=details_cache_key(tmdb_id_int),
            label="details",
            path=f"movie/{tmdb_id_int}",
            parse=MovieDetails.model_validate,
            ttl_seconds=DETAILS_TTL_SECONDS,
        )

    async def get_movie_images(self, tmdb_id: int) -> MovieImages | None:
        tmdb_id_int = _require_positive_id(tmdb_id)
        return await self._fetch(
            cache_key=images_cache_key(tmdb_id_int),
            label="images",
            path=f"movie/{tmdb_id_int}/images",
            parse=MovieImages.model_validate,
            ttl_seconds=IMAGES_TTL_SECONDS,
        )

    async def get_configuration(self) -> ImageConfiguration | None:
        return await self._fetch(
            cache_key=CONFIGURATION_CACHE_KEY,
            label="configuration",
            path="configuration",
            parse=ImageConfiguration.model_validate,
            ttl_seconds=CONFIGURATION_TTL_SECONDS,
        )
