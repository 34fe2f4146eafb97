"""
Dependency injection for the response cache, provider clients, and catalog store.

All shared resources are created in the app lifespan (see `api.main`) and kept
on `app.state`; these dependencies only hand them out, so tests can replace
them with `app.dependency_overrides`.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, NoReturn

import requests
from fastapi import Depends, HTTPException, Request

from moviecast_backend.cache import DEFAULT_MAX_ENTRIES, ResponseCache
from moviecast_backend.integrations.http import DEFAULT_TIMEOUT_SECONDS
from moviecast_backend.integrations.open_meteo.client import OPEN_METEO_BASE_URL, OpenMeteoClient
from moviecast_backend.integrations.tmdb.client import TMDB_API_BASE_URL, TmdbClient
from moviecast_backend.repositories.movies import CatalogStore, CatalogStoreError
from moviecast_backend.utils.env import env_float, env_int, env_str

logger = logging.getLogger(__name__)


@lru_cache
def get_tmdb_api_key() -> str:
    return env_str("TMDB_API_KEY")


@lru_cache
def get_tmdb_base_url() -> str:
    return env_str("TMDB_API_BASE_URL", TMDB_API_BASE_URL)


@lru_cache
def get_open_meteo_base_url() -> str:
    return env_str("OPEN_METEO_BASE_URL", OPEN_METEO_BASE_URL)


@lru_cache
def get_http_timeout_seconds() -> float:
    return env_float("HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)


@lru_cache
def get_cache_max_entries() -> int:
    return env_int("CACHE_MAX_ENTRIES", DEFAULT_MAX_ENTRIES)


def build_tmdb_client(cache: ResponseCache, session: requests.Session) -> TmdbClient:
    return TmdbClient(
        cache,
        api_key=get_tmdb_api_key(),
        session=session,
        base_url=get_tmdb_base_url(),
        timeout_seconds=get_http_timeout_seconds(),
    )


def build_forecast_client(cache: ResponseCache, session: requests.Session) -> OpenMeteoClient:
    return OpenMeteoClient(
        cache,
        session=session,
        base_url=get_open_meteo_base_url(),
        timeout_seconds=get_http_timeout_seconds(),
    )


def _state_attr(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"app.state.{name} is not initialized (lifespan did not run)")
    return value


def get_tmdb_client(request: Request) -> TmdbClient:
    return _state_attr(request, "tmdb_client")


def get_forecast_client(request: Request) -> OpenMeteoClient:
    return _state_attr(request, "forecast_client")


def get_catalog_store(request: Request) -> CatalogStore:
    return _state_attr(request, "catalog_store")


# Type aliases for dependency injection
Tmdb = Annotated[TmdbClient, Depends(get_tmdb_client)]
Forecast = Annotated[OpenMeteoClient, Depends(get_forecast_client)]
Catalog = Annotated[CatalogStore, Depends(get_catalog_store)]


def raise_for_catalog_error(exc: CatalogStoreError, context: str = "catalog operation") -> NoReturn:
    """
    Convert a catalog storage failure into an HTTP 502.

    Raises:
        HTTPException: always (502), without leaking internal error details
    """
    logger.error(f"Catalog error during {context}: {exc}")
    raise HTTPException(status_code=502, detail=f"Database error during {context}") from exc
