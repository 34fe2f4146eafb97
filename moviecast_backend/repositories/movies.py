"""
Local movie catalog storage.

`SupabaseCatalogStore` persists to `core.movies`; `InMemoryCatalogStore` keeps
records in process (local development and tests). `build_catalog_store` picks
one from the environment.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client

from moviecast_backend.db.supabase import SupabaseSettings, create_supabase_admin_client
from moviecast_backend.models.movies import MovieRecord

logger = logging.getLogger(__name__)


class CatalogStoreError(RuntimeError):
    pass


class CatalogStore(ABC):
    """Keyed record store for `MovieRecord` (integer ids assigned on create)."""

    @abstractmethod
    def create(self, movie: MovieRecord) -> MovieRecord:
        """Persist a new record and return it with its assigned id."""

    @abstractmethod
    def read_all(self) -> list[MovieRecord]:
        """Return every record in insertion order."""

    @abstractmethod
    def get_by_id(self, movie_id: int) -> MovieRecord | None:
        pass

    @abstractmethod
    def update(self, movie: MovieRecord) -> None:
        """
        Overwrite the record with `movie.id`.

        Unknown ids are a silent no-op; callers that need existence confirmation
        must check with `get_by_id` first.
        """

    @abstractmethod
    def delete(self, movie_id: int) -> None:
        pass


class InMemoryCatalogStore(CatalogStore):
    """
    In-process catalog.

    Not suitable for multi-instance deployments; records are lost on restart.
    """

    def __init__(self) -> None:
        self._rows: dict[int, MovieRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, movie: MovieRecord) -> MovieRecord:
        with self._lock:
            created = movie.with_id(self._next_id)
            self._rows[created.id] = created
            self._next_id += 1
        return created

    def read_all(self) -> list[MovieRecord]:
        with self._lock:
            return list(self._rows.values())

    def get_by_id(self, movie_id: int) -> MovieRecord | None:
        with self._lock:
            return self._rows.get(int(movie_id))

    def update(self, movie: MovieRecord) -> None:
        if movie.id is None:
            return
        with self._lock:
            if movie.id in self._rows:
                self._rows[movie.id] = movie

    def delete(self, movie_id: int) -> None:
        with self._lock:
            self._rows.pop(int(movie_id), None)


def _raise_for_supabase_error(response: Any, context: str) -> None:
    if hasattr(response, "error") and response.error:
        raise CatalogStoreError(f"Supabase error during {context}: {response.error}")


def _execute(query: Any, context: str) -> Any:
    # supabase-py v2 raises APIError from execute(); older clients set `.error`.
    try:
        response = query.execute()
    except APIError as exc:
        raise CatalogStoreError(f"Supabase error during {context}: {exc}") from exc
    _raise_for_supabase_error(response, context)
    return response


class SupabaseCatalogStore(CatalogStore):
    """Catalog backed by `core.movies` (see `supabase/migrations`)."""

    def __init__(self, db: Client, *, schema: str = "core", table: str = "movies") -> None:
        self._db = db
        self._schema = schema
        self._table = table

    def _query(self):
        return self._db.schema(self._schema).table(self._table)

    def create(self, movie: MovieRecord) -> MovieRecord:
        payload = movie.to_row()
        payload.pop("id", None)
        response = _execute(self._query().insert(payload), "inserting movie")
        data = response.data or []
        if isinstance(data, list) and data:
            return MovieRecord.from_row(data[0])
        raise CatalogStoreError("Supabase insert returned no data for movie.")

    def read_all(self) -> list[MovieRecord]:
        response = _execute(self._query().select("*").order("id"), "listing movies")
        data = response.data or []
        return [MovieRecord.from_row(row) for row in data if isinstance(row, dict)]

    def get_by_id(self, movie_id: int) -> MovieRecord | None:
        response = _execute(self._query().select("*").eq("id", int(movie_id)).limit(1), "fetching movie")
        data = response.data or []
        if isinstance(data, list) and data:
            return MovieRecord.from_row(data[0])
        return None

    def update(self, movie: MovieRecord) -> None:
        if movie.id is None:
            return
        payload = movie.to_row()
        payload.pop("id", None)
        _execute(self._query().update(payload).eq("id", int(movie.id)), "updating movie")

    def delete(self, movie_id: int) -> None:
        _execute(self._query().delete().eq("id", int(movie_id)), "deleting movie")


def build_catalog_store(settings: SupabaseSettings | None = None) -> CatalogStore:
    """
    Supabase-backed store when `SUPABASE_URL` is configured, otherwise in-memory.
    """

    settings = settings or SupabaseSettings.from_env()
    if settings is None:
        logger.warning("SUPABASE_URL is not set; using in-memory movie catalog (data is lost on restart).")
        return InMemoryCatalogStore()
    logger.info(f"Using Supabase movie catalog at {settings.url}")
    return SupabaseCatalogStore(create_supabase_admin_client(settings))


def apply_movie_patch(movie: MovieRecord, **changes: Any) -> MovieRecord:
    """Return `movie` with the given fields replaced (id and tmdb link are preserved)."""
    changes.pop("id", None)
    changes.pop("tmdb_id", None)
    return replace(movie, **changes)
