from __future__ import annotations

import asyncio
import logging

from moviecast_backend.integrations.tmdb.client import TmdbClient
from moviecast_backend.media.posters import resolve_poster_url
from moviecast_backend.models.movies import MovieRecord, parse_release_date
from moviecast_backend.models.tmdb import ImageConfiguration, MovieDetails
from moviecast_backend.repositories.movies import CatalogStore

logger = logging.getLogger(__name__)

UNTITLED_PLACEHOLDER = "Untitled"


class MovieImportError(RuntimeError):
    def __init__(self, message: str, *, tmdb_id: int) -> None:
        super().__init__(message)
        self.tmdb_id = tmdb_id


def build_movie_record(
    details: MovieDetails,
    config: ImageConfiguration | None,
    *,
    latitude: float | None = None,
    longitude: float | None = None,
) -> MovieRecord:
    """
    Map TMDb details onto a new (unsaved) catalog record.

    TMDb never supplies movie coordinates, so they come from the caller and
    default to 0/0 ("no location") until the user edits the record.
    """

    return MovieRecord(
        tmdb_id=details.tmdb_id,
        title=details.title or UNTITLED_PLACEHOLDER,
        synopsis=details.synopsis or "",
        release_date=parse_release_date(details.release_date),
        original_language=details.language or "",
        rating=float(details.rating or 0.0),
        poster_path=resolve_poster_url(config, details.poster_path),
        latitude=latitude if latitude is not None else 0.0,
        longitude=longitude if longitude is not None else 0.0,
    )


async def import_movie(
    tmdb_id: int,
    latitude: float | None = None,
    longitude: float | None = None,
    *,
    store: CatalogStore,
    tmdb: TmdbClient,
) -> MovieRecord:
    """
    Import a TMDb movie into the local catalog and return the persisted record.

    Raises `MovieImportError` (and persists nothing) when TMDb details cannot be
    fetched. A missing configuration only leaves the poster path relative.
    """

    logger.info(f"Import request tmdb_id={tmdb_id}")
    details = await tmdb.get_movie_details(tmdb_id)
    if details is None:
        logger.error(f"Import failed: TMDb details unavailable for tmdb_id={tmdb_id}")
        raise MovieImportError("Could not fetch movie details from TMDb.", tmdb_id=tmdb_id)

    config = await tmdb.get_configuration()
    record = build_movie_record(details, config, latitude=latitude, longitude=longitude)
    created = await asyncio.to_thread(store.create, record)
    logger.info(f"Imported tmdb_id={tmdb_id} as movie id={created.id} title={created.title!r}")
    return created
