"""
Details composition: local record + TMDb details + poster URL + forecast.

Every remote absence degrades the view instead of failing it; the only way
`get_movie_details` raises is a catalog storage error.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from moviecast_backend.integrations.open_meteo.client import OpenMeteoClient
from moviecast_backend.integrations.tmdb.client import TmdbClient
from moviecast_backend.media.posters import resolve_poster_url
from moviecast_backend.models.forecast import ForecastResult
from moviecast_backend.models.movies import MovieRecord
from moviecast_backend.models.tmdb import MovieDetails
from moviecast_backend.repositories.movies import CatalogStore

logger = logging.getLogger(__name__)

NO_COORDINATES_MESSAGE = (
    "This movie has no coordinates. Import or edit the movie and provide latitude/longitude."
)
FORECAST_UNAVAILABLE_MESSAGE = "The weather forecast is not available right now."
DETAILS_UNAVAILABLE_MESSAGE = "TMDb details are not available right now."
NOT_FOUND_MESSAGE = "Movie not found in the local catalog."


class LocalStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


class DetailsStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"
    NOT_REQUESTED = "not_requested"  # no TMDb link and no tmdb id supplied


class ForecastStatus(str, Enum):
    OK = "ok"
    NO_COORDINATES = "no_coordinates"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class MovieDetailsView:
    movie: MovieRecord | None
    details: MovieDetails | None
    poster_url: str | None
    forecast: ForecastResult | None
    local_status: LocalStatus
    details_status: DetailsStatus
    forecast_status: ForecastStatus
    messages: list[str] = field(default_factory=list)


def _requested_tmdb_id(movie: MovieRecord | None, tmdb_id: int | None) -> int | None:
    if movie is not None:
        return movie.tmdb_id if movie.is_linked else None
    if tmdb_id is not None and tmdb_id > 0:
        return tmdb_id
    return None


async def _fetch_details(tmdb: TmdbClient, tmdb_id: int | None) -> tuple[MovieDetails | None, str | None]:
    if tmdb_id is None:
        return None, None
    details = await tmdb.get_movie_details(tmdb_id)
    if details is None:
        return None, None
    config = await tmdb.get_configuration()
    if config is None:
        # Leave the relative path as-is.
        return details, details.poster_path
    return details, resolve_poster_url(config, details.poster_path)


async def _fetch_forecast(weather: OpenMeteoClient, movie: MovieRecord) -> ForecastResult | None:
    return await weather.get_forecast(float(movie.latitude), float(movie.longitude))


async def get_movie_details(
    movie_id: int,
    tmdb_id: int | None = None,
    *,
    store: CatalogStore,
    tmdb: TmdbClient,
    weather: OpenMeteoClient,
) -> MovieDetailsView:
    """
    Compose the details view for a local movie id (or a bare TMDb id when no
    local record exists).

    Coordinates only come from the local record. When they are usable the TMDb
    and forecast fetches run concurrently.
    """

    movie = await asyncio.to_thread(store.get_by_id, movie_id)
    requested_id = _requested_tmdb_id(movie, tmdb_id)
    wants_forecast = movie is not None and movie.has_location

    if wants_forecast:
        (details, poster_url), forecast = await asyncio.gather(
            _fetch_details(tmdb, requested_id),
            _fetch_forecast(weather, movie),
        )
    else:
        details, poster_url = await _fetch_details(tmdb, requested_id)
        forecast = None

    messages: list[str] = []

    local_status = LocalStatus.FOUND if movie is not None else LocalStatus.NOT_FOUND
    if movie is None:
        messages.append(NOT_FOUND_MESSAGE)

    if requested_id is None:
        details_status = DetailsStatus.NOT_REQUESTED
    elif details is None:
        details_status = DetailsStatus.UNAVAILABLE
        messages.append(DETAILS_UNAVAILABLE_MESSAGE)
    else:
        details_status = DetailsStatus.OK

    if not wants_forecast:
        forecast_status = ForecastStatus.NO_COORDINATES
        messages.append(NO_COORDINATES_MESSAGE)
    elif forecast is None:
        forecast_status = ForecastStatus.UNAVAILABLE
        messages.append(FORECAST_UNAVAILABLE_MESSAGE)
    else:
        forecast_status = ForecastStatus.OK

    logger.info(
        f"Details composed movie_id={movie_id} tmdb_id={requested_id} "
        f"local={local_status.value} details={details_status.value} forecast={forecast_status.value}"
    )
    return MovieDetailsView(
        movie=movie,
        details=details,
        poster_url=poster_url,
        forecast=forecast,
        local_status=local_status,
        details_status=details_status,
        forecast_status=forecast_status,
        messages=messages,
    )
