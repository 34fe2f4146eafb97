"""
Domain models shared across the API and ingestion code.
"""

from moviecast_backend.models.forecast import DailyTemperature, ForecastResult
from moviecast_backend.models.movies import MIN_RELEASE_DATE, MovieRecord, parse_release_date
from moviecast_backend.models.tmdb import (
    ImageConfiguration,
    ImageItem,
    MovieDetails,
    MovieImages,
    MovieSummary,
    SearchPage,
)

__all__ = [
    "DailyTemperature",
    "ForecastResult",
    "ImageConfiguration",
    "ImageItem",
    "MIN_RELEASE_DATE",
    "MovieDetails",
    "MovieImages",
    "MovieRecord",
    "MovieSummary",
    "SearchPage",
    "parse_release_date",
]
