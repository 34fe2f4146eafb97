"""
Local catalog endpoints: CRUD, export, TMDb import, and composed details.
"""
from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel, Field, field_validator

from api.deps import Catalog, Forecast, Tmdb, raise_for_catalog_error
from moviecast_backend.aggregation.movie_details import get_movie_details
from moviecast_backend.exports.catalog_export import (
    XLSX_MEDIA_TYPE,
    export_filename,
    export_to_csv_bytes,
    export_to_xlsx_bytes,
)
from moviecast_backend.ingestion.movie_importer import MovieImportError, import_movie
from moviecast_backend.integrations.tmdb.client import parse_tmdb_movie_id
from moviecast_backend.models.movies import MovieRecord
from moviecast_backend.repositories.movies import CatalogStoreError, apply_movie_patch

router = APIRouter(prefix="/movies", tags=["movies"])


# --- Pydantic models ---

class Movie(BaseModel):
    id: int
    tmdb_id: int
    title: str
    synopsis: str
    release_date: date
    original_language: str
    rating: float
    poster_path: str
    latitude: float | None
    longitude: float | None


class MovieWrite(BaseModel):
    """Create/edit payload; required fields mirror the catalog form."""

    title: str = Field(min_length=1)
    synopsis: str = Field(min_length=1)
    release_date: date
    original_language: str = Field(min_length=1)
    rating: float = 0.0
    poster_path: str = ""
    latitude: float
    longitude: float


class ImportRequest(BaseModel):
    tmdb_id: int = Field(gt=0)
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("tmdb_id", mode="before")
    @classmethod
    def _parse_tmdb_id(cls, value: Any) -> Any:
        # Accept a pasted TMDb movie URL as well as a bare id.
        if isinstance(value, str):
            return parse_tmdb_movie_id(value)
        return value


class TmdbMovie(BaseModel):
    tmdb_id: int
    title: str | None
    synopsis: str | None
    release_date: str | None
    language: str | None
    rating: float
    poster_path: str | None


class DailyForecast(BaseModel):
    date: str
    temperature_max: float | None
    temperature_min: float | None


class WeatherForecast(BaseModel):
    latitude: float
    longitude: float
    utc_offset_seconds: int
    timezone: str | None
    days: list[DailyForecast]


class MovieDetailsResponse(BaseModel):
    movie: Movie | None
    tmdb: TmdbMovie | None
    poster_url: str | None
    forecast: WeatherForecast | None
    local_status: str
    details_status: str
    forecast_status: str
    messages: list[str]


def _movie_out(movie: MovieRecord) -> dict[str, Any]:
    return asdict(movie)


def _forecast_out(forecast) -> dict[str, Any] | None:
    if forecast is None:
        return None
    return {
        "latitude": forecast.latitude,
        "longitude": forecast.longitude,
        "utc_offset_seconds": forecast.utc_offset_seconds,
        "timezone": forecast.timezone,
        "days": [asdict(day) for day in forecast.days()],
    }


def _require_movie(db: Catalog, movie_id: int) -> MovieRecord:
    try:
        movie = db.get_by_id(movie_id)
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "fetching movie")
    if movie is None:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie


# --- Endpoints ---

@router.get("", response_model=list[Movie])
def list_movies(db: Catalog) -> list[dict]:
    """List every movie in the local catalog."""
    try:
        return [_movie_out(m) for m in db.read_all()]
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "listing movies")


@router.post("", response_model=Movie, status_code=201)
def create_movie(db: Catalog, payload: MovieWrite) -> dict:
    """Create a movie by hand (not linked to TMDb)."""
    record = MovieRecord(tmdb_id=0, **payload.model_dump())
    try:
        return _movie_out(db.create(record))
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "creating movie")


@router.get("/export/csv")
def export_movies_csv(db: Catalog) -> Response:
    """Download the catalog as CSV."""
    try:
        movies = db.read_all()
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "exporting movies")
    return Response(
        content=export_to_csv_bytes(movies),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("csv")}"'},
    )


@router.get("/export/xlsx")
def export_movies_xlsx(db: Catalog) -> Response:
    """Download the catalog as an Excel workbook."""
    try:
        movies = db.read_all()
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "exporting movies")
    return Response(
        content=export_to_xlsx_bytes(movies),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename("xlsx")}"'},
    )


@router.post("/import", response_model=Movie, status_code=201)
async def import_tmdb_movie(db: Catalog, tmdb: Tmdb, payload: ImportRequest) -> dict:
    """Import a TMDb movie into the catalog."""
    try:
        created = await import_movie(
            payload.tmdb_id,
            payload.latitude,
            payload.longitude,
            store=db,
            tmdb=tmdb,
        )
    except MovieImportError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "importing movie")
    return _movie_out(created)


@router.get("/{movie_id}", response_model=Movie)
def get_movie(db: Catalog, movie_id: int) -> dict:
    """Get a specific movie by local ID."""
    return _movie_out(_require_movie(db, movie_id))


@router.put("/{movie_id}", response_model=Movie)
def update_movie(db: Catalog, movie_id: int, payload: MovieWrite) -> dict:
    """Edit a movie; the TMDb link is kept."""
    existing = _require_movie(db, movie_id)
    updated = apply_movie_patch(existing, **payload.model_dump())
    try:
        db.update(updated)
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "updating movie")
    return _movie_out(updated)


@router.delete("/{movie_id}", status_code=204)
def delete_movie(db: Catalog, movie_id: int) -> Response:
    """Delete a movie by local ID."""
    _require_movie(db, movie_id)
    try:
        db.delete(movie_id)
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "deleting movie")
    return Response(status_code=204)


@router.get("/{movie_id}/details", response_model=MovieDetailsResponse)
async def movie_details(
    db: Catalog,
    tmdb: Tmdb,
    weather: Forecast,
    movie_id: int,
    tmdb_id: int | None = Query(default=None, gt=0),
) -> dict:
    """
    Local record + TMDb details + forecast.

    Always 200: missing pieces are reported through the status fields.
    """
    try:
        view = await get_movie_details(movie_id, tmdb_id, store=db, tmdb=tmdb, weather=weather)
    except CatalogStoreError as exc:
        raise_for_catalog_error(exc, "fetching movie details")
    return {
        "movie": _movie_out(view.movie) if view.movie is not None else None,
        "tmdb": view.details.model_dump() if view.details is not None else None,
        "poster_url": view.poster_url,
        "forecast": _forecast_out(view.forecast),
        "local_status": view.local_status.value,
        "details_status": view.details_status.value,
        "forecast_status": view.forecast_status.value,
        "messages": view.messages,
    }
