from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Mapping

# Release date stored when the provider date is missing or unparseable.
MIN_RELEASE_DATE = date.min


def parse_release_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    raw = str(value or "").strip()
    if not raw:
        return MIN_RELEASE_DATE
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return MIN_RELEASE_DATE


@dataclass(frozen=True)
class MovieRecord:
    """
    Local catalog record (maps to `core.movies`).

    `tmdb_id == 0` means the record is not linked to a TMDb movie, and a 0/0
    coordinate pair means the record has no location.
    """

    title: str
    id: int | None = None
    tmdb_id: int = 0
    synopsis: str = ""
    release_date: date = MIN_RELEASE_DATE
    original_language: str = ""
    rating: float = 0.0
    poster_path: str = ""
    latitude: float | None = 0.0
    longitude: float | None = 0.0

    @property
    def is_linked(self) -> bool:
        return self.tmdb_id > 0

    @property
    def has_location(self) -> bool:
        if self.latitude is None or self.longitude is None:
            return False
        return not (self.latitude == 0 and self.longitude == 0)

    def with_id(self, movie_id: int) -> "MovieRecord":
        return replace(self, id=movie_id)

    def to_row(self) -> dict[str, Any]:
        row: dict[str, Any] = {
            "tmdb_id": int(self.tmdb_id),
            "title": self.title,
            "synopsis": self.synopsis,
            "release_date": self.release_date.isoformat(),
            "original_language": self.original_language,
            "rating": float(self.rating),
            "poster_path": self.poster_path,
            "latitude": float(self.latitude or 0.0),
            "longitude": float(self.longitude or 0.0),
        }
        if self.id is not None:
            row["id"] = int(self.id)
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "MovieRecord":
        return cls(
            id=int(row["id"]) if row.get("id") is not None else None,
            tmdb_id=int(row.get("tmdb_id") or 0),
            title=str(row.get("title") or ""),
            synopsis=str(row.get("synopsis") or ""),
            release_date=parse_release_date(row.get("release_date")),
            original_language=str(row.get("original_language") or ""),
            rating=float(row.get("rating") or 0.0),
            poster_path=str(row.get("poster_path") or ""),
            latitude=float(row.get("latitude") or 0.0),
            longitude=float(row.get("longitude") or 0.0),
        )
