"""
TMDb response DTOs.

Provider field names (snake_case JSON) are mapped to semantic names here, once,
through pydantic aliases. Everything past the client boundary uses the
semantic names (`synopsis`, `language`, `rating`, ...).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _TmdbModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class MovieSummary(_TmdbModel):
    tmdb_id: int = Field(alias="id")
    title: str | None = None
    synopsis: str | None = Field(default=None, alias="overview")
    release_date: str | None = None
    language: str | None = Field(default=None, alias="original_language")
    rating: float = Field(default=0.0, alias="vote_average")
    poster_path: str | None = None

    @field_validator("rating", mode="before")
    @classmethod
    def _null_rating(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class MovieDetails(MovieSummary):
    """Payload of `/movie/{id}`; only the fields the catalog stores are kept."""


class SearchPage(_TmdbModel):
    page: int = Field(default=1, ge=1)
    results: list[MovieSummary] = Field(default_factory=list)
    total_results: int = 0
    total_pages: int = 0

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value: Any) -> Any:
        return [] if value is None else value


class ImageItem(_TmdbModel):
    file_path: str
    width: int | None = None
    height: int | None = None
    language: str | None = Field(default=None, alias="iso_639_1")


class MovieImages(_TmdbModel):
    tmdb_id: int = Field(alias="id")
    posters: list[ImageItem] = Field(default_factory=list)
    backdrops: list[ImageItem] = Field(default_factory=list)

    @field_validator("posters", "backdrops", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return [] if value is None else value


class ImageConfiguration(_TmdbModel):
    """The `images` block of `/configuration`."""

    base_url: str | None = None
    secure_base_url: str | None = None
    poster_sizes: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_images(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "images" not in data:
            # Already-unwrapped fields (built in code) are accepted as-is.
            if "base_url" in data or "secure_base_url" in data:
                return data
            raise ValueError("configuration payload has no `images` object")
        images = data.get("images")
        if not isinstance(images, dict):
            raise ValueError("configuration payload has no `images` object")
        if not images.get("base_url") or not images.get("poster_sizes"):
            raise ValueError("configuration `images` block lacks base_url or poster_sizes")
        return images

    @field_validator("poster_sizes", mode="before")
    @classmethod
    def _null_sizes(cls, value: Any) -> Any:
        return [] if value is None else value
