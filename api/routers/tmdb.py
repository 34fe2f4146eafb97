"""
TMDb passthrough endpoints: movie search and image listings.
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from api.deps import Tmdb
from api.routers.movies import TmdbMovie
from moviecast_backend.aggregation.movie_search import search_movies

router = APIRouter(prefix="/tmdb", tags=["tmdb"])


# --- Pydantic models ---

class SearchResult(TmdbMovie):
    poster_url: str | None


class SearchResponse(BaseModel):
    query: str
    page: int
    status: str
    message: str | None
    total_results: int
    total_pages: int
    results: list[SearchResult]


class Image(BaseModel):
    file_path: str
    width: int | None
    height: int | None
    language: str | None


class MovieImagesResponse(BaseModel):
    tmdb_id: int
    posters: list[Image]
    backdrops: list[Image]


# --- Endpoints ---

@router.get("/search", response_model=SearchResponse)
async def search(
    tmdb: Tmdb,
    query: str = Query(default=""),
    page: int = Query(default=1, ge=1),
) -> dict:
    """
    Search TMDb movies (server-side pagination).

    Always 200; an unreachable provider is reported as status `unavailable`.
    """
    outcome = await search_movies(query, page, tmdb=tmdb)
    result = outcome.result
    return {
        "query": outcome.query,
        "page": outcome.page,
        "status": outcome.status.value,
        "message": outcome.message,
        "total_results": result.total_results if result else 0,
        "total_pages": result.total_pages if result else 0,
        "results": [{**hit.movie.model_dump(), "poster_url": hit.poster_url} for hit in outcome.hits],
    }


@router.get("/movies/{tmdb_id}/images", response_model=MovieImagesResponse)
async def movie_images(tmdb: Tmdb, tmdb_id: int) -> dict:
    """List TMDb posters and backdrops for a movie."""
    if tmdb_id <= 0:
        raise HTTPException(status_code=422, detail="tmdb_id must be positive")
    images = await tmdb.get_movie_images(tmdb_id)
    if images is None:
        raise HTTPException(status_code=502, detail="TMDb images are not available right now.")
    return images.model_dump()
