from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from moviecast_backend.integrations.tmdb.client import TmdbClient
from moviecast_backend.media.posters import resolve_poster_url
from moviecast_backend.models.tmdb import MovieSummary, SearchPage

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Enter a search term to look up movies on TMDb."
SEARCH_UNAVAILABLE_MESSAGE = "TMDb search failed. Check the server logs."


class SearchStatus(str, Enum):
    OK = "ok"
    EMPTY_QUERY = "empty_query"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class SearchHit:
    movie: MovieSummary
    poster_url: str | None


@dataclass(frozen=True)
class SearchOutcome:
    query: str
    page: int
    status: SearchStatus
    result: SearchPage | None = None
    hits: list[SearchHit] = field(default_factory=list)
    message: str | None = None


async def search_movies(query: str, page: int = 1, *, tmdb: TmdbClient) -> SearchOutcome:
    """
    Search TMDb and resolve each result's poster URL.

    Poster paths stay relative (`poster_url` is the raw path) when the provider
    configuration is unavailable.
    """

    query = query or ""
    page = max(int(page), 1)
    if not query.strip():
        return SearchOutcome(query=query, page=page, status=SearchStatus.EMPTY_QUERY, message=EMPTY_QUERY_MESSAGE)

    result = await tmdb.search_movies(query, page)
    if result is None:
        logger.warning(f"Search unavailable query={query!r} page={page}")
        return SearchOutcome(
            query=query,
            page=page,
            status=SearchStatus.UNAVAILABLE,
            message=SEARCH_UNAVAILABLE_MESSAGE,
        )

    config = await tmdb.get_configuration()
    hits = [
        SearchHit(
            movie=item,
            poster_url=resolve_poster_url(config, item.poster_path) if config is not None else item.poster_path,
        )
        for item in result.results
    ]
    return SearchOutcome(query=query, page=page, status=SearchStatus.OK, result=result, hits=hits)
