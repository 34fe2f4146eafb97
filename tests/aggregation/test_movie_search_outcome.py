from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

from moviecast_backend.aggregation.movie_search import SearchStatus, search_movies
from moviecast_backend.media.posters import NO_POSTER_PLACEHOLDER
from moviecast_backend.models.tmdb import ImageConfiguration, MovieSummary, SearchPage

PAGE = SearchPage(
    page=1,
    results=[
        MovieSummary(tmdb_id=1, title="With poster", poster_path="/a.jpg"),
        MovieSummary(tmdb_id=2, title="No poster", poster_path=None),
    ],
    total_results=2,
    total_pages=1,
)
CONFIG = ImageConfiguration(base_url="https://image.tmdb.org/t/p/", poster_sizes=["w92", "w154", "w185"])


def _tmdb(page=PAGE, config=CONFIG) -> MagicMock:
    tmdb = MagicMock()
    tmdb.search_movies = AsyncMock(return_value=page)
    tmdb.get_configuration = AsyncMock(return_value=config)
    return tmdb


def test_empty_query_does_not_call_provider() -> None:
    tmdb = _tmdb()
    outcome = asyncio.run(search_movies("  ", 1, tmdb=tmdb))
    assert outcome.status is SearchStatus.EMPTY_QUERY
    assert outcome.message
    tmdb.search_movies.assert_not_called()


def test_results_get_resolved_poster_urls() -> None:
    outcome = asyncio.run(search_movies("Matrix", 1, tmdb=_tmdb()))
    assert outcome.status is SearchStatus.OK
    assert [hit.poster_url for hit in outcome.hits] == [
        "https://image.tmdb.org/t/p/w185/a.jpg",
        NO_POSTER_PLACEHOLDER,
    ]


def test_missing_configuration_keeps_raw_paths() -> None:
    outcome = asyncio.run(search_movies("Matrix", 1, tmdb=_tmdb(config=None)))
    assert [hit.poster_url for hit in outcome.hits] == ["/a.jpg", None]


def test_provider_failure_is_reported_not_raised() -> None:
    tmdb = _tmdb(page=None)
    outcome = asyncio.run(search_movies("Matrix", 2, tmdb=tmdb))
    assert outcome.status is SearchStatus.UNAVAILABLE
    assert outcome.result is None
    assert outcome.hits == []
    tmdb.get_configuration.assert_not_called()
