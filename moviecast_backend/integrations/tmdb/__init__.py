"""
TMDb integration clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from moviecast_backend.integrations.tmdb.client import (
        TmdbClient,
        parse_tmdb_movie_id,
        resolve_api_key,
    )

__all__ = [
    "TmdbClient",
    "parse_tmdb_movie_id",
    "resolve_api_key",
]


def __getattr__(name: str):
    if name in __all__:
        from moviecast_backend.integrations.tmdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
