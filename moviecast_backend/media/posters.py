from __future__ import annotations

from moviecast_backend.models.tmdb import ImageConfiguration

NO_POSTER_PLACEHOLDER = "/images/no-poster.png"
PREFERRED_POSTER_SIZE = "w342"


def select_poster_size(poster_sizes: list[str]) -> str:
    """
    Pick the poster size token: the preferred label when listed, else the third
    entry, else the first.

    Index 2 stands in for "medium" on TMDb's usual small-to-large ordering; the
    provider does not guarantee that ordering.
    """

    if not poster_sizes:
        raise ValueError("poster_sizes is empty")
    if PREFERRED_POSTER_SIZE in poster_sizes:
        return PREFERRED_POSTER_SIZE
    if len(poster_sizes) >= 3:
        return poster_sizes[2]
    return poster_sizes[0]


def resolve_poster_url(config: ImageConfiguration | None, poster_path: str | None) -> str:
    """
    Turn a relative TMDb poster path into a displayable URL.

    Without a usable configuration the relative path is returned unchanged, so
    callers must not assume the result is an absolute URL.
    """

    if not poster_path:
        return NO_POSTER_PLACEHOLDER

    if config is not None and config.base_url and config.poster_sizes:
        size = select_poster_size(config.poster_sizes)
        # poster_path normally starts with "/"
        return f"{config.base_url}{size}{poster_path}"

    return poster_path
