from __future__ import annotations

import pytest

from moviecast_backend.media.posters import (
    NO_POSTER_PLACEHOLDER,
    resolve_poster_url,
    select_poster_size,
)
from moviecast_backend.models.tmdb import ImageConfiguration

BASE = "https://image.tmdb.org/t/p/"


def _config(sizes: list[str], base_url: str | None = BASE) -> ImageConfiguration:
    return ImageConfiguration(base_url=base_url, poster_sizes=sizes)


@pytest.mark.parametrize("path", [None, ""])
def test_empty_path_returns_placeholder(path) -> None:
    assert resolve_poster_url(_config(["w92"]), path) == NO_POSTER_PLACEHOLDER
    assert resolve_poster_url(None, path) == NO_POSTER_PLACEHOLDER


def test_preferred_size_wins() -> None:
    assert resolve_poster_url(_config(["w92", "w154", "w342"]), "/p.jpg") == f"{BASE}w342/p.jpg"
    # Preferred label is used even when it is not the third entry.
    assert resolve_poster_url(_config(["w342", "w500", "w780", "original"]), "/p.jpg") == f"{BASE}w342/p.jpg"


def test_third_entry_when_preferred_missing() -> None:
    assert resolve_poster_url(_config(["a", "b", "c"]), "/p.jpg") == f"{BASE}c/p.jpg"


def test_first_entry_when_fewer_than_three() -> None:
    assert resolve_poster_url(_config(["a"]), "/p.jpg") == f"{BASE}a/p.jpg"
    assert resolve_poster_url(_config(["a", "b"]), "/p.jpg") == f"{BASE}a/p.jpg"


def test_absent_config_returns_path_unchanged() -> None:
    assert resolve_poster_url(None, "/p.jpg") == "/p.jpg"


def test_unusable_config_returns_path_unchanged() -> None:
    assert resolve_poster_url(_config([]), "/p.jpg") == "/p.jpg"
    assert resolve_poster_url(_config(["w342"], base_url=None), "/p.jpg") == "/p.jpg"


def test_resolution_is_deterministic() -> None:
    config = _config(["w92", "w154", "w185"])
    results = {resolve_poster_url(config, "/p.jpg") for _ in range(5)}
    assert results == {f"{BASE}w185/p.jpg"}


def test_select_poster_size_requires_sizes() -> None:
    with pytest.raises(ValueError):
        select_poster_size([])
