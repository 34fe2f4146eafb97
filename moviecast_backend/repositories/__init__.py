"""
Repository layer for catalog storage.
"""

from moviecast_backend.repositories.movies import (
    CatalogStore,
    CatalogStoreError,
    InMemoryCatalogStore,
    SupabaseCatalogStore,
    apply_movie_patch,
    build_catalog_store,
)

__all__ = [
    "CatalogStore",
    "CatalogStoreError",
    "InMemoryCatalogStore",
    "SupabaseCatalogStore",
    "apply_movie_patch",
    "build_catalog_store",
]
