from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from moviecast_backend.db.supabase import SupabaseSettings
from moviecast_backend.models.movies import MIN_RELEASE_DATE, MovieRecord
from moviecast_backend.repositories.movies import (
    CatalogStoreError,
    InMemoryCatalogStore,
    SupabaseCatalogStore,
    apply_movie_patch,
    build_catalog_store,
)


def _movie(title: str = "Central Station", **kwargs) -> MovieRecord:
    defaults = dict(
        synopsis="A letter writer and a boy cross Brazil.",
        release_date=date(1998, 4, 3),
        original_language="pt",
        rating=7.9,
        latitude=-22.9068,
        longitude=-43.1729,
    )
    defaults.update(kwargs)
    return MovieRecord(title=title, **defaults)


class _Resp:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error


class TestInMemoryCatalogStore:
    def test_create_assigns_increasing_ids(self):
        store = InMemoryCatalogStore()
        first = store.create(_movie("A"))
        second = store.create(_movie("B"))
        assert (first.id, second.id) == (1, 2)
        assert [m.title for m in store.read_all()] == ["A", "B"]

    def test_get_by_id_missing_returns_none(self):
        assert InMemoryCatalogStore().get_by_id(99) is None

    def test_update_overwrites_existing(self):
        store = InMemoryCatalogStore()
        created = store.create(_movie())
        store.update(apply_movie_patch(created, title="Central do Brasil"))
        assert store.get_by_id(created.id).title == "Central do Brasil"

    def test_update_unknown_id_is_noop(self):
        store = InMemoryCatalogStore()
        store.update(_movie().with_id(42))
        assert store.read_all() == []

    def test_delete_removes_record(self):
        store = InMemoryCatalogStore()
        created = store.create(_movie())
        store.delete(created.id)
        store.delete(created.id)
        assert store.get_by_id(created.id) is None


def test_apply_movie_patch_keeps_id_and_tmdb_link() -> None:
    movie = _movie(tmdb_id=666).with_id(3)
    patched = apply_movie_patch(movie, id=9, tmdb_id=0, rating=5.0)
    assert patched.id == 3
    assert patched.tmdb_id == 666
    assert patched.rating == 5.0


def test_movie_record_location_rules() -> None:
    assert _movie().has_location
    assert not _movie(latitude=0.0, longitude=0.0).has_location
    assert not _movie(latitude=None, longitude=10.0).has_location
    assert _movie(latitude=0.0, longitude=10.0).has_location


def test_movie_record_row_round_trip_handles_bad_dates() -> None:
    row = {
        "id": 7,
        "tmdb_id": None,
        "title": "X",
        "synopsis": None,
        "release_date": "not-a-date",
        "original_language": "en",
        "rating": None,
        "poster_path": None,
        "latitude": None,
        "longitude": None,
    }
    movie = MovieRecord.from_row(row)
    assert movie.id == 7
    assert movie.tmdb_id == 0
    assert movie.release_date == MIN_RELEASE_DATE
    assert not movie.has_location
    assert movie.to_row()["release_date"] == "0001-01-01"


class TestSupabaseCatalogStore:
    def test_create_inserts_row_without_id(self):
        db = MagicMock()
        table = db.schema.return_value.table.return_value
        table.insert.return_value.execute.return_value = _Resp(
            [{**_movie().to_row(), "id": 11}]
        )

        created = SupabaseCatalogStore(db).create(_movie().with_id(5))

        db.schema.assert_called_with("core")
        db.schema.return_value.table.assert_called_with("movies")
        payload = table.insert.call_args[0][0]
        assert "id" not in payload
        assert payload["release_date"] == "1998-04-03"
        assert created.id == 11

    def test_get_by_id_returns_none_when_empty(self):
        db = MagicMock()
        query = db.schema.return_value.table.return_value.select.return_value.eq.return_value
        query.limit.return_value.execute.return_value = _Resp([])
        assert SupabaseCatalogStore(db).get_by_id(1) is None

    def test_read_all_orders_by_id(self):
        db = MagicMock()
        select = db.schema.return_value.table.return_value.select.return_value
        select.order.return_value.execute.return_value = _Resp(
            [{**_movie("A").to_row(), "id": 1}, {**_movie("B").to_row(), "id": 2}]
        )
        movies = SupabaseCatalogStore(db).read_all()
        select.order.assert_called_with("id")
        assert [m.title for m in movies] == ["A", "B"]

    def test_update_filters_by_id(self):
        db = MagicMock()
        table = db.schema.return_value.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = _Resp([])
        SupabaseCatalogStore(db).update(_movie().with_id(4))
        table.update.return_value.eq.assert_called_with("id", 4)
        assert "id" not in table.update.call_args[0][0]

    def test_supabase_error_raises_store_error(self):
        db = MagicMock()
        table = db.schema.return_value.table.return_value
        table.delete.return_value.eq.return_value.execute.return_value = _Resp(error="permission denied")
        with pytest.raises(CatalogStoreError):
            SupabaseCatalogStore(db).delete(1)


def test_build_catalog_store_falls_back_to_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    assert isinstance(build_catalog_store(), InMemoryCatalogStore)


def test_build_catalog_store_uses_supabase_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    from moviecast_backend.repositories import movies as mod

    client = MagicMock()
    monkeypatch.setattr(mod, "create_supabase_admin_client", lambda settings: client)
    store = build_catalog_store(SupabaseSettings(url="https://example.supabase.co", service_role_key="k"))
    assert isinstance(store, SupabaseCatalogStore)


def test_supabase_settings_require_service_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    with pytest.raises(RuntimeError):
        SupabaseSettings.from_env()


@pytest.mark.parametrize("operation", ["read_all", "get_by_id", "delete"])
def test_postgrest_api_error_becomes_store_error(operation: str) -> None:
    db = MagicMock()
    table = db.schema.return_value.table.return_value
    error = APIError({"message": "permission denied for table movies", "code": "42501"})
    table.select.return_value.order.return_value.execute.side_effect = error
    table.select.return_value.eq.return_value.limit.return_value.execute.side_effect = error
    table.delete.return_value.eq.return_value.execute.side_effect = error
    store = SupabaseCatalogStore(db)

    with pytest.raises(CatalogStoreError) as excinfo:
        if operation == "read_all":
            store.read_all()
        else:
            getattr(store, operation)(1)

    assert excinfo.value.__cause__ is error
