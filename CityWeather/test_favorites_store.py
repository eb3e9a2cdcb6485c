"""Tests for the favorites store."""
import json
import pytest
from unittest.mock import patch
from favorites_store import (
    FAVORITES_KEY,
    DuplicateError,
    FavoriteIndexError,
    FavoritesStore,
)
from preferences import PreferencesError, PreferencesStore


@pytest.fixture
def prefs_path(tmp_path):
    return tmp_path / "prefs.json"


@pytest.fixture
def prefs(prefs_path):
    return PreferencesStore(str(prefs_path))


def _persisted(prefs_path):
    return json.loads(prefs_path.read_text(encoding="utf-8"))[FAVORITES_KEY]


def test_starts_empty(prefs):
    store = FavoritesStore(prefs)
    assert store.cities == []
    assert len(store) == 0


def test_add_appends_and_persists(prefs, prefs_path):
    store = FavoritesStore(prefs)
    store.add("Tokyo")
    store.add("Lima")

    assert store.cities == ["Tokyo", "Lima"]
    assert _persisted(prefs_path) == ["Tokyo", "Lima"]


def test_add_duplicate_rejected(prefs, prefs_path):
    store = FavoritesStore(prefs)
    store.add("Tokyo")

    with pytest.raises(DuplicateError) as exc_info:
        store.add("Tokyo")

    assert exc_info.value.city == "Tokyo"
    assert store.cities == ["Tokyo"]
    assert _persisted(prefs_path) == ["Tokyo"]


def test_duplicate_check_is_case_sensitive(prefs):
    store = FavoritesStore(prefs)
    store.add("Tokyo")
    store.add("tokyo")
    assert store.cities == ["Tokyo", "tokyo"]


def test_duplicate_does_not_reorder(prefs):
    store = FavoritesStore(prefs)
    for city in ["A", "B", "C"]:
        store.add(city)

    with pytest.raises(DuplicateError):
        store.add("A")

    assert store.cities == ["A", "B", "C"]


def test_remove_out_of_range(prefs, prefs_path):
    store = FavoritesStore(prefs)
    store.add("A")
    store.add("B")

    for index in (5, 2, -1):
        with pytest.raises(FavoriteIndexError) as exc_info:
            store.remove(index)
        assert exc_info.value.index == index
        assert exc_info.value.length == 2

    assert store.cities == ["A", "B"]
    assert _persisted(prefs_path) == ["A", "B"]


def test_remove_index_error_is_builtin_index_error(prefs):
    store = FavoritesStore(prefs)
    with pytest.raises(IndexError):
        store.remove(0)


def test_remove_first(prefs, prefs_path):
    store = FavoritesStore(prefs)
    store.add("A")
    store.add("B")

    assert store.remove(0) == "A"

    assert store.cities == ["B"]
    assert _persisted(prefs_path) == ["B"]


def test_remove_shifts_later_items(prefs):
    store = FavoritesStore(prefs)
    for city in ["A", "B", "C", "D"]:
        store.add(city)

    store.remove(1)

    assert store.cities == ["A", "C", "D"]
    assert store.get(1) == "C"


def test_round_trip_preserves_order(prefs):
    store = FavoritesStore(prefs)
    for city in ["A", "B", "C"]:
        store.add(city)

    reloaded = FavoritesStore(prefs)
    assert reloaded.cities == ["A", "B", "C"]
    assert reloaded.load() == ["A", "B", "C"]


def test_load_corrupt_state_is_empty(prefs, prefs_path):
    prefs_path.write_text("garbage", encoding="utf-8")
    assert FavoritesStore(prefs).cities == []


@pytest.mark.parametrize("stored", ["Tokyo", {"0": "Tokyo"}, ["Tokyo", 3], 42])
def test_load_wrong_type_is_empty(prefs, stored):
    prefs.set(FAVORITES_KEY, stored)
    assert FavoritesStore(prefs).cities == []


def test_load_drops_stored_duplicates(prefs):
    prefs.set(FAVORITES_KEY, ["A", "B", "A", "C"])
    assert FavoritesStore(prefs).cities == ["A", "B", "C"]


def test_cities_is_a_copy(prefs):
    store = FavoritesStore(prefs)
    store.add("A")

    cities = store.cities
    cities.append("B")

    assert store.cities == ["A"]


def test_failed_persist_leaves_list_unchanged(prefs):
    store = FavoritesStore(prefs)
    store.add("A")

    with patch.object(prefs, "set", side_effect=PreferencesError("read-only")):
        with pytest.raises(PreferencesError):
            store.add("B")
        with pytest.raises(PreferencesError):
            store.remove(0)

    assert store.cities == ["A"]


def test_container_protocol(prefs):
    store = FavoritesStore(prefs)
    store.add("A")
    store.add("B")

    assert "A" in store
    assert "a" not in store
    assert list(store) == ["A", "B"]
    with pytest.raises(FavoriteIndexError):
        store.get(2)


@pytest.mark.parametrize("city", [123, None, ["Tokyo"]])
def test_add_rejects_non_string(prefs, prefs_path, city):
    store = FavoritesStore(prefs)
    store.add("Tokyo")

    with pytest.raises(TypeError):
        store.add(city)

    assert store.cities == ["Tokyo"]
    # the persisted list still loads in full
    assert FavoritesStore(prefs).cities == ["Tokyo"]
    assert _persisted(prefs_path) == ["Tokyo"]
