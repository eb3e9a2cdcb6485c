"""Tests for the in-memory weather cache."""
import pytest
from fetch_cache import FetchCache
from weather_data import WeatherRecord


def _record(city, temp=10.0):
    return WeatherRecord(city=city, country="XX", temperature_celsius=temp, condition_summary="Clear")


def test_cache_get_set():
    cache = FetchCache()
    assert cache.get("Oslo") is None
    assert "Oslo" not in cache

    record = _record("Oslo")
    cache.set("Oslo", record)

    assert cache.get("Oslo") is record
    assert "Oslo" in cache
    assert "oslo" not in cache
    assert len(cache) == 1


def test_cache_overwrite_is_last_writer_wins():
    cache = FetchCache()
    cache.set("Oslo", _record("Oslo", 1.0))
    cache.set("Oslo", _record("Oslo", 2.0))

    assert len(cache) == 1
    assert cache.get("Oslo").temperature_celsius == 2.0


def test_cache_unbounded_by_default():
    cache = FetchCache()
    for i in range(500):
        cache.set(f"City {i}", _record(f"City {i}"))

    assert len(cache) == 500
    assert cache.get("City 0") is not None


def test_cache_bounded_evicts_least_recently_used():
    cache = FetchCache(max_entries=2)
    cache.set("A", _record("A"))
    cache.set("B", _record("B"))
    cache.get("A")  # A is now most recent
    cache.set("C", _record("C"))

    assert "A" in cache
    assert "B" not in cache
    assert "C" in cache
    assert len(cache) == 2


def test_cache_invalid_bound():
    with pytest.raises(ValueError):
        FetchCache(max_entries=0)


def test_cache_clear():
    cache = FetchCache()
    cache.set("A", _record("A"))
    cache.clear()
    assert len(cache) == 0
    assert cache.get("A") is None
