import json

import pytest

from weather_widget.persistent_list import PersistentList
from weather_widget.storage import InMemoryKeyValueStore

from conftest import make_record


def test_load_missing_slot_is_empty(memory_store):
    assert PersistentList(memory_store, "searchHistory").load() == ()


@pytest.mark.parametrize("raw", ["{not json", "null", '{"name": "Paris"}', '[{"name": "Paris"}]'])
def test_load_malformed_slot_is_empty(raw):
    store = InMemoryKeyValueStore({"searchHistory": raw})
    history = PersistentList(store, "searchHistory", max_items=5)
    assert history.load() == ()
    assert history.items == ()


def test_prepend_then_load_from_fresh_instance(sql_store):
    favorites = PersistentList(sql_store, "favoriteCities")
    favorites.load()
    favorites.prepend(make_record("Lima"))
    favorites.prepend(make_record("Tokyo"))

    reloaded = PersistentList(sql_store, "favoriteCities").load()
    assert [r.name for r in reloaded] == ["Tokyo", "Lima"]
    assert reloaded[0] == make_record("Tokyo")


def test_history_is_bounded_and_evicts_oldest(memory_store):
    history = PersistentList(memory_store, "searchHistory", max_items=5)
    for name in ["a", "b", "c", "d", "e", "f"]:
        history.prepend(make_record(name))
        assert len(history) <= 5

    assert [r.name for r in history.items] == ["f", "e", "d", "c", "b"]
    assert len(json.loads(memory_store.get("searchHistory"))) == 5


def test_favorites_unbounded(memory_store):
    favorites = PersistentList(memory_store, "favoriteCities")
    for i in range(12):
        favorites.prepend(make_record(f"city-{i}"))
    assert len(favorites) == 12


def test_duplicates_kept_on_prepend_and_removed_together(memory_store):
    favorites = PersistentList(memory_store, "favoriteCities")
    for name in ["Paris", "Oslo", "Paris", "Rome", "paris"]:
        favorites.prepend(make_record(name))

    assert [r.name for r in favorites.items] == ["paris", "Rome", "Paris", "Oslo", "Paris"]

    favorites.remove_by("Paris")
    reloaded = PersistentList(memory_store, "favoriteCities").load()
    assert [r.name for r in reloaded] == ["paris", "Rome", "Oslo"]


def test_find_returns_first_match(memory_store):
    history = PersistentList(memory_store, "searchHistory", max_items=5)
    history.prepend(make_record("Paris", temp=1.0))
    history.prepend(make_record("Paris", temp=2.0))
    assert history.find("Paris").weather.temp == 2.0
    assert history.find("Berlin") is None


def test_failed_write_leaves_memory_unchanged(memory_store, monkeypatch):
    history = PersistentList(memory_store, "searchHistory", max_items=5)
    history.prepend(make_record("Paris"))

    def broken_set(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(memory_store, "set", broken_set)
    with pytest.raises(OSError):
        history.prepend(make_record("Oslo"))

    assert [r.name for r in history.items] == ["Paris"]
