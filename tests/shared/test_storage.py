"""Tests for shared/storage.py."""

import json

import pytest

from shared.config import get_settings
from shared.storage import (
    IKeyValueStore,
    InMemoryStore,
    JsonFileStore,
    get_store,
    reset_store_cache,
)


class TestInMemoryStore:
    def test_get_missing_returns_none(self):
        store = InMemoryStore()
        assert store.get("token") is None

    def test_set_and_get(self):
        """Should return the last value written."""
        store = InMemoryStore()
        store.set("token", "a")
        store.set("token", "b")
        assert store.get("token") == "b"

    def test_remove_ignores_missing_keys(self):
        """Removing an absent key should be a no-op."""
        store = InMemoryStore({"token": "a"})
        store.remove("token")
        store.remove("token")
        assert store.get("token") is None
        assert store.keys() == []

    def test_initial_values_are_copied(self):
        """Should not alias the dict passed in."""
        initial = {"token": "a"}
        store = InMemoryStore(initial)
        store.set("token", "b")
        assert initial["token"] == "a"

    def test_implements_interface(self):
        assert isinstance(InMemoryStore(), IKeyValueStore)


class TestJsonFileStore:
    def test_persists_across_instances(self, tmp_path):
        """Values written by one instance should be visible to the next."""
        path = tmp_path / "session.json"
        JsonFileStore(path).set("token", "abc")

        reopened = JsonFileStore(path)
        assert reopened.get("token") == "abc"

    def test_remove_is_persisted(self, tmp_path):
        path = tmp_path / "session.json"
        store = JsonFileStore(path)
        store.set("token", "abc")
        store.set("user", "{}")
        store.remove("token")

        assert json.loads(path.read_text()) == {"user": "{}"}

    def test_creates_parent_directories(self, tmp_path):
        """Should create missing directories on first write."""
        path = tmp_path / "nested" / "dir" / "session.json"
        JsonFileStore(path).set("token", "abc")
        assert path.exists()

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "missing.json")
        assert store.get("token") is None
        assert not store.path.exists()

    def test_corrupt_file_is_treated_as_empty(self, tmp_path):
        """An unparseable file should not raise."""
        path = tmp_path / "session.json"
        path.write_text("{not json")

        store = JsonFileStore(path)
        assert store.get("token") is None

        store.set("token", "abc")
        assert json.loads(path.read_text()) == {"token": "abc"}

    def test_non_object_file_is_treated_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("[1, 2, 3]")
        assert JsonFileStore(path).get("0") is None

    def test_implements_interface(self, tmp_path):
        assert isinstance(JsonFileStore(tmp_path / "s.json"), IKeyValueStore)


class TestGetStore:
    def test_uses_configured_path(self, tmp_path, monkeypatch):
        """get_store should open the file named by HIVE_STORAGE_PATH."""
        path = tmp_path / "configured.json"
        monkeypatch.setenv("HIVE_STORAGE_PATH", str(path))
        get_settings.cache_clear()
        reset_store_cache()

        store = get_store()
        assert store.path == path

    def test_is_cached(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HIVE_STORAGE_PATH", str(tmp_path / "s.json"))
        get_settings.cache_clear()
        assert get_store() is get_store()

    def test_reset_creates_new_instance(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HIVE_STORAGE_PATH", str(tmp_path / "s.json"))
        get_settings.cache_clear()
        first = get_store()
        reset_store_cache()
        assert get_store() is not first
