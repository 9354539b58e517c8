"""Tests for credentials.py — persisted API key handling."""
from __future__ import annotations

import json

import pytest

from daily_stars.credentials import API_KEY_ENV, API_KEY_NAME, CredentialStore, KeyValueStore
from daily_stars.errors import MissingCredentialError


class TestKeyValueStore:
    def test_missing_file_is_empty(self, kv_store):
        assert kv_store.get("anything") == ""
        assert "anything" not in kv_store

    def test_set_writes_through(self, kv_store):
        kv_store.set("theme", "Poetic & Reflective")
        on_disk = json.loads(kv_store.path.read_text(encoding="utf-8"))
        assert on_disk == {"theme": "Poetic & Reflective"}

    def test_values_survive_reopen(self, kv_store):
        kv_store.set("theme", "Stoic & Philosophical")
        reopened = KeyValueStore(kv_store.path)
        assert reopened.get("theme") == "Stoic & Philosophical"

    def test_delete(self, kv_store):
        kv_store.set("theme", "x")
        kv_store.delete("theme")
        assert "theme" not in KeyValueStore(kv_store.path)

    def test_creates_parent_directories(self, tmp_path):
        store = KeyValueStore(tmp_path / "nested" / "dir" / "state.json")
        store.set("k", "v")
        assert store.path.exists()

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{broken", encoding="utf-8")
        assert KeyValueStore(path).get("k", "fallback") == "fallback"


class TestCredentialStore:
    def test_starts_empty(self, no_credentials):
        assert no_credentials.api_key == ""
        assert not no_credentials.has_api_key()

    def test_require_without_key_raises(self, no_credentials):
        with pytest.raises(MissingCredentialError, match="API key is not provided"):
            no_credentials.require_api_key()

    def test_set_strips_and_persists(self, no_credentials, kv_store):
        no_credentials.set_api_key("  sk-or-abc  ")
        assert no_credentials.require_api_key() == "sk-or-abc"
        assert KeyValueStore(kv_store.path).get(API_KEY_NAME) == "sk-or-abc"

    def test_key_loaded_from_existing_store(self, credentials, kv_store):
        assert CredentialStore(KeyValueStore(kv_store.path)).api_key == "sk-or-test"

    def test_environment_fallback(self, kv_store, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "sk-or-env")
        assert CredentialStore(kv_store).api_key == "sk-or-env"

    def test_stored_key_wins_over_environment(self, credentials, kv_store, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "sk-or-env")
        assert CredentialStore(KeyValueStore(kv_store.path)).api_key == "sk-or-test"
