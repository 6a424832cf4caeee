"""Tests for taskkeep.settings_store module."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from taskkeep.config import SettingsConfig
from taskkeep.settings_store import (
    JsonFileSettingsStore,
    MemorySettingsStore,
    SettingsStoreError,
    open_settings_store,
)


class TestMemorySettingsStore:
    """Tests for MemorySettingsStore."""

    def test_missing_key(self) -> None:
        """Test a missing key reads as None."""
        assert MemorySettingsStore().get("nope") is None

    def test_set_and_get(self) -> None:
        """Test values round trip."""
        store = MemorySettingsStore()
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_initial_values_copied(self) -> None:
        """Test initial values are copied, not shared."""
        initial = {"k": "v"}
        store = MemorySettingsStore(initial)
        store.set("k", "changed")
        assert initial == {"k": "v"}


class TestJsonFileSettingsStore:
    """Tests for JsonFileSettingsStore."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file reads as empty."""
        store = JsonFileSettingsStore(tmp_path / "settings.json")
        assert store.get("k") is None

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file reads as empty."""
        path = tmp_path / "settings.json"
        path.write_text("")
        assert JsonFileSettingsStore(path).get("k") is None

    def test_set_creates_directory(self, tmp_path: Path) -> None:
        """Test set creates parent directories."""
        path = tmp_path / ".taskkeep" / "settings.json"
        store = JsonFileSettingsStore(path)

        store.set("k", "v")

        assert path.exists()
        assert json.loads(path.read_text()) == {"k": "v"}
        assert store.get("k") == "v"

    def test_set_keeps_other_keys(self, tmp_path: Path) -> None:
        """Test writing one key leaves other keys in place."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"theme": "dark"}))

        JsonFileSettingsStore(path).set("k", "v")

        assert json.loads(path.read_text()) == {"theme": "dark", "k": "v"}

    def test_no_temp_file_left(self, tmp_path: Path) -> None:
        """Test the temporary write file is moved into place."""
        path = tmp_path / "settings.json"
        JsonFileSettingsStore(path).set("k", "v")
        assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]

    def test_failed_write_removes_temp_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a failed replace cleans up and keeps the old contents."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"k": "old"}))

        def fail_replace(src: str, dst: str) -> None:
            raise OSError("read-only filesystem")

        monkeypatch.setattr(os, "replace", fail_replace)

        with pytest.raises(SettingsStoreError):
            JsonFileSettingsStore(path).set("k", "new")

        assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]
        assert json.loads(path.read_text()) == {"k": "old"}

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test an unreadable file raises SettingsStoreError."""
        path = tmp_path / "settings.json"
        path.write_text("{oops")

        with pytest.raises(SettingsStoreError):
            JsonFileSettingsStore(path).get("k")

    def test_invalid_json_not_overwritten(self, tmp_path: Path) -> None:
        """Test a write refuses to clobber an unreadable file."""
        path = tmp_path / "settings.json"
        path.write_text("{oops")

        with pytest.raises(SettingsStoreError):
            JsonFileSettingsStore(path).set("k", "v")

        assert path.read_text() == "{oops"

    def test_not_an_object(self, tmp_path: Path) -> None:
        """Test a JSON file that isn't an object is rejected."""
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")

        with pytest.raises(SettingsStoreError):
            JsonFileSettingsStore(path).get("k")

    def test_non_string_value(self, tmp_path: Path) -> None:
        """Test a non-string slot is rejected."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"k": [1, 2]}))

        with pytest.raises(SettingsStoreError):
            JsonFileSettingsStore(path).get("k")

    def test_path_is_directory(self, tmp_path: Path) -> None:
        """Test OS errors are wrapped in SettingsStoreError."""
        path = tmp_path / "settings.json"
        path.mkdir()

        with pytest.raises(SettingsStoreError):
            JsonFileSettingsStore(path).get("k")


class TestOpenSettingsStore:
    """Tests for open_settings_store."""

    def test_file_backend(self) -> None:
        """Test the default file backend."""
        store = open_settings_store(SettingsConfig())
        assert isinstance(store, JsonFileSettingsStore)
        assert store.path == Path(".taskkeep/settings.json")

    def test_memory_backend(self) -> None:
        """Test the memory backend."""
        store = open_settings_store(SettingsConfig(backend="memory"))
        assert isinstance(store, MemorySettingsStore)
