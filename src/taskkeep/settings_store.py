"""Key-value settings stores.

The task store keeps its whole collection in a single named slot of a
settings store. The store is passed in explicitly so callers own its
lifecycle and tests can use an in-memory double.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from taskkeep.config import SettingsConfig

logger = logging.getLogger(__name__)


class SettingsStoreError(Exception):
    """Raised when a settings store cannot be read or written."""


class SettingsStore(Protocol):
    """A string-valued key-value store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemorySettingsStore:
    """Settings held in a dict for the lifetime of the object."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileSettingsStore:
    """Settings persisted as a JSON object of string values.

    A missing file reads as an empty store. Writes go to a temporary sibling
    file that replaces the original, so a failed write leaves the previous
    contents intact.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            content = self.path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise SettingsStoreError(f"Cannot read {self.path}: {exc}") from exc

        if not content:
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise SettingsStoreError(f"{self.path} is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise SettingsStoreError(f"{self.path} does not contain a JSON object")

        return data

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        if value is not None and not isinstance(value, str):
            raise SettingsStoreError(f"Setting {key!r} in {self.path} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise SettingsStoreError(f"Cannot write {self.path}: {exc}") from exc

        logger.debug("Wrote setting %s to %s", key, self.path)


def open_settings_store(config: SettingsConfig) -> SettingsStore:
    """Create the settings backend named in configuration."""
    if config.backend == "memory":
        return MemorySettingsStore()
    return JsonFileSettingsStore(config.path)
