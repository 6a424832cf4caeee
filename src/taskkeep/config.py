"""Configuration models for taskkeep."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class SettingsConfig(BaseModel):
    """Configuration for the key-value settings backend."""

    backend: Literal["file", "memory"] = "file"
    path: str = ".taskkeep/settings.json"


class StoreConfig(BaseModel):
    """Configuration for the task store."""

    tasks_key: str = "tasks_key"
    degrade_to_empty: bool = False
    """Treat an unreadable task collection as empty instead of failing."""


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


class TaskkeepConfig(BaseModel):
    """Main configuration for taskkeep."""

    settings: SettingsConfig = Field(default_factory=SettingsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> TaskkeepConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)


# Default config directory
TASKKEEP_DIR = Path(".taskkeep")
CONFIG_FILE = TASKKEEP_DIR / "config.json"
