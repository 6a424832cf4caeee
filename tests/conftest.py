"""Shared fixtures for taskkeep tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from taskkeep.logging_setup import LOGGER_NAME
from taskkeep.settings_store import MemorySettingsStore
from taskkeep.task_store import TaskStore


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def memory_settings() -> MemorySettingsStore:
    """An empty in-memory settings store."""
    return MemorySettingsStore()


@pytest.fixture
def task_store(memory_settings: MemorySettingsStore) -> TaskStore:
    """A task store over an empty in-memory settings store."""
    return TaskStore(memory_settings)


@pytest.fixture(autouse=True)
def restore_logger() -> Generator[None, None, None]:
    """Put the package logger back the way it was after each test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
