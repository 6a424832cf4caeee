"""Task store - the task collection kept in a settings slot.

The whole collection is stored as one JSON array under a single key. Every
save rewrites the full array: :meth:`TaskStore.save` loads it, replaces the
entry with the same id in place (or appends), and writes it back.

Operations report problems through :class:`StoreResult` rather than raising,
and log them. Callers that want the old "anything unreadable is an empty
list" behaviour ask for it with :meth:`TaskStore.load_all_or_empty`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from taskkeep.config import TaskkeepConfig
from taskkeep.settings_store import SettingsStore, SettingsStoreError, open_settings_store
from taskkeep.task import Task

logger = logging.getLogger(__name__)

# The key the task collection is stored under
TASKS_KEY = "tasks_key"

T = TypeVar("T")

_TASK_LIST = TypeAdapter(list[Task])


class StoreFailureKind(StrEnum):
    """Why a store operation failed."""

    SERIALIZATION_FAILED = "serialization_failed"
    DESERIALIZATION_FAILED = "deserialization_failed"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass
class StoreFailure:
    """A failed store operation."""

    kind: StoreFailureKind
    message: str


class StoreError(Exception):
    """Raised by :meth:`StoreResult.unwrap` for a failed operation."""

    def __init__(self, failure: StoreFailure) -> None:
        super().__init__(f"{failure.kind}: {failure.message}")
        self.failure = failure


@dataclass
class StoreResult(Generic[T]):
    """Outcome of a store operation: a value, or a failure."""

    value: T | None = None
    failure: StoreFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> T:
        """Return the value, raising StoreError if the operation failed."""
        if self.failure is not None:
            raise StoreError(self.failure)
        return self.value  # type: ignore[return-value]


def _failed(kind: StoreFailureKind, message: str) -> StoreResult:
    return StoreResult(failure=StoreFailure(kind=kind, message=message))


class TaskStore:
    """Persists an ordered list of tasks in one slot of a settings store.

    Each :meth:`save` holds a lock across its load-modify-write cycle, so
    threads sharing a TaskStore don't lose each other's updates. Separate
    processes writing the same settings file are not coordinated.
    """

    def __init__(self, settings: SettingsStore, key: str = TASKS_KEY) -> None:
        self.settings = settings
        self.key = key
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: TaskkeepConfig) -> TaskStore:
        """Build a store over the configured settings backend."""
        return cls(open_settings_store(config.settings), key=config.store.tasks_key)

    def _encode(self, tasks: Sequence[Task]) -> str:
        payload = _TASK_LIST.dump_json(
            list(tasks), by_alias=True, exclude_none=True, warnings="error"
        )
        return payload.decode()

    def _decode(self, raw: str) -> list[Task]:
        return _TASK_LIST.validate_json(raw)

    def save_all(self, tasks: Sequence[Task]) -> StoreResult[None]:
        """Encode the tasks and write them under the store key.

        On an encoding failure nothing is written and the previously stored
        collection is left as it was.
        """
        try:
            payload = self._encode(tasks)
        except (PydanticSerializationError, ValueError, TypeError) as exc:
            logger.error("Error encoding tasks: %s", exc)
            return _failed(StoreFailureKind.SERIALIZATION_FAILED, str(exc))

        with self._lock:
            try:
                self.settings.set(self.key, payload)
            except SettingsStoreError as exc:
                logger.error("Error writing tasks: %s", exc)
                return _failed(StoreFailureKind.STORE_UNAVAILABLE, str(exc))

        logger.debug("Saved %d tasks under %r", len(tasks), self.key)
        return StoreResult()

    def load_all(self) -> StoreResult[list[Task]]:
        """Read the stored tasks.

        A missing key is an empty list, not a failure. A value that can't be
        decoded fails with DESERIALIZATION_FAILED.
        """
        with self._lock:
            try:
                raw = self.settings.get(self.key)
            except SettingsStoreError as exc:
                logger.error("Error reading tasks: %s", exc)
                return _failed(StoreFailureKind.STORE_UNAVAILABLE, str(exc))

        if raw is None:
            return StoreResult(value=[])

        try:
            tasks = self._decode(raw)
        except ValidationError as exc:
            logger.error("Error decoding tasks: %s", exc)
            return _failed(StoreFailureKind.DESERIALIZATION_FAILED, str(exc))

        return StoreResult(value=tasks)

    def load_all_or_empty(self) -> list[Task]:
        """Read the stored tasks, treating any failure as an empty list."""
        result = self.load_all()
        if not result.ok:
            logger.warning("Falling back to an empty task list after %s", result.failure.kind)
            return []
        return result.unwrap()

    def save(self, task: Task) -> StoreResult[None]:
        """Insert the task, or replace the stored task with the same id.

        A replaced task keeps its position; a new task goes at the end. If
        the current collection can't be loaded, nothing is written.
        """
        with self._lock:
            loaded = self.load_all()
            if not loaded.ok:
                return StoreResult(failure=loaded.failure)

            tasks = loaded.unwrap()
            for index, existing in enumerate(tasks):
                if existing.id == task.id:
                    tasks[index] = task
                    break
            else:
                tasks.append(task)

            return self.save_all(tasks)
