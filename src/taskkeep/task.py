"""The Task model.

A task is a to-do item with a title, an optional note, a due date and a
completion state. Completion is tracked by ``completed_date``; ``is_complete``
is derived from it so the two can never disagree.

On the wire (see :mod:`taskkeep.task_store`) tasks use camelCase property
names: ``title``, ``note``, ``dueDate``, ``isComplete``, ``completedDate``,
``createdDate`` and ``id``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from taskkeep.task_store import StoreResult, TaskStore


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


class Task(BaseModel):
    """A single to-do task.

    ``id`` and ``created_date`` are assigned once at construction and are
    frozen. ``completed_date`` changes only through :meth:`mark_complete`,
    :meth:`mark_incomplete` or :meth:`set_complete`.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    note: str | None = None
    due_date: datetime = Field(default_factory=datetime.now)
    completed_date: datetime | None = None
    created_date: datetime = Field(default_factory=datetime.now, frozen=True)
    id: str = Field(default_factory=_new_id, frozen=True)

    @computed_field(alias="isComplete")  # type: ignore[prop-decorator]
    @property
    def is_complete(self) -> bool:
        """Whether the task has been completed."""
        return self.completed_date is not None

    def mark_complete(self) -> None:
        """Mark the task complete as of right now."""
        self.completed_date = datetime.now()

    def mark_incomplete(self) -> None:
        """Mark the task as not complete, clearing the completed date."""
        self.completed_date = None

    def set_complete(self, value: bool) -> None:
        """Set the completion state, stamping or clearing the completed date."""
        if value:
            self.mark_complete()
        else:
            self.mark_incomplete()

    def save(self, store: TaskStore) -> StoreResult[None]:
        """Add this task to the store, or update it in place if already saved."""
        return store.save(self)

    def __str__(self) -> str:
        status = "✓" if self.is_complete else "○"
        return f"[{status}] {self.title}"
