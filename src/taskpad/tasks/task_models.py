# src/taskpad/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

_UNSET: Any = object()


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_task_id() -> str:
    """Fresh opaque identity. Failures of the entropy source propagate."""
    return str(uuid.uuid4()).upper()


@dataclass(frozen=True, slots=True)
class Task:
    """
    One to-do item.

    Notes:
    - id and created_date are fixed at construction.
    - completed_date is derived from is_complete: it is set iff the task is complete.
      Use set_complete() to toggle completion; the pair is never set independently.
    - Instances are frozen; edits return new values.
    """

    id: str
    title: str
    note: str | None
    due_date: datetime
    is_complete: bool
    completed_date: datetime | None
    created_date: datetime

    def __post_init__(self) -> None:
        if (self.completed_date is not None) != self.is_complete:
            raise ValueError(
                f"completed_date must be set iff is_complete (task {self.id}: "
                f"is_complete={self.is_complete}, completed_date={self.completed_date!r})"
            )

    @classmethod
    def create(
        cls,
        title: str,
        note: str | None = None,
        due_date: datetime | None = None,
        *,
        now: datetime | None = None,
    ) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")
        if now is None:
            now = utc_now()
        return cls(
            id=new_task_id(),
            title=title,
            note=note,
            due_date=now if due_date is None else due_date,
            is_complete=False,
            completed_date=None,
            created_date=now,
        )

    def set_complete(self, value: bool, *, now: datetime | None = None) -> Task:
        """Return a copy with completion set; marking complete re-stamps completed_date."""
        if value:
            return replace(self, is_complete=True, completed_date=now or utc_now())
        return replace(self, is_complete=False, completed_date=None)

    def edit(
        self,
        *,
        title: str = _UNSET,
        note: str | None = _UNSET,
        due_date: datetime = _UNSET,
    ) -> Task:
        changes: dict[str, Any] = {}
        if title is not _UNSET:
            if not title or not title.strip():
                raise ValueError("title is required")
            changes["title"] = title
        if note is not _UNSET:
            changes["note"] = note
        if due_date is not _UNSET:
            changes["due_date"] = due_date
        if not changes:
            return self
        return replace(self, **changes)
