# src/taskpad/tasks/task_codec.py

"""
JSON codec for the persisted task collection.

Layout: a UTF-8 JSON array of objects keyed like the original record
(id, title, note, dueDate, isComplete, completedDate, createdDate).
Timestamps are ISO-8601 strings. There is no version field: changing this
layout is a breaking change for stored data.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from .task_models import Task


class TaskDecodeError(ValueError):
    """Stored blob is corrupt or does not match the task record shape."""


class TaskEncodeError(ValueError):
    """A value could not be serialized as a task record."""


_FIELDS = ("id", "title", "note", "dueDate", "isComplete", "completedDate", "createdDate")


def _ts_to_str(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _str_to_ts(raw: Any, field: str, *, optional: bool = False) -> datetime | None:
    if raw is None and optional:
        return None
    if not isinstance(raw, str):
        raise TaskDecodeError(f"{field}: expected ISO-8601 string, got {type(raw).__name__}")
    try:
        return datetime.fromisoformat(raw)
    except ValueError as e:
        raise TaskDecodeError(f"{field}: invalid timestamp {raw!r}") from e


def task_to_record(task: Task) -> dict[str, Any]:
    if not isinstance(task, Task):
        raise TaskEncodeError(f"expected Task, got {type(task).__name__}")
    return {
        "id": task.id,
        "title": task.title,
        "note": task.note,
        "dueDate": _ts_to_str(task.due_date),
        "isComplete": task.is_complete,
        "completedDate": _ts_to_str(task.completed_date),
        "createdDate": _ts_to_str(task.created_date),
    }


def record_to_task(record: Any, index: int = 0) -> Task:
    where = f"task[{index}]"
    if not isinstance(record, dict):
        raise TaskDecodeError(f"{where}: expected object, got {type(record).__name__}")

    keys = set(record)
    missing = [f for f in _FIELDS if f not in keys]
    unknown = sorted(keys.difference(_FIELDS))
    if missing:
        raise TaskDecodeError(f"{where}: missing fields {missing}")
    if unknown:
        raise TaskDecodeError(f"{where}: unknown fields {unknown}")

    task_id = record["id"]
    title = record["title"]
    note = record["note"]
    is_complete = record["isComplete"]

    if not isinstance(task_id, str) or not task_id:
        raise TaskDecodeError(f"{where}.id: expected non-empty string")
    if not isinstance(title, str):
        raise TaskDecodeError(f"{where}.title: expected string")
    if note is not None and not isinstance(note, str):
        raise TaskDecodeError(f"{where}.note: expected string or null")
    if not isinstance(is_complete, bool):
        raise TaskDecodeError(f"{where}.isComplete: expected boolean")

    try:
        return Task(
            id=task_id,
            title=title,
            note=note,
            due_date=_str_to_ts(record["dueDate"], f"{where}.dueDate"),
            is_complete=is_complete,
            completed_date=_str_to_ts(
                record["completedDate"], f"{where}.completedDate", optional=True
            ),
            created_date=_str_to_ts(record["createdDate"], f"{where}.createdDate"),
        )
    except TaskDecodeError:
        raise
    except ValueError as e:
        raise TaskDecodeError(f"{where}: {e}") from e


def encode_tasks(tasks: Iterable[Task]) -> bytes:
    records = [task_to_record(t) for t in tasks]
    try:
        return json.dumps(records, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise TaskEncodeError(str(e)) from e


def decode_tasks(data: bytes) -> list[Task]:
    try:
        payload = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise TaskDecodeError(f"blob is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise TaskDecodeError(f"blob is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise TaskDecodeError(f"expected JSON array, got {type(payload).__name__}")

    return [record_to_task(r, i) for i, r in enumerate(payload)]
