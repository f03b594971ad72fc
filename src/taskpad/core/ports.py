# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on a BlobStore Protocol instead of a concrete backend,
so SQLite/file/in-memory backends are swappable and tests can use fakes.
The CLI depends on TaskRepo rather than on TaskStore itself.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class BlobStore(Protocol):
    """
    Key-value persistence collaborator.

    Implementations must make a single set() atomic: a reader sees either the
    previous blob or the new one, never a mix.
    """

    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...


class TaskRepo(Protocol):
    @property
    def key(self) -> str: ...

    def load_all(self, key: str | None = None) -> list[Task]: ...
    def save_all(self, tasks: Iterable[Task], key: str | None = None) -> None: ...
    def upsert(self, task: Task) -> None: ...
    def get_task(self, task_id: str) -> Task | None: ...
    def count_tasks(self) -> int: ...
