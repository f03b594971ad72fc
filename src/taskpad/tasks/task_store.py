# src/taskpad/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from ..core.ports import BlobStore
from .task_codec import decode_tasks, encode_tasks
from .task_models import Task

logger = logging.getLogger(__name__)

# Not compatible with blobs stored under the mobile app's "existingsTasks" key.
DEFAULT_TASKS_KEY = "existing_tasks"


class TaskStore:
    """
    Whole-collection task persistence over a key-value BlobStore.

    The full ordered list of tasks lives in one blob under a fixed key.
    Every write replaces the blob; there is no incremental update.

    Concurrency:
    - upsert() and save_all() hold a per-instance lock for the whole
      read-modify-write, so threads sharing this store never lose updates.
    - Separate TaskStore instances (or processes) writing the same blob are
      NOT serialized against each other: exactly one writer is assumed.
      The later whole-blob write wins.

    Errors:
    - TaskDecodeError when the stored blob is corrupt (no partial recovery).
    - Backend exceptions propagate unchanged; nothing is retried.
    """

    def __init__(self, backend: BlobStore, *, key: str = DEFAULT_TASKS_KEY) -> None:
        if not key:
            raise ValueError("key is required")
        self._backend = backend
        self._key = key
        self._lock = threading.RLock()
        logger.info("TaskStore ready key=%s backend=%s", key, type(backend).__name__)

    @property
    def key(self) -> str:
        return self._key

    # ---- public API ----

    def load_all(self, key: str | None = None) -> list[Task]:
        key = key or self._key
        data = self._backend.get(key)
        if data is None:
            return []
        tasks = decode_tasks(data)
        logger.debug("Loaded %d tasks key=%s", len(tasks), key)
        return tasks

    def save_all(self, tasks: Iterable[Task], key: str | None = None) -> None:
        key = key or self._key
        data = encode_tasks(tasks)
        with self._lock:
            self._backend.set(key, data)
        logger.debug("Saved tasks key=%s bytes=%d", key, len(data))

    def upsert(self, task: Task) -> None:
        """
        Insert or replace `task` by id.

        An existing task with the same id is replaced in place (its position in
        the list is kept); otherwise the task is appended to the end.
        """
        with self._lock:
            tasks = self.load_all()

            for i, existing in enumerate(tasks):
                if existing.id == task.id:
                    tasks[i] = task
                    action, pos = "replaced", i
                    break
            else:
                tasks.append(task)
                action, pos = "appended", len(tasks) - 1

            self.save_all(tasks)

        logger.debug(
            "Task %s id=%s pos=%d total=%d", action, task.id, pos, len(tasks)
        )

    def get_task(self, task_id: str) -> Task | None:
        for task in self.load_all():
            if task.id == task_id:
                return task
        return None

    def count_tasks(self) -> int:
        return len(self.load_all())
