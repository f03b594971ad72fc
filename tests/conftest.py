# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.cli.bootstrap import create_initial_state
from taskpad.core.state import AppState
from taskpad.storage.memory_store import MemoryBlobStore
from taskpad.tasks.task_store import TaskStore


class FailingBlobStore:
    """BlobStore whose reads and/or writes raise, to check error propagation."""

    def __init__(self, *, fail_get: bool = False, fail_set: bool = False) -> None:
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.inner = MemoryBlobStore()

    def get(self, key: str) -> bytes | None:
        if self.fail_get:
            raise OSError("backend read failed")
        return self.inner.get(key)

    def set(self, key: str, value: bytes) -> None:
        if self.fail_set:
            raise OSError("backend write failed")
        self.inner.set(key, value)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    A SimpleNamespace keeps unit tests isolated from the process environment.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        log_to_file=False,
        storage_backend="memory",
        tasks_key="existing_tasks",
        data_dir=tmp_path,
        db_path=tmp_path / "taskpad.sqlite3",
        blob_dir=tmp_path / "blobs",
    )


@pytest.fixture()
def backend() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def store(backend: MemoryBlobStore) -> TaskStore:
    return TaskStore(backend)


@pytest.fixture()
def failing_backend_cls() -> type[FailingBlobStore]:
    return FailingBlobStore


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(settings=settings)
