# tests/test_blob_stores.py

from __future__ import annotations

import sqlite3
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.storage import file_store
from taskpad.storage.factory import open_blob_store
from taskpad.storage.file_store import FileBlobStore
from taskpad.storage.memory_store import MemoryBlobStore
from taskpad.storage.sqlite_store import SqliteBlobStore
from taskpad.tasks.task_models import Task
from taskpad.tasks.task_store import TaskStore


@pytest.fixture(params=["memory", "sqlite", "file"])
def blob_store(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryBlobStore()
    if request.param == "sqlite":
        return SqliteBlobStore(tmp_path / "kv.sqlite3")
    return FileBlobStore(tmp_path / "blobs")


def test_get_missing_key_returns_none(blob_store) -> None:
    assert blob_store.get("nope") is None


def test_set_then_get_and_overwrite(blob_store) -> None:
    blob_store.set("k", b"one")
    assert blob_store.get("k") == b"one"

    blob_store.set("k", b"two")
    assert blob_store.get("k") == b"two"


def test_keys_are_independent(blob_store) -> None:
    blob_store.set("a", b"1")
    blob_store.set("b", b"2")
    assert blob_store.get("a") == b"1"
    assert blob_store.get("b") == b"2"


def test_task_store_over_each_backend(blob_store) -> None:
    store = TaskStore(blob_store)
    t1, t2 = Task.create("t1"), Task.create("t2")
    store.upsert(t1)
    store.upsert(t2)
    store.upsert(t1.set_complete(True))

    loaded = store.load_all()
    assert [t.id for t in loaded] == [t1.id, t2.id]
    assert loaded[0].is_complete is True


def test_sqlite_persists_across_instances(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    SqliteBlobStore(db).set("k", b"\x00\x01binary")
    assert SqliteBlobStore(db).get("k") == b"\x00\x01binary"


def test_sqlite_errors_propagate(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    store = SqliteBlobStore(db)

    conn = sqlite3.connect(str(db))
    conn.execute("DROP TABLE blobs")
    conn.commit()
    conn.close()

    with pytest.raises(sqlite3.OperationalError):
        store.get("k")


def test_file_store_persists_and_leaves_no_temp_file(tmp_path: Path) -> None:
    directory = tmp_path / "blobs"
    FileBlobStore(directory).set("existing_tasks", b"[]")

    assert FileBlobStore(directory).get("existing_tasks") == b"[]"
    assert [p.name for p in directory.iterdir()] == ["existing_tasks.blob"]


@pytest.mark.parametrize("key", ["", "..", "a/b", "../escape", "sp ace"])
def test_file_store_rejects_unsafe_keys(tmp_path: Path, key: str) -> None:
    store = FileBlobStore(tmp_path)
    with pytest.raises(ValueError):
        store.set(key, b"x")


def test_memory_store_copies_initial_data() -> None:
    initial = {"k": b"v"}
    store = MemoryBlobStore(initial)
    initial["k"] = b"changed"
    assert store.get("k") == b"v"


@pytest.mark.parametrize(
    "backend, expected",
    [("sqlite", SqliteBlobStore), ("file", FileBlobStore), ("memory", MemoryBlobStore)],
)
def test_open_blob_store_by_name(tmp_path: Path, backend: str, expected: type) -> None:
    settings = SimpleNamespace(
        storage_backend=backend,
        db_path=tmp_path / "kv.sqlite3",
        blob_dir=tmp_path / "blobs",
    )
    assert isinstance(open_blob_store(settings), expected)


def test_open_blob_store_unknown_backend(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="unknown storage backend"):
        open_blob_store(SimpleNamespace(storage_backend="redis"))


def test_file_store_failed_write_keeps_old_blob_and_no_temp(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    directory = tmp_path / "blobs"
    store = FileBlobStore(directory)
    store.set("k", b"old")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(file_store.os, "replace", broken_replace)
    with pytest.raises(OSError, match="disk full"):
        store.set("k", b"new")
    monkeypatch.undo()

    assert store.get("k") == b"old"
    assert [p.name for p in directory.iterdir()] == ["k.blob"]


def test_file_store_temp_names_are_unique_per_write(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = FileBlobStore(tmp_path)
    sources: list[str] = []
    real_replace = file_store.os.replace

    def recording_replace(src, dst):
        sources.append(str(src))
        real_replace(src, dst)

    monkeypatch.setattr(file_store.os, "replace", recording_replace)
    store.set("k", b"1")
    store.set("k", b"2")

    assert len(set(sources)) == 2
    assert store.get("k") == b"2"
