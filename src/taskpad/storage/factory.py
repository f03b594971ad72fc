# src/taskpad/storage/factory.py

from __future__ import annotations

from ..core.ports import BlobStore
from .file_store import FileBlobStore
from .memory_store import MemoryBlobStore
from .sqlite_store import SqliteBlobStore


def open_blob_store(settings) -> BlobStore:
    """Build the backend named by settings.storage_backend."""
    backend = str(getattr(settings, "storage_backend", "sqlite")).strip().lower()

    if backend == "sqlite":
        return SqliteBlobStore(settings.db_path)
    if backend == "file":
        return FileBlobStore(settings.blob_dir)
    if backend == "memory":
        return MemoryBlobStore()

    raise ValueError(f"unknown storage backend: {backend!r} (expected sqlite, file or memory)")
