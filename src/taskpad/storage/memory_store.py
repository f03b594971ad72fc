# src/taskpad/storage/memory_store.py

from __future__ import annotations

import threading


class MemoryBlobStore:
    """In-process BlobStore. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._blobs: dict[str, bytes] = {k: bytes(v) for k, v in (initial or {}).items()}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._blobs.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._blobs[key] = bytes(value)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._blobs)
