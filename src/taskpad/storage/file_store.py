# src/taskpad/storage/file_store.py

from __future__ import annotations

import contextlib
import logging
import os
import re
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class FileBlobStore:
    """
    One file per key under a directory.

    Writes go to a temp file and are moved into place with os.replace,
    so readers never observe a half-written blob.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileBlobStore ready dir=%s", self._dir)

    def _path_for(self, key: str) -> Path:
        if not key or not _KEY_RE.match(key) or key in (".", ".."):
            raise ValueError(f"invalid blob key: {key!r}")
        return self._dir / f"{key}.blob"

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        logger.debug("Blob written key=%s bytes=%d path=%s", key, len(value), path)
