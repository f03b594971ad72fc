# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the configured blob backend into a TaskStore on AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..storage.factory import open_blob_store
from ..tasks.task_store import DEFAULT_TASKS_KEY, TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    backend = getattr(settings, "storage_backend", "sqlite")
    if backend == "sqlite":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    elif backend == "file":
        settings.blob_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    backend = open_blob_store(settings)
    key = getattr(settings, "tasks_key", None) or DEFAULT_TASKS_KEY
    state = AppState(settings=settings, task_store=TaskStore(backend, key=key))
    logger.debug("AppState created backend=%s key=%s", type(backend).__name__, key)
    return state
