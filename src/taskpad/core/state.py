# src/taskpad/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import TaskRepo


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: object
    task_store: TaskRepo
