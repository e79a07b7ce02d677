# src/taskweave/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_registry import TaskRegistry
from ..tasks.task_runner import TaskRunner
from .events import EventBus, LockTracker


@dataclass
class AppState:
    # Settings (or a compatible namespace in tests).
    settings: Any

    registry: TaskRegistry
    runner: TaskRunner

    # Collaborators handed to taskfiles for their task actions.
    events: EventBus
    locks: LockTracker
