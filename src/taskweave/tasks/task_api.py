# src/taskweave/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.ports import EventNotifier, ReleasableResource
from .task_models import Task, TaskAction
from .task_registry import TaskRegistry

logger = logging.getLogger(__name__)

DB_LOAD_TASK = "load:app.db"
LOCK_LOAD_TASK = "load:app.lock"
LOCK_CLEAR_TASK = "locks.clear"
LOCKS_EVENT = "locks"


def signal_action(notifier: EventNotifier, event_name: str) -> TaskAction:
    """Action that signals `event_name` on the notifier (awaited if async)."""

    def _signal():
        return notifier.signal(event_name)

    _signal.__name__ = f"signal_{event_name}"
    return _signal


def release_action(resource: ReleasableResource) -> TaskAction:
    """Action that asks `resource` to release what it holds."""

    def _release():
        return resource.release()

    return _release


def register_lock_tasks(
    registry: TaskRegistry,
    *,
    notifier: EventNotifier,
    locks: ReleasableResource,
    db_task: str = DB_LOAD_TASK,
) -> tuple[Task, Task]:
    """
    Register the lock tasks:
    - load:app.lock (after the db task): signal "locks"
    - locks.clear (after load:app.lock): release held locks

    The db task must be registered first (UnknownDependencyError otherwise).
    Both tasks are registered or neither is.
    """
    logger.debug("Init lock tasks")

    load, clear = registry.register_all(
        [
            Task(LOCK_LOAD_TASK, (db_task,), signal_action(notifier, LOCKS_EVENT)),
            Task(LOCK_CLEAR_TASK, (LOCK_LOAD_TASK,), release_action(locks)),
        ]
    )
    return load, clear
