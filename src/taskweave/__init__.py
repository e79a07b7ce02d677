"""taskweave - run named tasks in dependency order.

Register tasks with their dependencies, then run a target:
every reachable task runs at most once, dependencies strictly first.

Example:
    >>> from taskweave import TaskRegistry, TaskRunner
    >>>
    >>> tasks = TaskRegistry()
    >>> tasks.register("load:app.db", [], load_db)
    >>> tasks.register("build", ["load:app.db"], build)
    >>> report = await TaskRunner(tasks).run("build")
    >>> print(report.order)    # ('load:app.db', 'build')
"""

from .core.events import EventBus, LockTracker
from .tasks.errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    TaskActionError,
    TaskError,
    UnknownDependencyError,
    UnknownTaskError,
)
from .tasks.task_api import register_lock_tasks, release_action, signal_action
from .tasks.task_models import RunReport, Task, TaskStatus
from .tasks.task_registry import TaskRegistry
from .tasks.task_runner import TaskRunner

__version__ = "0.1.0"

__all__ = [
    # Core
    "Task",
    "TaskRegistry",
    "TaskRunner",
    "TaskStatus",
    "RunReport",
    # Errors
    "TaskError",
    "DuplicateTaskError",
    "UnknownDependencyError",
    "UnknownTaskError",
    "CyclicDependencyError",
    "TaskActionError",
    # Collaborators
    "EventBus",
    "LockTracker",
    # Lock tasks
    "register_lock_tasks",
    "signal_action",
    "release_action",
]
