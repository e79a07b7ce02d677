# src/taskweave/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task runner and task actions.

The runner depends on Protocols instead of concrete implementations.
This keeps the registry, the event bus and the lock object swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import RunReport, Task, TaskStatus


class TaskLookup(Protocol):
    """Read-only view of a task registry. Returns None for unknown ids."""
    def get(self, task_id: str) -> Task | None: ...


class EventNotifier(Protocol):
    """
    Event signal port: tells other, unspecified listeners that a named condition occurred.

    The runner never interprets the event. The result may be awaitable.
    """

    def signal(self, event_name: str) -> Awaitable[None] | None: ...


class ReleasableResource(Protocol):
    """Resource-release port: an externally owned object asked to drop what it holds."""
    def release(self) -> object: ...


class RunObserver(Protocol):
    def task_started(self, task_id: str) -> None: ...

    def task_finished(
            self,
            task_id: str,
            status: TaskStatus,
            error: BaseException | None,
    ) -> None: ...

    def run_finished(self, report: RunReport) -> None: ...
