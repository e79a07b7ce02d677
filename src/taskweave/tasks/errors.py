# src/taskweave/tasks/errors.py

"""Task registration and run errors."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .task_models import RunReport


class TaskError(Exception):
    """Base class for every error raised by the task subsystem."""


class DuplicateTaskError(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task '{task_id}' is already registered")
        self.task_id = task_id


class UnknownDependencyError(TaskError):
    def __init__(self, task_id: str, dependency: str) -> None:
        super().__init__(f"Task '{task_id}' depends on unknown task '{dependency}'")
        self.task_id = task_id
        self.dependency = dependency


class UnknownTaskError(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task '{task_id}' is not registered")
        self.task_id = task_id


class CyclicDependencyError(TaskError):
    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__("Dependency cycle: " + " -> ".join(self.cycle))


class TaskActionError(TaskError):
    """
    An action raised. Carries the failing task id, the original exception
    and, when raised by a run, the run's final report.
    """

    def __init__(
        self,
        task_id: str,
        cause: BaseException,
        report: RunReport | None = None,
    ) -> None:
        super().__init__(f"Task '{task_id}' failed: {cause!r}")
        self.task_id = task_id
        self.cause = cause
        self.report = report
