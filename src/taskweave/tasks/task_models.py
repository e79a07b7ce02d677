# src/taskweave/tasks/task_models.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

TaskAction = Callable[[], Any]
# Zero-argument action. A returned awaitable is awaited; raising means failure.


class TaskStatus(StrEnum):
    """
    Per-run task lifecycle.

    not_started -> running -> completed | failed
    A task still not_started when the run ends was skipped.
    """

    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def noop_action() -> None:
    return None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    dependencies: tuple[str, ...] = ()
    action: TaskAction = noop_action


@dataclass(frozen=True, slots=True)
class RunReport:
    """
    Final state of one run.

    - statuses: every task reachable from target
    - order: ids in the order their actions were started
    - failures: task id -> exception raised by its action
    """

    target: str
    statuses: dict[str, TaskStatus]
    order: tuple[str, ...] = ()
    failures: dict[str, BaseException] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return all(s == TaskStatus.COMPLETED for s in self.statuses.values())

    @property
    def failed_task(self) -> str | None:
        """First task whose action failed (in start order)."""
        for task_id in self.order:
            if task_id in self.failures:
                return task_id
        return None

    @property
    def skipped(self) -> list[str]:
        return [tid for tid, s in self.statuses.items() if s == TaskStatus.NOT_STARTED]

    def __str__(self) -> str:
        state = "ok" if self.ok else f"failed at {self.failed_task}"
        return f"RunReport(target='{self.target}', ran={len(self.order)}/{len(self.statuses)}, {state})"
