# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from taskweave.core.ports import EventNotifier, ReleasableResource
from taskweave.tasks.task_models import RunReport, TaskStatus


class Recorder:
    """
    Builds task actions that log what happened, in order.

    - calls: task ids in the order their actions were invoked
    - events: ("start"|"end", task id) pairs, for checking overlap
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.events: list[tuple[str, str]] = []

    def ok(self, task_id: str):
        def _action() -> None:
            self.calls.append(task_id)
            self.events.append(("start", task_id))
            self.events.append(("end", task_id))

        return _action

    def slow(self, task_id: str, delay: float = 0.01):
        async def _action() -> None:
            self.calls.append(task_id)
            self.events.append(("start", task_id))
            await asyncio.sleep(delay)
            self.events.append(("end", task_id))

        return _action

    def fail(self, task_id: str, exc: BaseException | None = None):
        def _action() -> None:
            self.calls.append(task_id)
            self.events.append(("start", task_id))
            raise exc or RuntimeError(f"{task_id} broke")

        return _action

    def index(self, kind: str, task_id: str) -> int:
        return self.events.index((kind, task_id))


@dataclass(slots=True)
class FakeNotifier(EventNotifier):
    """Records signalled events; optionally fails."""

    signalled: list[str] = field(default_factory=list)
    error: BaseException | None = None

    async def signal(self, event_name: str) -> None:
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        self.signalled.append(event_name)


@dataclass(slots=True)
class FakeLock(ReleasableResource):
    releases: int = 0

    def release(self) -> None:
        self.releases += 1


@dataclass(slots=True)
class FakeObserver:
    seen: list[tuple[str, str]] = field(default_factory=list)
    reports: list[RunReport] = field(default_factory=list)

    def task_started(self, task_id: str) -> None:
        self.seen.append(("started", task_id))

    def task_finished(self, task_id: str, status: TaskStatus, error: BaseException | None) -> None:
        self.seen.append((str(status), task_id))

    def run_finished(self, report: RunReport) -> None:
        self.reports.append(report)
