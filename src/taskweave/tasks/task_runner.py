# src/taskweave/tasks/task_runner.py

from __future__ import annotations

"""
Task runner.

Runs a target task and, transitively, its dependencies:
- plans the run with a depth-first walk (dependencies first, cycles rejected),
- starts each action only after all of its dependencies completed,
- runs each reachable task at most once per run,
- stops starting new tasks after a failure (unless keep_going),
- reports the outcome as a RunReport or raises TaskActionError.

Where actions come from (registry, taskfile) is not the runner's business.
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from ..core.ports import RunObserver, TaskLookup
from .errors import CyclicDependencyError, TaskActionError, UnknownDependencyError, UnknownTaskError
from .task_models import RunReport, Task, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _RunState:
    target: str
    tasks: dict[str, Task]
    statuses: dict[str, TaskStatus]
    keep_going: bool
    order: list[str] = field(default_factory=list)
    failures: dict[str, BaseException] = field(default_factory=dict)
    # Concurrent mode: one asyncio.Task per visited node, shared by all dependents.
    pending: dict[str, asyncio.Task[bool]] = field(default_factory=dict)

    @property
    def halted(self) -> bool:
        return bool(self.failures) and not self.keep_going


class TaskRunner:
    def __init__(
        self,
        tasks: TaskLookup,
        *,
        concurrent: bool = False,
        keep_going: bool = False,
        observers: Iterable[RunObserver] | None = None,
    ) -> None:
        self._tasks = tasks
        self.concurrent = bool(concurrent)
        self.keep_going = bool(keep_going)
        self._observers: list[RunObserver] = list(observers or [])

    def add_observer(self, observer: RunObserver) -> None:
        self._observers.append(observer)

    def plan(self, task_id: str) -> list[str]:
        """
        Execution order for task_id: every reachable task, dependencies first.

        Raises UnknownTaskError, UnknownDependencyError or CyclicDependencyError.
        Nothing is executed.
        """
        return list(self._resolve(task_id))

    def _resolve(self, task_id: str) -> dict[str, Task]:
        root = self._tasks.get(task_id)
        if root is None:
            raise UnknownTaskError(task_id)

        resolved: dict[str, Task] = {}
        # Iterative DFS: (task, iterator over its dependency ids); path mirrors the stack.
        stack: list[tuple[Task, Iterator[str]]] = [(root, iter(root.dependencies))]
        path: list[str] = [root.id]
        visiting: set[str] = {root.id}

        while stack:
            task, deps = stack[-1]
            dep_id = next(deps, None)
            if dep_id is None:
                stack.pop()
                path.pop()
                visiting.discard(task.id)
                resolved[task.id] = task
                continue
            if dep_id in resolved:
                continue
            if dep_id in visiting:
                raise CyclicDependencyError(path[path.index(dep_id):] + [dep_id])

            dep = self._tasks.get(dep_id)
            if dep is None:
                raise UnknownDependencyError(task.id, dep_id)
            stack.append((dep, iter(dep.dependencies)))
            path.append(dep_id)
            visiting.add(dep_id)

        return resolved

    async def run(self, task_id: str) -> RunReport:
        """
        Run task_id and its not-yet-completed dependencies.

        Returns the RunReport when every reachable task completed.
        Raises TaskActionError naming the first failing task otherwise;
        graph-shape errors are raised before any action starts.
        """
        tasks = self._resolve(task_id)
        state = _RunState(
            target=task_id,
            tasks=tasks,
            statuses={tid: TaskStatus.NOT_STARTED for tid in tasks},
            keep_going=self.keep_going,
        )

        logger.info(
            "Run start target=%s tasks=%d mode=%s",
            task_id,
            len(tasks),
            "concurrent" if self.concurrent else "sequential",
        )
        t0 = time.monotonic()

        if self.concurrent:
            await self._schedule(task_id, state)
        else:
            await self._run_sequential(state)

        report = RunReport(
            target=task_id,
            statuses=dict(state.statuses),
            order=tuple(state.order),
            failures=dict(state.failures),
            duration=time.monotonic() - t0,
        )

        for obs in self._observers:
            try:
                obs.run_finished(report)
            except Exception:
                logger.exception("Observer run_finished failed target=%s", task_id)

        if not report.failures:
            logger.info("Run done target=%s ran=%d in %.3fs", task_id, len(report.order), report.duration)
            return report

        failed = report.failed_task or next(iter(report.failures))
        logger.error(
            "Run failed target=%s failed_task=%s skipped=%s",
            task_id,
            failed,
            report.skipped,
        )
        cause = report.failures[failed]
        raise TaskActionError(failed, cause, report=report) from cause

    async def _run_sequential(self, state: _RunState) -> None:
        # state.tasks is in dependency order already.
        for task in state.tasks.values():
            if state.halted:
                break
            if not self._deps_completed(task, state):
                continue
            await self._execute(task, state)

    async def _schedule(self, task_id: str, state: _RunState) -> bool:
        fut = state.pending.get(task_id)
        if fut is None:
            fut = asyncio.ensure_future(self._visit(state.tasks[task_id], state))
            state.pending[task_id] = fut
        return await fut

    async def _visit(self, task: Task, state: _RunState) -> bool:
        if task.dependencies:
            # Siblings already started are allowed to finish even if one fails.
            await asyncio.gather(*(self._schedule(dep, state) for dep in task.dependencies))
        if state.halted or not self._deps_completed(task, state):
            return False
        return await self._execute(task, state)

    @staticmethod
    def _deps_completed(task: Task, state: _RunState) -> bool:
        return all(state.statuses[dep] == TaskStatus.COMPLETED for dep in task.dependencies)

    async def _execute(self, task: Task, state: _RunState) -> bool:
        state.statuses[task.id] = TaskStatus.RUNNING
        state.order.append(task.id)
        self._notify_started(task.id)
        logger.info("Task %s -> running", task.id)

        t0 = time.monotonic()
        try:
            result = task.action()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError as exc:
            self._record_failure(task, state, exc, t0)
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                # The run itself is being cancelled: leave the state consistent, then propagate.
                raise
            # Raised by the action (e.g. it awaited a cancelled future): an ordinary failure.
            return False
        except Exception as exc:
            self._record_failure(task, state, exc, t0)
            return False

        state.statuses[task.id] = TaskStatus.COMPLETED
        logger.info("Task %s -> completed in %.3fs", task.id, time.monotonic() - t0)
        self._notify_finished(task.id, TaskStatus.COMPLETED, None)
        return True

    def _record_failure(self, task: Task, state: _RunState, exc: BaseException, t0: float) -> None:
        state.statuses[task.id] = TaskStatus.FAILED
        state.failures[task.id] = exc
        logger.error("Task %s -> failed after %.3fs: %r", task.id, time.monotonic() - t0, exc)
        logger.debug("Task %s traceback", task.id, exc_info=exc)
        self._notify_finished(task.id, TaskStatus.FAILED, exc)

    def _notify_started(self, task_id: str) -> None:
        for obs in self._observers:
            try:
                obs.task_started(task_id)
            except Exception:
                logger.exception("Observer task_started failed task_id=%s", task_id)

    def _notify_finished(self, task_id: str, status: TaskStatus, error: BaseException | None) -> None:
        for obs in self._observers:
            try:
                obs.task_finished(task_id, status, error)
            except Exception:
                logger.exception("Observer task_finished failed task_id=%s", task_id)
