# src/taskweave/tasks/task_registry.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from .errors import CyclicDependencyError, DuplicateTaskError, UnknownDependencyError
from .task_models import Task, TaskAction, noop_action

logger = logging.getLogger(__name__)


def _clean_id(task_id: str) -> str:
    if not isinstance(task_id, str) or not task_id.strip():
        raise ValueError("task id must be a non-empty string")
    return task_id.strip()


def _clean_deps(dependencies: Iterable[str]) -> tuple[str, ...]:
    if isinstance(dependencies, str):
        dependencies = [dependencies]
    out: list[str] = []
    for dep in dependencies:
        dep = _clean_id(dep)
        if dep not in out:
            out.append(dep)
    return tuple(out)


def find_cycle(tasks: dict[str, Task]) -> list[str] | None:
    """
    Return one dependency cycle as [a, b, ..., a], or None.

    Dependencies missing from `tasks` are ignored.
    """
    done: set[str] = set()

    for root in tasks:
        if root in done:
            continue
        path: list[str] = []
        on_path: set[str] = set()
        # Iterative DFS: (task id, iterator over its dependencies)
        stack: list[tuple[str, Iterator[str]]] = [(root, iter(tasks[root].dependencies))]
        path.append(root)
        on_path.add(root)

        while stack:
            node, deps = stack[-1]
            dep = next(deps, None)
            if dep is None:
                stack.pop()
                path.pop()
                on_path.discard(node)
                done.add(node)
                continue
            if dep in on_path:
                return path[path.index(dep):] + [dep]
            if dep in done or dep not in tasks:
                continue
            stack.append((dep, iter(tasks[dep].dependencies)))
            path.append(dep)
            on_path.add(dep)

    return None


class TaskRegistry:
    """
    Named tasks with declared dependencies.

    Built once by the composition root and passed explicitly to the runner.
    Dependencies must be registered before the tasks that reference them,
    so a registry filled through register() can never contain a cycle.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def register(
        self,
        task_id: str,
        dependencies: Iterable[str] = (),
        action: TaskAction | None = None,
    ) -> Task:
        task_id = _clean_id(task_id)
        deps = _clean_deps(dependencies)

        if task_id in self._tasks:
            raise DuplicateTaskError(task_id)
        for dep in deps:
            if dep not in self._tasks:
                raise UnknownDependencyError(task_id, dep)
        if action is not None and not callable(action):
            raise TypeError(f"action for task '{task_id}' must be callable")

        task = Task(id=task_id, dependencies=deps, action=action or noop_action)
        self._tasks[task_id] = task
        logger.debug("Task registered id=%s deps=%s", task_id, list(deps))
        return task

    def task(
        self, task_id: str, dependencies: Iterable[str] = ()
    ) -> Callable[[TaskAction], TaskAction]:
        """Decorator form of register(); returns the function unchanged."""

        def decorator(fn: TaskAction) -> TaskAction:
            self.register(task_id, dependencies, fn)
            return fn

        return decorator

    def register_all(self, tasks: Iterable[Task]) -> list[Task]:
        """
        Register a batch atomically.

        Inside the batch dependencies may be declared in any order.
        On any error the registry is left unchanged.
        """
        batch: dict[str, Task] = {}
        for t in tasks:
            task_id = _clean_id(t.id)
            if task_id in self._tasks or task_id in batch:
                raise DuplicateTaskError(task_id)
            if not callable(t.action):
                raise TypeError(f"action for task '{task_id}' must be callable")
            batch[task_id] = Task(id=task_id, dependencies=_clean_deps(t.dependencies), action=t.action)

        for t in batch.values():
            for dep in t.dependencies:
                if dep not in self._tasks and dep not in batch:
                    raise UnknownDependencyError(t.id, dep)

        cycle = find_cycle(batch)
        if cycle is not None:
            raise CyclicDependencyError(cycle)

        self._tasks.update(batch)
        logger.debug("Registered %d tasks: %s", len(batch), list(batch))
        return list(batch.values())

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def ids(self) -> list[str]:
        """Task ids in registration order."""
        return list(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))
