# tests/test_task_api.py

from __future__ import annotations

import pytest

from taskweave.core.events import EventBus, LockTracker
from taskweave.tasks.errors import TaskActionError, UnknownDependencyError
from taskweave.tasks.task_api import (
    DB_LOAD_TASK,
    LOCK_CLEAR_TASK,
    LOCK_LOAD_TASK,
    LOCKS_EVENT,
    register_lock_tasks,
    release_action,
    signal_action,
)
from taskweave.tasks.task_registry import TaskRegistry
from taskweave.tasks.task_runner import TaskRunner

from .fakes import FakeLock, FakeNotifier


@pytest.mark.asyncio
async def test_actions_call_their_port(notifier: FakeNotifier, lock: FakeLock) -> None:
    await signal_action(notifier, "locks")()
    release_action(lock)()

    assert notifier.signalled == ["locks"]
    assert lock.releases == 1


def test_lock_tasks_need_the_db_task(registry: TaskRegistry, notifier: FakeNotifier, lock: FakeLock) -> None:
    with pytest.raises(UnknownDependencyError) as ei:
        register_lock_tasks(registry, notifier=notifier, locks=lock)

    assert ei.value.dependency == DB_LOAD_TASK
    assert len(registry) == 0


def test_lock_tasks_shape(registry: TaskRegistry, notifier: FakeNotifier, lock: FakeLock) -> None:
    registry.register(DB_LOAD_TASK)
    load, clear = register_lock_tasks(registry, notifier=notifier, locks=lock)

    assert load.id == LOCK_LOAD_TASK
    assert load.dependencies == (DB_LOAD_TASK,)
    assert clear.id == LOCK_CLEAR_TASK
    assert clear.dependencies == (LOCK_LOAD_TASK,)


@pytest.mark.asyncio
async def test_clear_locks_end_to_end(registry: TaskRegistry) -> None:
    bus = EventBus()
    locks = LockTracker()
    seen: list[tuple[str, int]] = []

    def load_db() -> None:
        locks.acquire("app.db", owner=DB_LOAD_TASK)
        locks.acquire("app.cache")

    bus.subscribe(LOCKS_EVENT, lambda name: seen.append((name, len(locks.held()))))
    registry.register(DB_LOAD_TASK, [], load_db)
    register_lock_tasks(registry, notifier=bus, locks=locks)

    report = await TaskRunner(registry).run(LOCK_CLEAR_TASK)

    assert report.order == (DB_LOAD_TASK, LOCK_LOAD_TASK, LOCK_CLEAR_TASK)
    # The event fires while the locks are still held, then they are cleared.
    assert seen == [(LOCKS_EVENT, 2)]
    assert bus.history == [LOCKS_EVENT]
    assert locks.held() == []


@pytest.mark.asyncio
async def test_failing_event_handler_fails_the_lock_task(registry: TaskRegistry, lock: FakeLock) -> None:
    notifier = FakeNotifier(error=RuntimeError("listener down"))
    registry.register(DB_LOAD_TASK)
    register_lock_tasks(registry, notifier=notifier, locks=lock)

    with pytest.raises(TaskActionError) as ei:
        await TaskRunner(registry).run(LOCK_CLEAR_TASK)

    assert ei.value.task_id == LOCK_LOAD_TASK
    assert lock.releases == 0
