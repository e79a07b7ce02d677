# tests/test_events.py

from __future__ import annotations

import threading

import pytest

from taskweave.core.events import EventBus, LockTracker


@pytest.mark.asyncio
async def test_event_bus_awaits_sync_and_async_handlers_in_order() -> None:
    bus = EventBus()
    calls: list[str] = []

    def first(name: str) -> None:
        calls.append(f"sync:{name}")

    async def second(name: str) -> None:
        calls.append(f"async:{name}")

    bus.subscribe("locks", first)
    bus.subscribe("locks", second)
    bus.subscribe("other", first)

    await bus.signal("locks")
    await bus.signal("nobody-listens")

    assert calls == ["sync:locks", "async:locks"]
    assert bus.history == ["locks", "nobody-listens"]
    assert bus.subscribers("locks") == 2


@pytest.mark.asyncio
async def test_event_bus_unsubscribe_and_errors() -> None:
    bus = EventBus()

    def broken(name: str) -> None:
        raise ValueError(name)

    bus.subscribe("locks", broken)
    assert bus.subscribers("locks") == 1
    with pytest.raises(ValueError):
        await bus.signal("locks")

    assert bus.unsubscribe("locks", broken) is True
    assert bus.unsubscribe("locks", broken) is False
    assert bus.subscribers("locks") == 0
    assert bus.subscribers("never-subscribed") == 0
    await bus.signal("locks")

    with pytest.raises(ValueError):
        bus.subscribe("", broken)


def test_lock_tracker_acquire_and_release() -> None:
    locks = LockTracker()

    assert locks.acquire("app.db", owner="loader") is True
    assert locks.acquire("app.db") is False
    assert locks.acquire(" app.cache ") is True
    assert locks.is_held("app.cache")
    assert [h.name for h in locks.held()] == ["app.db", "app.cache"]
    assert locks.held()[0].owner == "loader"

    assert locks.release() == 2
    assert locks.held() == []
    assert locks.release() == 0

    with pytest.raises(ValueError):
        locks.acquire("")


def test_lock_tracker_is_thread_safe() -> None:
    locks = LockTracker()
    wins: list[bool] = []
    mu = threading.Lock()

    def worker() -> None:
        ok = locks.acquire("shared")
        with mu:
            wins.append(ok)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert wins.count(True) == 1
