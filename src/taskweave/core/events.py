# src/taskweave/core/events.py

"""
In-process implementations of the two collaborator ports:
- EventBus: EventNotifier (signal named events to subscribers)
- LockTracker: ReleasableResource (held-lock bookkeeping, release() clears it)
"""

from __future__ import annotations

import inspect
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

EventHandler = Callable[[str], Awaitable[None] | None]


class EventBus:
    """
    Named-event fan-out.

    signal() awaits every handler in subscription order. A handler error
    propagates to the caller, so a signalling task action fails with it.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self.history: list[str] = []

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        if not event_name:
            raise ValueError("event_name is required")
        self._handlers.setdefault(event_name, []).append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> bool:
        handlers = self._handlers.get(event_name) or []
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def subscribers(self, event_name: str) -> int:
        return len(self._handlers.get(event_name) or [])

    async def signal(self, event_name: str) -> None:
        self.history.append(event_name)
        handlers = list(self._handlers.get(event_name) or [])
        logger.debug("Event %s -> %d handler(s)", event_name, len(handlers))

        for handler in handlers:
            result = handler(event_name)
            if inspect.isawaitable(result):
                await result


@dataclass(slots=True, frozen=True)
class HeldLock:
    name: str
    owner: str | None
    acquired_at: float


class LockTracker:
    """
    Bookkeeping of named locks held by this process.

    What a lock protects is up to its owners. Thread-safe.
    """

    def __init__(self) -> None:
        self._mu = threading.Lock()
        self._held: dict[str, HeldLock] = {}

    def acquire(self, name: str, owner: str | None = None) -> bool:
        """Mark `name` held. Returns False if it is already held."""
        if not name or not name.strip():
            raise ValueError("lock name is required")
        key = name.strip()
        with self._mu:
            if key in self._held:
                return False
            self._held[key] = HeldLock(name=key, owner=owner, acquired_at=time.time())
        logger.debug("Lock acquired name=%s owner=%s", key, owner)
        return True

    def is_held(self, name: str) -> bool:
        with self._mu:
            return name in self._held

    def held(self) -> list[HeldLock]:
        with self._mu:
            return sorted(self._held.values(), key=lambda h: h.acquired_at)

    def release(self) -> int:
        """Drop every held lock. Returns how many were released."""
        with self._mu:
            n = len(self._held)
            self._held.clear()
        logger.info("Locks cleared: %d released", n)
        return n
