# taskfile.example.py

"""
Example taskfile (copy to taskfile.py).

    taskweave list
    taskweave run locks.clear

The database load is the host's business; here it only takes a demo lock.
"""

import asyncio
import logging

from taskweave.tasks.task_api import DB_LOAD_TASK, LOCKS_EVENT, register_lock_tasks

logger = logging.getLogger("taskfile")


def register_tasks(state) -> None:
    async def load_db() -> None:
        await asyncio.sleep(0)
        state.locks.acquire("app.db", owner="load:app.db")
        logger.info("Database loaded")

    def on_locks(event_name: str) -> None:
        logger.info("Event %s: %d lock(s) held", event_name, len(state.locks.held()))

    state.events.subscribe(LOCKS_EVENT, on_locks)
    state.registry.register(DB_LOAD_TASK, [], load_db)
    register_lock_tasks(state.registry, notifier=state.events, locks=state.locks)
