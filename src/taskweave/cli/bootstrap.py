# src/taskweave/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the registry, runner, event bus and lock tracker into AppState,
- loads the taskfile that registers the host's tasks.
"""

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path

from ..config import get_settings
from ..core.events import EventBus, LockTracker
from ..core.state import AppState
from ..tasks.errors import TaskError
from ..tasks.task_registry import TaskRegistry
from ..tasks.task_runner import TaskRunner

logger = logging.getLogger(__name__)

TASKFILE_ENTRYPOINT = "register_tasks"


class TaskfileError(Exception):
    """The taskfile is missing, broken, or does not expose register_tasks(state)."""


def _ensure_local_dirs(settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    registry = TaskRegistry()
    runner = TaskRunner(
        registry,
        concurrent=bool(getattr(settings, "concurrent", False)),
        keep_going=bool(getattr(settings, "keep_going", False)),
    )

    return AppState(
        settings=settings,
        registry=registry,
        runner=runner,
        events=EventBus(),
        locks=LockTracker(),
    )


def load_taskfile(state: AppState, path: str | Path) -> int:
    """
    Import the taskfile at `path` and call its register_tasks(state).

    Returns the number of tasks it registered. Task registration errors
    (TaskError) propagate unchanged; anything else raised while importing
    the file or inside register_tasks is wrapped in TaskfileError.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise TaskfileError(f"Taskfile not found: {path}")

    spec = importlib.util.spec_from_file_location("taskfile", path)
    if spec is None or spec.loader is None:
        raise TaskfileError(f"Cannot import taskfile: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except TaskError:
        raise
    except Exception as e:
        raise TaskfileError(f"Taskfile {path} failed to import: {e!r}") from e

    register = getattr(module, TASKFILE_ENTRYPOINT, None)
    if not callable(register):
        raise TaskfileError(f"Taskfile {path} does not define {TASKFILE_ENTRYPOINT}(state)")

    before = len(state.registry)
    try:
        register(state)
    except TaskError:
        raise
    except Exception as e:
        raise TaskfileError(f"Taskfile {path} {TASKFILE_ENTRYPOINT}(state) failed: {e!r}") from e
    added_tasks = len(state.registry) - before
    logger.info("Loaded taskfile %s: %d task(s)", path, added_tasks)
    return added_tasks
