# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskweave.cli.bootstrap import create_initial_state
from taskweave.core.state import AppState
from taskweave.tasks.task_registry import TaskRegistry

from .fakes import FakeLock, FakeNotifier, Recorder


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap and CLI commands.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskweave-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path / "data",
        taskfile=tmp_path / "taskfile.py",
        concurrent=False,
        keep_going=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(settings=settings)


@pytest.fixture()
def registry() -> TaskRegistry:
    return TaskRegistry()


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def lock() -> FakeLock:
    return FakeLock()
