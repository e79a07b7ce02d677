# src/taskweave/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import RunReport

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad command line (unknown command, missing arguments)."""


class CommandRegistry:
    """Named CLI commands (help, list, plan, run)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def names(self) -> list[str]:
        return list(self._help)

    def handle(
        self,
        state: AppState,
        argv: list[str],
        emit: CommandEmitter | None = None,
    ) -> str:
        """
        Dispatch ["command", *args] to its handler and return its reply.
        Raises UsageError for an empty or unknown command.
        """
        if not argv:
            raise UsageError("No command given. Use 'help' to list available commands.")

        name = argv[0].lower()
        args = argv[1:]

        handler = self._handlers.get(name)
        if not handler:
            raise UsageError(f"Unknown command: {name}. Use 'help' to list available commands.")

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = list(state.registry)
    if not tasks:
        return "No tasks registered."
    lines = [f"Tasks ({len(tasks)}):"]
    for t in tasks:
        deps = f" <- {', '.join(t.dependencies)}" if t.dependencies else ""
        lines.append(f"  {t.id}{deps}")
    return "\n".join(lines)


def cmd_plan(state: AppState, args: list[str]) -> str:
    """
    plan TASK -> execution order (dependencies first), nothing is run
    """
    if len(args) != 1:
        raise UsageError("Usage: plan TASK")
    order = state.runner.plan(args[0])
    return "\n".join(f"{i}. {tid}" for i, tid in enumerate(order, start=1))


def _format_report(report: RunReport) -> str:
    return f"{report.target}: ok ({len(report.order)} task(s) in {report.duration:.3f}s: {' -> '.join(report.order)})"


def cmd_run(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    run TASK [TASK...] -> run each target in turn

    Each target is an independent run. The first failing run stops the
    command and its TaskError propagates to the caller.
    """
    if not args:
        raise UsageError("Usage: run TASK [TASK...]")

    lines: list[str] = []
    for target in args:
        report = asyncio.run(state.runner.run(target))
        line = _format_report(report)
        lines.append(line)
        if emit is not None:
            emit(line)
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List registered tasks and their dependencies.", aliases=["ls"])
registry.register("plan", cmd_plan, help_text="Show execution order: plan TASK.")
registry.register("run", cmd_run, help_text="Run tasks with their dependencies: run TASK [TASK...].")
