# src/taskweave/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the taskfile, then dispatches
one command (help / list / plan / run).

Exit status: 0 ok, 1 task error, 2 usage or taskfile error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from ..cli.bootstrap import TaskfileError, create_initial_state, load_taskfile
from ..cli.commands import UsageError, registry
from ..config import get_settings
from ..logging_setup import setup_logging
from ..tasks.errors import TaskError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskweave",
        description="Run named tasks in dependency order.",
    )
    parser.add_argument("--taskfile", type=Path, default=None, help="Python file defining register_tasks(state).")
    parser.add_argument("--concurrent", action="store_true", default=None, help="Run independent tasks concurrently.")
    parser.add_argument("--keep-going", "-k", action="store_true", default=None, help="Keep starting unrelated tasks after a failure.")
    parser.add_argument("--log-level", default=None, help="Console log level (default from TASKWEAVE_LOG_LEVEL).")
    parser.add_argument("command", nargs="?", default="help", help=", ".join(registry.names()))
    parser.add_argument("args", nargs="*")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)

    settings = get_settings()
    overrides: dict[str, object] = {}
    if ns.taskfile is not None:
        overrides["taskfile"] = ns.taskfile
    if ns.concurrent:
        overrides["concurrent"] = True
    if ns.keep_going:
        overrides["keep_going"] = True
    if ns.log_level:
        overrides["log_level"] = str(ns.log_level).upper()
    if overrides:
        settings = replace(settings, **overrides)

    console_level = getattr(logging, settings.log_level, logging.INFO)
    setup_logging(
        log_dir=settings.data_dir if settings.log_to_file else None,
        console_level=console_level,
    )

    logger.debug("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    try:
        if ns.command.lower() not in ("help", "h", "?"):
            load_taskfile(state, settings.taskfile)
        reply = registry.handle(state, [ns.command, *ns.args], emit=None)
    except (UsageError, TaskfileError) as e:
        logger.error("%s", e)
        return 2
    except TaskError as e:
        logger.error("%s", e)
        return 1

    if reply:
        print(reply)
    return 0


if __name__ == "__main__":
    sys.exit(main())
