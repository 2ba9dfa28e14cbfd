# src/taskpilot/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the task list), then either:
- runs a single command given on the command line (`taskpilot add "Buy milk" due=2025-01-10`),
- or starts the interactive console REPL.
"""

from __future__ import annotations

import logging
import shlex
import sys

import colorama

from ..cli.bootstrap import create_initial_state
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _as_command_line(argv: list[str]) -> str:
    first = argv[0] if argv[0].startswith("/") else "/" + argv[0]
    return " ".join([first, *(shlex.quote(a) for a in argv[1:])])


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    file_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=logging.WARNING, file_level=file_level)

    colorama.just_fix_windows_console()

    logger.info("Starting %s...", settings.app_name)
    state = create_initial_state(settings=settings)

    if argv:
        reply = command_registry.handle(state, _as_command_line(argv)) or ""
        print(reply)
        return 1 if reply.startswith(("Error:", "Unknown command", "Usage:")) else 0

    # Every mutation is already persisted; nothing to flush on exit.
    run_console_loop(state)
    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
