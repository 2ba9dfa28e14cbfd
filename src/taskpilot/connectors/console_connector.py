# src/taskpilot/connectors/console_connector.py

from __future__ import annotations

import logging

from ..cli.commands import registry as command_registry
from ..cli.render import render_task_list
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = "taskpilot> "


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (tasks=%d).", len(state.manager))
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskpilot"))

    print(f"{app_name}: {len(state.manager)} tasks loaded. Use /help for commands, /exit to quit.\n")

    while True:
        try:
            user_input = input(PROMPT).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            print()
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit", "/q"):
            logger.info("Console exit command received.")
            break

        # Bare text is a search shortcut.
        if not user_input.startswith("/"):
            tasks = state.manager.search_tasks(user_input)
            state.last_listing = [t.id for t in tasks]
            print(render_task_list(tasks, color=state.color, empty=f'No tasks match "{user_input}".'))
            print()
            continue

        try:
            reply = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)
            print()

    logger.info("Console finished.")
