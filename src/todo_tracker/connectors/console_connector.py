# src/todo_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import TAB_ACTIVE, registry as command_registry, render_stats, render_tasks
from ..core.state import AppState
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleView:
    """
    Re-renders the current tab whenever the task manager reports a change.

    The view keeps its own copies of both lists; it never holds on to
    objects owned by the manager.
    """

    def __init__(self, state: AppState, out: Callable[[str], None] = print) -> None:
        self._state = state
        self._out = out
        self.active: list[Task] = []
        self.archived: list[Task] = []
        self.refresh()
        state.manager.subscribe(self.on_change)

    def refresh(self) -> None:
        self.active = list(self._state.manager.active)
        self.archived = list(self._state.manager.archived)

    def render(self) -> str:
        if self._state.current_tab == TAB_ACTIVE:
            body = render_tasks(self.active, tab=TAB_ACTIVE)
        else:
            body = render_tasks(self.archived, tab=self._state.current_tab)
        return f"{body}\n{render_stats(self._state)}"

    def on_change(self) -> None:
        self.refresh()
        self._out(self.render())


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (tab=%s).", state.current_tab)
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    view = ConsoleView(state)
    print(view.render())

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = f"/add {user_input}"

        try:
            cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)

    logger.info("Console finished.")
