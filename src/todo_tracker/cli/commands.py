# src/todo_tracker/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable, Iterable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

TAB_ACTIVE = "active"
TAB_HISTORY = "history"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        # Commands whose argument is free text, passed through without re-splitting.
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_text: bool = False,
    ) -> None:
        """
        Register a handler under `name` and its aliases.

        With raw_text=True the handler gets the rest of the line as a single
        argument (inner whitespace kept) instead of whitespace-split words.
        """
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for k in [key, *(a.lower() for a in aliases)]:
            self._handlers[k] = handler
            if raw_text:
                self._raw.add(k)

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(None, 1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        if name in self._raw:
            args = [rest] if rest.strip() else []
        else:
            args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

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
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (plain text without a leading / is added as a new task)")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def format_task(task: Task) -> str:
    if task.completed_at is not None:
        return f"  #{task.id} [x] {task.text}  (done {task.completed_at})"
    mark = "x" if task.completed else " "
    return f"  #{task.id} [{mark}] {task.text}"


def render_tasks(tasks: Iterable[Task], *, tab: str) -> str:
    tasks = list(tasks)
    title = "Active tasks" if tab == TAB_ACTIVE else "History"
    if not tasks:
        empty = "No tasks yet. Add one!" if tab == TAB_ACTIVE else "No archived tasks."
        return f"{title}:\n  {empty}"
    return "\n".join([f"{title}:"] + [format_task(t) for t in tasks])


def render_stats(state: AppState) -> str:
    m = state.manager
    return (
        f"Active: {m.active_count} | Done (not archived): {m.completed_count} "
        f"| History: {m.archived_count}"
    )


# ---- helpers ----


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        return None


def _confirmed(state: AppState, args: list[str]) -> bool:
    if not bool(getattr(state.settings, "confirm_destructive", True)):
        return True
    return bool(args) and args[0].lower() in ("yes", "y")


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    task = state.manager.add_task(args[0] if args else "")
    if task is None:
        return "Usage: /add <text> (text cannot be empty)."
    return f"Added #{task.id}: {task.text}"


def cmd_list(state: AppState, args: list[str]) -> str:
    state.current_tab = TAB_ACTIVE
    return render_tasks(state.manager.active, tab=TAB_ACTIVE)


def cmd_history(state: AppState, args: list[str]) -> str:
    state.current_tab = TAB_HISTORY
    return render_tasks(state.manager.archived, tab=TAB_HISTORY)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /toggle <id>"
    if not state.manager.toggle_completion(task_id):
        return f"No task #{task_id}."
    task = state.manager.get_task(task_id)
    if task is not None and task.completed:
        return f"Checked #{task_id}. Use /archive to move checked tasks to history."
    return f"Unchecked #{task_id}."


def cmd_edit(state: AppState, args: list[str]) -> str:
    # args is [rest-of-line]; only the id is split off.
    parts = args[0].split(None, 1) if args else []
    task_id = _parse_id(parts)
    if task_id is None or len(parts) < 2:
        return "Usage: /edit <id> <new text>"
    if not state.manager.update_text(task_id, parts[1]):
        return f"No active task #{task_id} (archived tasks cannot be edited)."
    return f"Updated #{task_id}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /rm <id>"
    if not _confirmed(state, args[1:]):
        logger.debug("rm #%s not confirmed (args=%s)", task_id, args)
        if state.manager.get_task(task_id) is None:
            return f"No task #{task_id}."
        return f"Delete task #{task_id}? Run /rm {task_id} yes to confirm."
    if not state.manager.delete_task(task_id):
        return f"No task #{task_id}."
    return f"Deleted #{task_id}."


def cmd_archive(state: AppState, args: list[str]) -> str:
    n = state.manager.archive_completed()
    if n == 0:
        return "No checked tasks to archive."
    return f"Moved {n} task(s) to history."


def cmd_revert(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /revert <id>"
    if not state.manager.revert_task(task_id):
        return f"No archived task #{task_id}."
    return f"Restored #{task_id} to active tasks."


def cmd_clear_all(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not _confirmed(state, args):
        logger.debug("clear-all not confirmed (args=%s)", args)
        return "This removes ALL tasks and history and cannot be undone. Run /clear-all yes to confirm."
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Removing {len(state.manager.active) + state.manager.archived_count} task(s)...")
    state.manager.clear_all()
    return "All tasks cleared."


def cmd_clear_history(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not _confirmed(state, args):
        logger.debug("clear-history not confirmed (args=%s)", args)
        return "This removes the whole history and cannot be undone. Run /clear-history yes to confirm."
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Removing {state.manager.archived_count} archived task(s)...")
    state.manager.clear_archived()
    return "History cleared."


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render_stats(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"], raw_text=True)
registry.register("list", cmd_list, help_text="Show active tasks.", aliases=["ls"])
registry.register("history", cmd_history, help_text="Show archived tasks.", aliases=["hist"])
registry.register(
    "toggle", cmd_toggle, help_text="Check/uncheck a task (reverts archived ones): /toggle <id>.",
    aliases=["done", "check"],
)
registry.register("edit", cmd_edit, help_text="Change task text: /edit <id> <text>.", raw_text=True)
registry.register("rm", cmd_delete, help_text="Delete a task: /rm <id> yes.", aliases=["delete", "del"])
registry.register("archive", cmd_archive, help_text="Move checked tasks to history.")
registry.register("revert", cmd_revert, help_text="Restore an archived task: /revert <id>.", aliases=["restore"])
registry.register("clear-all", cmd_clear_all, help_text="Delete all tasks and history: /clear-all yes.")
registry.register("clear-history", cmd_clear_history, help_text="Delete history only: /clear-history yes.")
registry.register("stats", cmd_stats, help_text="Show task counters.")
