# tests/test_commands.py

from __future__ import annotations

from todo_tracker.cli.commands import CommandRegistry, registry


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BEE y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_list_toggle_archive_flow(state) -> None:
    assert registry.handle(state, "/add Buy milk") == "Added #1: Buy milk"
    assert registry.handle(state, "/add Walk dog") == "Added #2: Walk dog"
    assert "Usage: /add" in (registry.handle(state, "/add") or "")

    assert "Checked #1" in (registry.handle(state, "/done 1") or "")
    listing = registry.handle(state, "/list") or ""
    assert "#1 [x] Buy milk" in listing
    assert "#2 [ ] Walk dog" in listing

    assert registry.handle(state, "/archive") == "Moved 1 task(s) to history."
    assert registry.handle(state, "/archive") == "No checked tasks to archive."

    history = registry.handle(state, "/history") or ""
    assert state.current_tab == "history"
    assert "#1 [x] Buy milk" in history

    assert registry.handle(state, "/stats") == "Active: 1 | Done (not archived): 0 | History: 1"


def test_toggle_and_revert_messages(state) -> None:
    state.manager.add_task("A")
    assert registry.handle(state, "/toggle 1") == "Checked #1. Use /archive to move checked tasks to history."
    assert registry.handle(state, "/toggle #1") == "Unchecked #1."
    assert registry.handle(state, "/toggle 9") == "No task #9."
    assert registry.handle(state, "/toggle abc") == "Usage: /toggle <id>"

    state.manager.toggle_completion(1)
    state.manager.archive_completed()
    assert registry.handle(state, "/revert 1") == "Restored #1 to active tasks."
    assert registry.handle(state, "/revert 1") == "No archived task #1."
    assert state.manager.active[0].completed is False


def test_edit_and_delete(state) -> None:
    state.manager.add_task("A")
    assert registry.handle(state, "/edit 1 New text") == "Updated #1."
    assert state.manager.active[0].text == "New text"
    assert registry.handle(state, "/edit 1") == "Usage: /edit <id> <new text>"

    assert registry.handle(state, "/rm 1 yes") == "Deleted #1."
    assert registry.handle(state, "/rm 1 yes") == "No task #1."


def test_edit_archived_is_refused(state) -> None:
    state.manager.add_task("A")
    state.manager.toggle_completion(1)
    state.manager.archive_completed()
    reply = registry.handle(state, "/edit 1 changed") or ""
    assert "archived tasks cannot be edited" in reply
    assert state.manager.archived[0].text == "A"


def test_destructive_commands_need_confirmation(state) -> None:
    state.manager.add_task("A")
    state.manager.add_task("B")
    state.manager.toggle_completion(1)
    state.manager.archive_completed()

    assert "/clear-history yes" in (registry.handle(state, "/clear-history") or "")
    assert state.manager.archived_count == 1

    notes: list[str] = []
    assert registry.handle(state, "/clear-history yes", emit=notes.append) == "History cleared."
    assert notes == ["Removing 1 archived task(s)..."]
    assert state.manager.archived_count == 0

    assert "/clear-all yes" in (registry.handle(state, "/clear-all") or "")
    assert len(state.manager.active) == 1
    assert registry.handle(state, "/clear-all y") == "All tasks cleared."
    assert state.manager.active == []


def test_confirmation_can_be_disabled(state) -> None:
    state.settings.confirm_destructive = False
    state.manager.add_task("A")
    assert registry.handle(state, "/clear-all") == "All tasks cleared."


def test_help_lists_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("add", "toggle", "archive", "revert", "clear-all", "clear-history"):
        assert f"/{name}" in text


def test_add_and_edit_keep_inner_spacing(state) -> None:
    assert registry.handle(state, "/add   Buy   2  x   milk  ") == "Added #1: Buy   2  x   milk"
    assert state.manager.active[0].text == "Buy   2  x   milk"

    assert registry.handle(state, "/a one  two") == "Added #2: one  two"

    assert registry.handle(state, "/edit  1   a    b ") == "Updated #1."
    assert state.manager.active[0].text == "a    b"

    assert registry.handle(state, "/add    ") == "Usage: /add <text> (text cannot be empty)."
    assert registry.handle(state, "/edit 1") == "Usage: /edit <id> <new text>"
    assert len(state.manager.active) == 2


def test_delete_needs_confirmation(state) -> None:
    state.manager.add_task("A")

    assert registry.handle(state, "/rm 1") == "Delete task #1? Run /rm 1 yes to confirm."
    assert len(state.manager.active) == 1
    assert registry.handle(state, "/rm 7") == "No task #7."

    state.settings.confirm_destructive = False
    assert registry.handle(state, "/rm 1") == "Deleted #1."
    assert state.manager.active == []
