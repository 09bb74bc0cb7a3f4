# src/mstodo_sync/cli/commands.py

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..graph.errors import TodoSyncError, Unauthenticated
from ..sync.fetcher import fetch_hierarchy
from ..sync.grouping import group_tasks_by_list
from ..sync.models import Task, TaskStatus
from ..sync.writeback import set_checklist_item_checked, set_task_completion
from .render import render_error, render_grouped

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

UNAUTHENTICATED_HINT = "Set MSTODO_GRAPH_TOKEN in your .env (or MSTODO_TOKEN_FILE)."


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /show, ...)."""

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

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _describe(err: TodoSyncError) -> str:
    if isinstance(err, Unauthenticated):
        return f"{err.message}. {UNAUTHENTICATED_HINT}"
    return err.message


def _parse_task_number(state: AppState, args: list[str]) -> Task | str:
    if not args:
        return "Missing task number. Use /show to list tasks."
    try:
        number = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]}"
    task = state.task_by_number(number)
    if task is None:
        return f"No task #{number}. Use /show to refresh the list."
    return task


def _parse_item_ref(state: AppState, args: list[str]) -> tuple[Task, int] | str:
    if not args:
        return "Missing checklist item (e.g. 2.1). Use /show to list tasks."
    raw = args[0]
    task_part, sep, item_part = raw.partition(".")
    if not sep:
        return f"Not a checklist item reference: {raw} (expected N.M)"
    try:
        number, item_no = int(task_part), int(item_part)
    except ValueError:
        return f"Not a checklist item reference: {raw} (expected N.M)"
    task = state.task_by_number(number)
    if task is None:
        return f"No task #{number}. Use /show to refresh the list."
    items = task.checklist_items or ()
    if not 1 <= item_no <= len(items):
        return f"Task #{number} has no checklist item {item_no}."
    return task, item_no - 1


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    token = "configured" if state.client.has_credentials() else "MISSING"
    return (
        "Status:\n"
        f"  Graph API: {getattr(settings, 'graph_base_url', '?')}\n"
        f"  Token: {token}\n"
        f"  Tasks in current view: {len(state.view)}"
    )


async def cmd_show(state: AppState, args: list[str]) -> str:
    try:
        result = await fetch_hierarchy(state.client)
    except TodoSyncError as e:
        logger.error("Error loading MS Todo tasks: %s", e.message)
        state.view = []
        text = render_error(e)
        if isinstance(e, Unauthenticated):
            text += f". {UNAUTHENTICATED_HINT}"
        return text

    text, order = render_grouped(group_tasks_by_list(result.tasks))
    state.view = order

    if result.skipped_lists:
        names = ", ".join(s.list_name for s in result.skipped_lists)
        text += f"\n\n(skipped lists: {names})"
    return text


async def _toggle_task(state: AppState, args: list[str], completed: bool) -> str:
    ref = _parse_task_number(state, args)
    if isinstance(ref, str):
        return ref
    task = ref
    try:
        await set_task_completion(state.client, task.id, task.list_id, completed)
    except TodoSyncError as e:
        return f"Error updating task status: {_describe(e)}"

    status = TaskStatus.for_completion(completed)
    state.replace_task(task, dataclasses.replace(task, status=status))
    return f"{'Completed' if completed else 'Reopened'}: {task.title}"


async def _toggle_item(state: AppState, args: list[str], checked: bool) -> str:
    ref = _parse_item_ref(state, args)
    if isinstance(ref, str):
        return ref
    task, index = ref
    items = task.checklist_items or ()
    item = items[index]
    try:
        await set_checklist_item_checked(state.client, task.id, task.list_id, item.id, checked)
    except TodoSyncError as e:
        return f"Error updating checklist item status: {_describe(e)}"

    new_items = items[:index] + (dataclasses.replace(item, is_checked=checked),) + items[index + 1:]
    state.replace_task(task, dataclasses.replace(task, checklist_items=new_items))
    return f"{'Checked' if checked else 'Unchecked'}: {item.display_name}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _toggle_task(state, args, True)


async def cmd_undo(state: AppState, args: list[str]) -> str:
    return await _toggle_task(state, args, False)


async def cmd_check(state: AppState, args: list[str]) -> str:
    return await _toggle_item(state, args, True)


async def cmd_uncheck(state: AppState, args: list[str]) -> str:
    return await _toggle_item(state, args, False)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show Graph endpoint and token status.")
registry.register("show", cmd_show, help_text="Fetch and show all lists and tasks.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Mark task N completed: /done N.")
registry.register("undo", cmd_undo, help_text="Mark task N not started: /undo N.")
registry.register("check", cmd_check, help_text="Check checklist item: /check N.M.")
registry.register("uncheck", cmd_uncheck, help_text="Uncheck checklist item: /uncheck N.M.")
