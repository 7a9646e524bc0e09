# src/todo_app/cli/commands.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Iterable

from ..core.state import AppState
from ..tasks.task_api import (
    create_task,
    edit_task,
    render_task,
    set_completed,
    set_important,
    share_tasks,
)
from ..tasks.task_form import TaskForm
from ..tasks.task_models import DuplicateTaskError, Task, TaskValidationError

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)

IMPORTANT_MARK = "!"
NOT_IMPORTANT_MARK = "-!"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    async def handle(
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

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task_line(task: Task) -> str:
    done = "[x]" if task.is_completed else "[ ]"
    flag = IMPORTANT_MARK if task.is_important else " "
    return f"{done} {flag} #{task.task_id} {task.name}"


def format_task_list(tasks: Iterable[Task]) -> str:
    lines = [format_task_line(t) for t in tasks]
    if not lines:
        return "No tasks yet. Use /add <name> | <description> to create one."
    return "\n".join(lines)


def _parse_task_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def _parse_fields(args: list[str]) -> tuple[str, str, bool | None] | None:
    """
    '<name> | <description> [!|-!]' -> (name, description, important).

    important is None when neither mark is given. Returns None if the
    separator is missing.
    """
    important: bool | None = None
    if args and args[-1] == IMPORTANT_MARK:
        important = True
        args = args[:-1]
    elif args and args[-1] == NOT_IMPORTANT_MARK:
        important = False
        args = args[:-1]
    raw = " ".join(args)
    if "|" not in raw:
        return None
    name, description = raw.split("|", 1)
    return name.strip(), description.strip(), important


def _format_errors(err: TaskValidationError) -> str:
    lines = ["Task not saved:"]
    for field_name, msg in err.errors.items():
        lines.append(f"  {field_name} {msg}")
    return "\n".join(lines)


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return format_task_list(await state.repository.get_tasks())


async def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /show <id>"
    task = await state.repository.get_task(task_id)
    if task is None:
        return f"No task #{task_id}."
    return f"Task #{task.task_id}\n{render_task(task)}"


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <name> | <description>      -> new task
    /add <name> | <description> !    -> new important task
    """
    fields = _parse_fields(args)
    if fields is None:
        return "Usage: /add <name> | <description> [!]"
    name, description, important = fields
    form = TaskForm(name=name, description=description, is_important=bool(important))
    try:
        task = await create_task(state, form)
    except TaskValidationError as e:
        return _format_errors(e)
    except DuplicateTaskError:
        logger.exception("Add failed: duplicate task_id")
        return "Task not saved: a task with the same id already exists. Try again."
    return f"Added #{task.task_id} {task.name}"


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <id> <name> | <description>       -> keep importance as stored
    /edit <id> <name> | <description> !     -> mark important
    /edit <id> <name> | <description> -!    -> clear important
    """
    task_id = _parse_task_id(args)
    fields = _parse_fields(args[1:]) if task_id is not None else None
    if task_id is None or fields is None:
        return "Usage: /edit <id> <name> | <description> [!|-!]"

    existing = await state.repository.get_task(task_id)
    if existing is None:
        return f"No task #{task_id}."

    form = TaskForm.from_task(existing)
    form.name, form.description, important = fields
    if important is not None:
        form.is_important = important
    try:
        task = await edit_task(state, task_id, form)
    except TaskValidationError as e:
        return _format_errors(e)
    if task is None:
        return f"No task #{task_id}."
    return f"Saved #{task.task_id} {task.name}"


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    task = await set_completed(state, task_id)
    if task is None:
        return f"No task #{task_id}."
    return format_task_line(task)


async def cmd_important(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /important <id>"
    task = await set_important(state, task_id)
    if task is None:
        return f"No task #{task_id}."
    return format_task_line(task)


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /delete <id>"
    task = await state.repository.get_task(task_id)
    if task is None:
        return f"No task #{task_id}."
    await state.repository.delete_task(task)
    return f"Deleted #{task.task_id} {task.name}"


async def cmd_share(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    await share_tasks(state)
    return "Task list shared."


async def _watch_loop(state: AppState, emit: CommandEmitter) -> None:
    stream = state.repository.observe_tasks()
    try:
        async for tasks in stream:
            emit("[WATCH]\n" + format_task_list(tasks))
    finally:
        await stream.aclose()


async def stop_watch(state: AppState) -> bool:
    task = state.watch_task
    if task is None:
        return False
    state.watch_task = None
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    return True


async def cmd_watch(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /watch        -> show status
    /watch on     -> print the list on every change
    /watch off    -> stop
    """
    active = state.watch_task is not None and not state.watch_task.done()
    if not args:
        return f"Watch is currently {'ON' if active else 'OFF'}. Use /watch on or /watch off."

    arg = args[0].lower()

    if arg in ("on", "1", "true", "yes"):
        if active:
            return "Watch is already ON."
        if emit is None:
            return "Watch needs an interactive console."
        state.watch_task = asyncio.create_task(_watch_loop(state, emit))
        return "Watch enabled."

    if arg in ("off", "0", "false", "no"):
        if not await stop_watch(state):
            return "Watch is already OFF."
        return "Watch disabled."

    return "Usage: /watch on or /watch off."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List all tasks.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("add", cmd_add, help_text="Add a task: /add <name> | <description> [!].")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <id> <name> | <description> [! to mark important, -! to clear].",
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.")
registry.register("important", cmd_important, help_text="Toggle importance: /important <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("share", cmd_share, help_text="Share the task list as plain text.")
registry.register("watch", cmd_watch, help_text="Live list updates: /watch on | /watch off.")
