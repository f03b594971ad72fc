# src/taskpad/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], str]

logger = logging.getLogger(__name__)

NOTE_SEPARATOR = "|"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_local(ts: datetime | None) -> str:
    if ts is None:
        return "-"
    return ts.astimezone().strftime("%Y-%m-%d %H:%M")


def parse_due(raw: str) -> datetime:
    """Parse an ISO date/datetime; naive values are taken as local time."""
    value = datetime.fromisoformat(raw.strip())
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(UTC)


def resolve_task(tasks: list[Task], ref: str) -> Task | None:
    """
    Resolve a user reference: 1-based position from /list, or an id prefix.
    An in-range number is a position; anything else is matched as an id prefix.
    Empty or ambiguous prefixes resolve to None.
    """
    if ref.isascii() and ref.isdigit():
        pos = int(ref)
        if 1 <= pos <= len(tasks):
            return tasks[pos - 1]
        # Out of range: ids can be all digits too, so try it as a prefix.

    prefix = ref.upper()
    if not prefix:
        return None
    matches = [t for t in tasks if t.id.upper().startswith(prefix)]
    return matches[0] if len(matches) == 1 else None


def format_task_line(pos: int, task: Task) -> str:
    mark = "x" if task.is_complete else " "
    note = f" ({task.note})" if task.note else ""
    return f"{pos:>3}. [{mark}] {task.title}{note}  due {_fmt_local(task.due_date)}  #{task.id[:8]}"


def _lookup(state: AppState, args: list[str]) -> tuple[Task | None, str | None]:
    if not args:
        return None, "Missing task reference (position from /list or id prefix)."
    task = resolve_task(state.task_store.load_all(), args[0])
    if task is None:
        return None, f"No task matches {args[0]!r}."
    return task, None


def add_from_text(state: AppState, text: str) -> str:
    title, sep, note = text.partition(NOTE_SEPARATOR)
    title = title.strip()
    if not title:
        return "Usage: /add <title> [| note]"
    task = Task.create(title, note=(note.strip() or None) if sep else None)
    state.task_store.upsert(task)
    logger.info("Task added id=%s", task.id)
    return f"Added: {task.title}  #{task.id[:8]}"


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    settings = state.settings
    tasks = state.task_store.load_all()
    done = sum(1 for t in tasks if t.is_complete)
    return (
        "Status:\n"
        f"  Backend: {getattr(settings, 'storage_backend', '?')}\n"
        f"  Key: {state.task_store.key}\n"
        f"  Tasks: {len(tasks)} ({done} done, {len(tasks) - done} open)"
    )


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list        -> all tasks
    /list open   -> only incomplete tasks
    /list done   -> only completed tasks
    """
    tasks = state.task_store.load_all()
    if not tasks:
        return "No tasks yet. Add one with /add <title>."

    flt = args[0].lower() if args else "all"
    if flt not in ("all", "open", "done"):
        return "Usage: /list [all|open|done]"

    lines = []
    for pos, task in enumerate(tasks, start=1):
        if flt == "open" and task.is_complete:
            continue
        if flt == "done" and not task.is_complete:
            continue
        lines.append(format_task_line(pos, task))
    return "\n".join(lines) if lines else f"No {flt} tasks."


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return add_from_text(state, " ".join(args))


def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task, err = _lookup(state, args)
    if task is None:
        return err or ""
    return (
        f"{task.title}\n"
        f"  id: {task.id}\n"
        f"  note: {task.note or '-'}\n"
        f"  due: {_fmt_local(task.due_date)}\n"
        f"  complete: {'yes' if task.is_complete else 'no'}\n"
        f"  completed: {_fmt_local(task.completed_date)}\n"
        f"  created: {_fmt_local(task.created_date)}"
    )


def _set_complete(state: AppState, args: list[str], value: bool) -> str:
    task, err = _lookup(state, args)
    if task is None:
        return err or ""
    if task.is_complete == value:
        return f"Already {'done' if value else 'open'}: {task.title}"
    state.task_store.upsert(task.set_complete(value))
    return f"{'Done' if value else 'Reopened'}: {task.title}"


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _set_complete(state, args, True)


def cmd_undo(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _set_complete(state, args, False)


def cmd_rename(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task, err = _lookup(state, args)
    if task is None:
        return err or ""
    title = " ".join(args[1:]).strip()
    if not title:
        return "Usage: /rename <ref> <new title>"
    state.task_store.upsert(task.edit(title=title))
    return f"Renamed: {task.title} -> {title}"


def cmd_note(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /note <ref> <text>  -> set the note
    /note <ref>         -> clear the note
    """
    task, err = _lookup(state, args)
    if task is None:
        return err or ""
    note = " ".join(args[1:]).strip() or None
    state.task_store.upsert(task.edit(note=note))
    return f"Note {'set' if note else 'cleared'}: {task.title}"


def cmd_due(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task, err = _lookup(state, args)
    if task is None:
        return err or ""
    raw = " ".join(args[1:]).strip()
    if not raw:
        return "Usage: /due <ref> <YYYY-MM-DD[THH:MM]>"
    try:
        due = parse_due(raw)
    except ValueError:
        return f"Invalid date: {raw!r}. Use YYYY-MM-DD or YYYY-MM-DDTHH:MM."
    state.task_store.upsert(task.edit(due_date=due))
    return f"Due {_fmt_local(due)}: {task.title}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage backend and task counts.")
registry.register("list", cmd_list, help_text="List tasks: /list [all|open|done].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| note].")
registry.register("show", cmd_show, help_text="Show one task: /show <ref>.")
registry.register("done", cmd_done, help_text="Mark a task complete: /done <ref>.")
registry.register("undo", cmd_undo, help_text="Mark a task incomplete: /undo <ref>.")
registry.register("rename", cmd_rename, help_text="Change a title: /rename <ref> <title>.")
registry.register("note", cmd_note, help_text="Set or clear a note: /note <ref> [text].")
registry.register("due", cmd_due, help_text="Set the due date: /due <ref> <YYYY-MM-DD[THH:MM]>.")
