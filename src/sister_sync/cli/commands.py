# src/sister_sync/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks.errors import DecodeFailure, NotACollection
from ..tasks.sync_codec import EXPORT_ERROR_CODE
from ..tasks.task_models import ALL_ASSIGNEES, Priority, Task

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID_LEN = 8


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

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def format_task(task: Task) -> str:
    mark = "x" if task.is_completed else " "
    line = f"[{mark}] {str(task.id)[:SHORT_ID_LEN]}  {task.title}  ({task.assignee}, {task.priority})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def _match_participant(state: AppState, raw: str) -> str | None:
    for name in state.store.participants:
        if name.lower() == raw.lower():
            return name
    return None


def _match_priority(raw: str) -> Priority | None:
    for p in Priority:
        if p.value.lower() == raw.lower():
            return p
    return None


def _resolve_task(state: AppState, ref: str) -> Task | str:
    """Find a task by full id or unique id prefix. Returns an error message otherwise."""
    exact = state.store.get(ref)
    if exact is not None:
        return exact
    matches = [t for t in state.store.tasks if str(t.id).startswith(ref)]
    if not matches:
        return f"No task with id {ref!r}."
    if len(matches) > 1:
        return f"Id prefix {ref!r} is ambiguous ({len(matches)} tasks). Use more characters."
    return matches[0]


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    scheduler = state.store.scheduler
    save = scheduler.status.value if scheduler is not None else "disabled"
    pending_write = " (write pending)" if scheduler is not None and scheduler.pending else ""
    llm = "online" if state.llm_online else "offline"
    return (
        "Status:\n"
        f"  Tasks: {len(state.store.tasks)} ({state.store.pending_count} pending)\n"
        f"  Save: {save}{pending_write}\n"
        f"  Participants: {', '.join(state.store.participants)}\n"
        f"  Smart add (LLM): {llm}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list          -> all tasks
    /list <name>   -> tasks assigned to <name>
    """
    who = ALL_ASSIGNEES
    if args and args[0].lower() != ALL_ASSIGNEES.lower():
        match = _match_participant(state, args[0])
        if match is None:
            return f"Unknown person {args[0]!r}. Choose from: {', '.join(state.store.participants)}, All."
        who = match

    tasks = state.store.filter_by_assignee(who)
    if not tasks:
        return "No tasks yet." if who == ALL_ASSIGNEES else f"No tasks for {who}."

    pending = sum(1 for t in tasks if not t.is_completed)
    lines = [f"{pending} pending task(s) remaining."]
    lines.extend(format_task(t) for t in tasks)
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <person> <Low|Medium|High> <title...> [-- description...]"""
    usage = "Usage: /add <person> <Low|Medium|High> <title> [-- description]"
    if len(args) < 3:
        return usage

    assignee = _match_participant(state, args[0])
    if assignee is None:
        return f"Unknown person {args[0]!r}. Choose from: {', '.join(state.store.participants)}."
    priority = _match_priority(args[1])
    if priority is None:
        return f"Unknown priority {args[1]!r}. Choose from: Low, Medium, High."

    rest = args[2:]
    description: str | None = None
    if "--" in rest:
        cut = rest.index("--")
        description = " ".join(rest[cut + 1 :]).strip() or None
        rest = rest[:cut]

    task = state.store.add_manual(" ".join(rest), assignee, priority, description)
    if task is None:
        return usage
    return f"Added: {format_task(task)}"


async def cmd_magic(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/magic <free text> -> let the LLM split it into tasks."""
    text = " ".join(args).strip()
    if not text:
        return "Usage: /magic <what needs doing, in your own words>"

    if emit:
        with contextlib.suppress(Exception):
            emit("[MAGIC] Thinking...")

    try:
        result = await state.parser.parse(text)
    except Exception:
        logger.exception("Smart add failed")
        return "Something went wrong with the magic. Please use /add."

    if result is None or not result.tasks:
        return "I couldn't understand that. Please try again or use /add."

    added = state.store.add_from_parsed_batch(result.tasks)
    lines = [f"Added {len(added)} task(s):"]
    lines.extend(format_task(t) for t in added)
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <task id>"
    found = _resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    task = state.store.toggle(found.id)
    if task is None:
        return f"No task with id {args[0]!r}."
    return format_task(task)


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <task id>"
    found = _resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    state.store.delete(found.id)
    return f"Deleted: {found.title}"


def cmd_stats(state: AppState, args: list[str]) -> str:
    lines = ["Progress:"]
    for s in state.store.stats():
        lines.append(f"  {s.name}: {s.completed} done / {s.total} total ({s.pending} to do)")
    return "\n".join(lines)


def cmd_export(state: AppState, args: list[str]) -> str:
    code = state.store.export_code()
    if code == EXPORT_ERROR_CODE:
        return f"[SYNC] {EXPORT_ERROR_CODE}"
    return "Sync code (send this to the others, they paste it with /import):\n" + code


def cmd_import(state: AppState, args: list[str]) -> str:
    """/import <code> -> replace ALL local tasks with the ones in the code."""
    code = "".join(args).strip()
    if not code:
        return "Usage: /import <sync code>"
    try:
        count = state.store.import_code(code)
    except (DecodeFailure, NotACollection) as e:
        logger.info("Import rejected: %s", e)
        return "Invalid code. Please check and try again."
    return f"Tasks updated successfully! ({count} task(s))"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task count, save status and LLM mode.")
registry.register("list", cmd_list, help_text="List tasks: /list [person|All].", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <person> <Low|Medium|High> <title> [-- description]."
)
registry.register("magic", cmd_magic, help_text="Describe tasks in plain words: /magic <text>.")
registry.register("done", cmd_done, help_text="Toggle a task done/not done: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("stats", cmd_stats, help_text="Per-person progress.")
registry.register("export", cmd_export, help_text="Print a sync code for the current list.")
registry.register("import", cmd_import, help_text="Replace the list with a sync code: /import <code>.")
