# src/taskdesk/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from ..auth import session
from ..auth.auth_models import AuthSuccess, Provider
from ..core.state import AppState
from ..notifications.notification_api import mark_all_read, mark_read, unread_count
from ..tasks import task_api
from ..tasks.task_models import FilterOption, SortOption, Task
from ..tasks.task_view import pending_count

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

_RELATIVE = re.compile(r"^\+(\d+)([mhd])$")
_UNITS = {"m": "minutes", "h": "hours", "d": "days"}

LOGIN_REQUIRED = "Please /login or /register first."


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


# ---- parsing / formatting helpers ----

def parse_deadline(raw: str, now: datetime) -> datetime:
    """
    "+30m" / "+2h" / "+3d" relative to now, or an ISO-8601 timestamp.
    Naive ISO values are read in the local timezone.
    """
    m = _RELATIVE.match(raw.strip())
    if m:
        return now + timedelta(**{_UNITS[m.group(2)]: int(m.group(1))})
    dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    return dt if dt.tzinfo is not None else dt.astimezone()


def _split_title(words: list[str]) -> tuple[str, str | None]:
    text = " ".join(words)
    title, sep, description = text.partition("|")
    return title.strip(), (description.strip() or None) if sep else None


def _fmt_local(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def format_task(index: int, task: Task) -> str:
    mark = "x" if task.is_done else " "
    line = f"{index}. [{mark}] {task.title}  (due {_fmt_local(task.deadline)}, id {task.id[:8]})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def resolve_task(state: AppState, ref: str) -> Task | None:
    """A 1-based index into the current view, or a unique id prefix."""
    view = task_api.visible_tasks(state)
    if ref.isdigit() and 1 <= int(ref) <= len(view):
        return view[int(ref) - 1]
    matches = [t for t in state.tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


# ---- command handlers ----

async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_register(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /register <username> <password>"
    result = await session.register(state, args[0], args[1])
    if isinstance(result, AuthSuccess):
        return f"Welcome, {result.user.name}! You have {len(state.tasks)} tasks."
    return result.message


async def cmd_login(state: AppState, args: list[str]) -> str:
    """
    /login <username> <password>
    /login google | /login github
    """
    if len(args) == 1 and args[0].lower() in (Provider.GOOGLE, Provider.GITHUB):
        result = await session.login(state, args[0].lower())
    elif len(args) == 2:
        result = await session.login(state, Provider.CREDENTIALS, args[0], args[1])
    else:
        return "Usage: /login <username> <password> | /login google | /login github"

    if isinstance(result, AuthSuccess):
        return (
            f"Logged in as {result.user.name} ({result.user.provider}). "
            f"{pending_count(state.tasks)} pending, {unread_count(state)} unread notifications."
        )
    return result.message


async def cmd_logout(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return "Not logged in."
    session.logout(state)
    return "Logged out."


async def cmd_whoami(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return "Not logged in."
    u = state.user
    return f"{u.name} <{u.email}> id={u.id} provider={u.provider}"


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <deadline> <title> [| description]
    """
    if state.user is None:
        return LOGIN_REQUIRED
    if len(args) < 2:
        return "Usage: /add <deadline: +2h | 2026-01-31T18:00> <title> [| description]"
    try:
        deadline = parse_deadline(args[0], state.clock())
    except (ValueError, OverflowError):
        return f"Cannot parse deadline: {args[0]}"
    title, description = _split_title(args[1:])
    if not title:
        return "Title is required."
    task = await task_api.save_task(state, title=title, description=description, deadline=deadline)
    return f"Added: {task.title} (due {_fmt_local(task.deadline)})"


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n|id> <deadline> <title> [| description]
    """
    if state.user is None:
        return LOGIN_REQUIRED
    if len(args) < 3:
        return "Usage: /edit <n|id> <deadline> <title> [| description]"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    try:
        deadline = parse_deadline(args[1], state.clock())
    except (ValueError, OverflowError):
        return f"Cannot parse deadline: {args[1]}"
    title, description = _split_title(args[2:])
    if not title:
        return "Title is required."
    saved = await task_api.save_task(
        state, title=title, description=description, deadline=deadline, task_id=task.id
    )
    return f"Updated: {saved.title}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return LOGIN_REQUIRED
    if len(args) != 1:
        return "Usage: /done <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    updated = await task_api.toggle_status(state, task.id)
    if updated is None:
        return f"No such task: {args[0]}"
    return f"{updated.title}: {updated.status}"


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return LOGIN_REQUIRED
    if len(args) != 1:
        return "Usage: /rm <n|id>"
    task = resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    await task_api.delete_task(state, task.id)
    return f"Deleted: {task.title}"


async def cmd_clear(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return LOGIN_REQUIRED
    if not state.tasks:
        return "Nothing to delete."
    if args != ["yes"]:
        return f"This permanently deletes all {len(state.tasks)} tasks. Confirm with: /clear yes"
    await task_api.delete_all_tasks(state)
    return "All tasks deleted."


async def cmd_list(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return LOGIN_REQUIRED
    view = task_api.visible_tasks(state)
    header = (
        f"{pending_count(state.tasks)} pending task(s). "
        f"filter={state.status_filter} sort={state.sort_by}"
        + (f" search={state.search_query!r}" if state.search_query else "")
    )
    if not view:
        hint = "Try adjusting the search or filter." if state.search_query else "Create one with /add."
        return f"{header}\nNo tasks found. {hint}"
    return "\n".join([header, *(format_task(i, t) for i, t in enumerate(view, start=1))])


async def cmd_search(state: AppState, args: list[str]) -> str:
    state.search_query = " ".join(args)
    return f"Search set to {state.search_query!r}." if state.search_query else "Search cleared."


async def cmd_filter(state: AppState, args: list[str]) -> str:
    choices = ", ".join(o.value for o in FilterOption)
    if len(args) != 1:
        return f"Usage: /filter <{choices}>"
    try:
        state.status_filter = FilterOption(args[0].lower())
    except ValueError:
        return f"Unknown filter. Choose one of: {choices}"
    return f"Filter: {state.status_filter}"


async def cmd_sort(state: AppState, args: list[str]) -> str:
    choices = ", ".join(o.value for o in SortOption)
    if len(args) != 1:
        return f"Usage: /sort <{choices}>"
    try:
        state.sort_by = SortOption(args[0].lower())
    except ValueError:
        return f"Unknown sort. Choose one of: {choices}"
    return f"Sort: {state.sort_by}"


async def cmd_notes(state: AppState, args: list[str]) -> str:
    if state.user is None:
        return LOGIN_REQUIRED
    if not state.notifications:
        return "No notifications."
    lines = [f"Notifications ({unread_count(state)} unread):"]
    for i, n in enumerate(state.notifications, start=1):
        mark = " " if n.is_read else "*"
        lines.append(f"{i}. {mark} [{n.kind}] {n.message}  ({_fmt_local(n.created_at)})")
    return "\n".join(lines)


async def cmd_read(state: AppState, args: list[str]) -> str:
    """
    /read all   -> mark every notification read
    /read <n>   -> mark one (1-based, as listed by /notes)
    """
    if state.user is None:
        return LOGIN_REQUIRED
    if len(args) != 1:
        return "Usage: /read <n|all>"
    if args[0].lower() == "all":
        await mark_all_read(state)
        return "All notifications marked as read."
    if not args[0].isdigit() or not 1 <= int(args[0]) <= len(state.notifications):
        return f"No such notification: {args[0]}"
    n = state.notifications[int(args[0]) - 1]
    await mark_read(state, n.id)
    return f"Marked as read: {n.message}"


async def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme          -> toggle
    /theme <light|dark>
    """
    if not args:
        return f"Theme: {session.toggle_theme(state)}"
    try:
        return f"Theme: {session.set_theme(state, args[0].lower())}"
    except ValueError:
        return "Usage: /theme [light|dark]"


async def cmd_status(state: AppState, args: list[str]) -> str:
    who = state.user.name if state.user else "(nobody)"
    return (
        "Status:\n"
        f"  User: {who}\n"
        f"  Tasks: {len(state.tasks)} ({pending_count(state.tasks)} pending)\n"
        f"  Notifications: {len(state.notifications)} ({unread_count(state)} unread)\n"
        f"  Theme: {state.theme}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("register", cmd_register, help_text="Create an account: /register <user> <password>.")
registry.register(
    "login", cmd_login, help_text="Log in: /login <user> <password> | /login google | /login github."
)
registry.register("logout", cmd_logout, help_text="Log out and clear the session.")
registry.register("whoami", cmd_whoami, help_text="Show the current user.")
registry.register("add", cmd_add, help_text="Add a task: /add <deadline> <title> [| description].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n|id> <deadline> <title> [| description].")
registry.register("done", cmd_done, help_text="Toggle done/pending: /done <n|id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n|id>.", aliases=["del"])
registry.register("clear", cmd_clear, help_text="Delete all your tasks: /clear yes.")
registry.register("list", cmd_list, help_text="List tasks (search/filter/sort applied).", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search title/description: /search <text> (empty clears).")
registry.register("filter", cmd_filter, help_text="Status filter: /filter all | pending | done.")
registry.register("sort", cmd_sort, help_text="Sort: /sort deadline-asc | deadline-desc | created-asc | created-desc.")
registry.register("notes", cmd_notes, help_text="Show notifications.", aliases=["notifications"])
registry.register("read", cmd_read, help_text="Mark notifications read: /read <n> | /read all.")
registry.register("theme", cmd_theme, help_text="Switch theme: /theme [light|dark].")
registry.register("status", cmd_status, help_text="Show session summary.")
