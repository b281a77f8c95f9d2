"""Read-only commands: sync, date views, search and task details."""

from collections import deque
from typing import Annotated

import typer
from rich.panel import Panel
from rich.text import Text

from terminalist.constants import SUCCESS_SYNC_COMPLETED
from terminalist.services.config_service import get_config_service
from terminalist.services.sync import SyncService
from terminalist.services.task_manager import SearchResultsLoaded, TaskManager
from terminalist.utils.dates import format_due
from terminalist.utils.logger import get_log_file_path
from terminalist.utils.ui.console import get_console
from terminalist.utils.ui.formatters import (
    PRIORITY_ICONS,
    format_info,
    format_success,
    format_tasks,
    short_id,
)

from .context import resolve_task, run_sync, sync_session
from .decorators import AppError, command_wrapper

console = get_console()

VIEWS = ("today", "tomorrow", "upcoming")


async def _render_view(sync_service: SyncService, view: str) -> None:
    if view == "today":
        tasks = await sync_service.get_tasks_for_today()
        title = "Today"
    elif view == "tomorrow":
        tasks = await sync_service.get_tasks_for_tomorrow()
        title = "Tomorrow"
    elif view == "upcoming":
        tasks = await sync_service.get_tasks_for_upcoming()
        title = f"Upcoming ({sync_service.upcoming_days} days)"
    else:
        raise AppError(f"Unknown view '{view}' (choose from {', '.join(VIEWS)})")

    format_tasks(
        tasks,
        title,
        projects=await sync_service.get_projects(),
        labels=await sync_service.get_labels(),
    )


async def _show(view: str) -> None:
    async with sync_session() as sync_service:
        if get_config_service().config.sync.before_views:
            await run_sync(sync_service)
        await _render_view(sync_service, view)


@command_wrapper
async def sync() -> None:
    """Fetch everything from the backend and refresh the local cache."""
    async with sync_session() as sync_service:
        with console.status("Syncing..."):
            await run_sync(sync_service)
        projects, labels, _, tasks = await sync_service.load_all()
    format_success(
        f"{SUCCESS_SYNC_COMPLETED}: {len(projects)} projects, "
        f"{len(labels)} labels, {len(tasks)} open tasks"
    )


@command_wrapper
async def view(
    name: Annotated[
        str | None, typer.Argument(help="today, tomorrow or upcoming")
    ] = None,
) -> None:
    """Show a date view (the configured default view without an argument)."""
    await _show(name or get_config_service().config.ui.default_view)


@command_wrapper
async def today() -> None:
    """Show overdue tasks and tasks due today."""
    await _show("today")


@command_wrapper
async def tomorrow() -> None:
    """Show tasks due tomorrow."""
    await _show("tomorrow")


@command_wrapper
async def upcoming() -> None:
    """Show overdue, today and upcoming tasks."""
    await _show("upcoming")


@command_wrapper
async def search(
    query: Annotated[str, typer.Argument(help="Text to look for in task content")],
) -> None:
    """Search tasks by content (completed tasks included)."""
    async with sync_session() as sync_service:
        manager = TaskManager()
        manager.spawn_task_search(sync_service, query)
        event = await manager.next_event()
        projects = await sync_service.get_projects()
        labels = await sync_service.get_labels()

    tasks = event.results if isinstance(event, SearchResultsLoaded) else []
    format_tasks(tasks, f"Search: {query}", projects=projects, labels=labels)


@command_wrapper
async def show(
    task_id: Annotated[str, typer.Argument(help="Task ID or prefix")],
) -> None:
    """Show the details of one task."""
    async with sync_session() as sync_service:
        task = await resolve_task(sync_service, task_id)
        projects = {p.uuid: p.name for p in await sync_service.get_projects()}
        labels = {lbl.uuid: lbl.name for lbl in await sync_service.get_labels()}

    if task.is_deleted:
        status = "deleted"
    elif task.is_completed:
        status = "completed"
    else:
        status = "open"

    body = Text()
    body.append(f"{task.content}\n", style="bold")
    if task.description:
        body.append(f"{task.description}\n\n")
    body.append(f"ID:        {task.uuid}\n", style="dim")
    body.append(f"Status:    {status}\n")
    body.append(f"Priority:  {PRIORITY_ICONS.get(task.priority, '')} P{task.priority}\n")
    body.append(f"Project:   {projects.get(task.project_uuid, task.project_uuid)}\n")
    due = format_due(task.due_date, task.due_datetime)
    if due:
        body.append(f"Due:       {due}{' (recurring)' if task.is_recurring else ''}\n")
    if task.deadline:
        body.append(f"Deadline:  {task.deadline}\n")
    if task.duration:
        body.append(f"Duration:  {task.duration}\n")
    if task.labels:
        names = ", ".join(f"@{labels.get(uuid, short_id(uuid))}" for uuid in task.labels)
        body.append(f"Labels:    {names}\n")
    console.print(Panel(body, title=f"Task {short_id(task.uuid)}", expand=False))


@command_wrapper
def logs(
    lines: Annotated[
        int, typer.Option("--lines", "-n", help="Number of trailing lines to show")
    ] = 50,
    path: Annotated[
        bool, typer.Option("--path", help="Print the log file location only")
    ] = False,
) -> None:
    """Show the end of the log file."""
    log_path = get_log_file_path()
    if path:
        console.print(str(log_path))
        return
    if not log_path.exists():
        format_info(f"No log file at {log_path}")
        return
    with log_path.open(encoding="utf-8", errors="replace") as f:
        tail = deque(f, maxlen=lines)
    for line in tail:
        console.print(line.rstrip("\n"), markup=False, highlight=False)
