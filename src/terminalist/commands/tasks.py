"""Task write commands."""

from typing import Annotated

import typer

from terminalist.exceptions import OperationError
from terminalist.services.operations import (
    CompleteTask,
    CreateTask,
    CyclePriority,
    DeleteTask,
    EditTask,
    RestoreTask,
    SetDueDate,
    SetDueString,
    due_next_week,
    due_today,
    due_tomorrow,
    due_weekend,
    next_priority,
    parse_due_date,
    parse_priority,
)
from terminalist.services.sync import ProjectUpdateIntent
from terminalist.utils.dates import normalize_due_string
from terminalist.utils.ui.formatters import format_error, format_warning

from .context import resolve_project, resolve_task, run_operation, sync_session
from .decorators import AppError, command_wrapper

app = typer.Typer(help="Task commands")

# Shortcuts accepted by `due`; anything else that is not a literal
# YYYY-MM-DD date goes to the backend's natural-language parser.
DUE_SHORTCUTS = {
    "today": due_today,
    "tomorrow": due_tomorrow,
    "next-week": due_next_week,
    "weekend": due_weekend,
}


def _user_input(func, value: str):
    try:
        return func(value)
    except OperationError as e:
        raise AppError(str(e)) from e


@app.command("add")
@command_wrapper
async def add(
    content: Annotated[str, typer.Argument(help="Task content")],
    description: Annotated[
        str | None, typer.Option("--description", "-d", help="Task description")
    ] = None,
    due: Annotated[
        str | None, typer.Option("--due", help="Due date in natural language")
    ] = None,
    project: Annotated[
        str | None, typer.Option("--project", "-p", help="Project ID prefix or name")
    ] = None,
) -> None:
    """Create a task (in the inbox unless a project is given)."""
    async with sync_session() as sync_service:
        project_uuid = None
        if project:
            project_uuid = (await resolve_project(sync_service, project)).uuid
        await run_operation(
            sync_service,
            CreateTask(
                content=content,
                description=description,
                due_string=normalize_due_string(due) if due else None,
                project_uuid=project_uuid,
            ),
        )


@app.command("edit")
@command_wrapper
async def edit(
    task_id: Annotated[str, typer.Argument(help="Task ID or prefix")],
    content: Annotated[
        str | None, typer.Option("--content", "-c", help="New content")
    ] = None,
    description: Annotated[
        str | None, typer.Option("--description", "-d", help="New description")
    ] = None,
    due: Annotated[
        str | None, typer.Option("--due", help="New due date in natural language")
    ] = None,
    project: Annotated[
        str | None, typer.Option("--project", "-p", help="Move to this project")
    ] = None,
    inbox: Annotated[
        bool, typer.Option("--inbox", help="Move the task to the inbox")
    ] = False,
) -> None:
    """Edit a task's content, description, due date or project."""
    if project and inbox:
        raise AppError("--project and --inbox cannot be combined")

    async with sync_session() as sync_service:
        task = await resolve_task(sync_service, task_id)

        if inbox:
            project_update = ProjectUpdateIntent.move_to_inbox()
        elif project:
            target = await resolve_project(sync_service, project)
            project_update = ProjectUpdateIntent.set(target.uuid)
        else:
            project_update = ProjectUpdateIntent.unchanged()

        await run_operation(
            sync_service,
            EditTask(
                task_uuid=task.uuid,
                content=content if content is not None else task.content,
                description=description if description is not None else task.description,
                due_string=normalize_due_string(due) if due else None,
                project_update=project_update,
            ),
        )


@app.command("done")
@command_wrapper
async def done(
    task_ids: Annotated[list[str], typer.Argument(help="Task ID(s) or prefixes")],
) -> None:
    """Complete one or more tasks."""
    failed = 0
    async with sync_session() as sync_service:
        for task_id in task_ids:
            try:
                task = await resolve_task(sync_service, task_id)
                await run_operation(sync_service, CompleteTask(task.uuid))
            except AppError as e:
                format_error(str(e))
                failed += 1
    if failed:
        format_warning(f"{failed} of {len(task_ids)} task(s) not completed")
        raise typer.Exit(1)


@app.command("delete")
@command_wrapper
async def delete(
    task_id: Annotated[str, typer.Argument(help="Task ID or prefix")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a task (it can be brought back with `restore`)."""
    async with sync_session() as sync_service:
        task = await resolve_task(sync_service, task_id)
        if not yes and not typer.confirm(f"Delete task '{task.content}'?"):
            format_error("Cancelled")
            raise typer.Exit(0)
        await run_operation(sync_service, DeleteTask(task.uuid))


@app.command("restore")
@command_wrapper
async def restore(
    task_id: Annotated[str, typer.Argument(help="Task ID or prefix")],
) -> None:
    """Restore a deleted task or reopen a completed one."""
    async with sync_session() as sync_service:
        task = await resolve_task(sync_service, task_id)
        await run_operation(sync_service, RestoreTask(task.uuid))


@app.command("priority")
@command_wrapper
async def priority(
    task_id: Annotated[str, typer.Argument(help="Task ID or prefix")],
    value: Annotated[
        str | None,
        typer.Argument(help="1 (normal) to 4 (urgent); cycles when omitted"),
    ] = None,
) -> None:
    """Set a task's priority, or cycle it to the next level."""
    async with sync_session() as sync_service:
        task = await resolve_task(sync_service, task_id)
        if value is None:
            new_priority = next_priority(task.priority)
        else:
            new_priority = _user_input(parse_priority, value)
        await run_operation(sync_service, CyclePriority(task.uuid, new_priority))


@app.command("due")
@command_wrapper
async def due(
    task_id: Annotated[str, typer.Argument(help="Task ID or prefix")],
    when: Annotated[
        str,
        typer.Argument(
            help="today, tomorrow, next-week, weekend, clear, YYYY-MM-DD "
            "or natural language"
        ),
    ],
) -> None:
    """Set or clear a task's due date."""
    async with sync_session() as sync_service:
        task = await resolve_task(sync_service, task_id)
        key = when.strip().lower()

        if key in DUE_SHORTCUTS:
            op = DUE_SHORTCUTS[key](task.uuid)
        elif key in ("clear", "none"):
            op = SetDueDate(task.uuid, None)
        elif key[:1].isdigit() and len(key) == 10 and key[4:5] == "-":
            op = SetDueDate(task.uuid, _user_input(parse_due_date, key))
        else:
            op = SetDueString(task.uuid, normalize_due_string(when))

        await run_operation(sync_service, op)
