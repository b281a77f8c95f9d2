"""Label management commands."""

import typer

from terminalist.services.operations import CreateLabel, DeleteLabel, EditLabel
from terminalist.utils.ui.formatters import format_error, format_labels, format_tasks

from .context import resolve_label, run_operation, sync_session
from .decorators import command_wrapper

app = typer.Typer(help="Label management commands")


@app.command("list")
@command_wrapper
async def list_labels(
    search: str | None = typer.Option(None, "--search", help="Search labels"),
) -> None:
    """List all labels."""
    async with sync_session() as sync_service:
        labels = await sync_service.get_labels()
    if search:
        search_lower = search.lower()
        labels = [lbl for lbl in labels if search_lower in lbl.name.lower()]
    format_labels(labels)


@app.command("tasks")
@command_wrapper
async def label_tasks(
    label_id: str = typer.Argument(..., help="Label ID prefix or name"),
) -> None:
    """List the open tasks carrying a label."""
    async with sync_session() as sync_service:
        label = await resolve_label(sync_service, label_id)
        tasks = await sync_service.get_tasks_with_label(label.uuid)
        projects = await sync_service.get_projects()
        labels = await sync_service.get_labels()
    format_tasks(tasks, f"@{label.name}", projects=projects, labels=labels)


@app.command("add")
@command_wrapper
async def add_label(
    name: str = typer.Argument(..., help="Label name"),
) -> None:
    """Create a label."""
    async with sync_session() as sync_service:
        await run_operation(sync_service, CreateLabel(name.lstrip("@")))


@app.command("rename")
@command_wrapper
async def rename_label(
    label_id: str = typer.Argument(..., help="Label ID prefix or name"),
    name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a label."""
    async with sync_session() as sync_service:
        label = await resolve_label(sync_service, label_id)
        await run_operation(sync_service, EditLabel(label.uuid, name.lstrip("@")))


@app.command("delete")
@command_wrapper
async def delete_label(
    label_id: str = typer.Argument(..., help="Label ID prefix or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a label."""
    async with sync_session() as sync_service:
        label = await resolve_label(sync_service, label_id)
        if not yes:
            confirm = typer.confirm(f"Are you sure you want to delete label @{label.name}?")
            if not confirm:
                format_error("Cancelled")
                raise typer.Exit(0)
        await run_operation(sync_service, DeleteLabel(label.uuid))
