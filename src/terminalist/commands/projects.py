"""Project management commands."""

import typer

from terminalist.services.operations import CreateProject, DeleteProject, EditProject
from terminalist.utils.ui.formatters import format_error, format_projects, format_tasks

from .context import resolve_project, run_operation, sync_session
from .decorators import command_wrapper

app = typer.Typer(help="Project management commands")


@app.command("list")
@command_wrapper
async def list_projects() -> None:
    """List projects as a tree."""
    async with sync_session() as sync_service:
        projects = await sync_service.get_projects()
    format_projects(projects)


@app.command("tasks")
@command_wrapper
async def project_tasks(
    project_id: str = typer.Argument(..., help="Project ID prefix or name"),
) -> None:
    """List the open tasks of a project."""
    async with sync_session() as sync_service:
        project = await resolve_project(sync_service, project_id)
        tasks = await sync_service.get_tasks_for_project(project.uuid)
        labels = await sync_service.get_labels()
    format_tasks(tasks, project.name, labels=labels)


@app.command("add")
@command_wrapper
async def add_project(
    name: str = typer.Argument(..., help="Project name"),
    parent: str | None = typer.Option(
        None, "--parent", help="Parent project ID prefix or name"
    ),
) -> None:
    """Create a project."""
    async with sync_session() as sync_service:
        parent_uuid = None
        if parent:
            parent_uuid = (await resolve_project(sync_service, parent)).uuid
        await run_operation(sync_service, CreateProject(name, parent_uuid))


@app.command("rename")
@command_wrapper
async def rename_project(
    project_id: str = typer.Argument(..., help="Project ID prefix or name"),
    name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a project."""
    async with sync_session() as sync_service:
        project = await resolve_project(sync_service, project_id)
        await run_operation(sync_service, EditProject(project.uuid, name))


@app.command("delete")
@command_wrapper
async def delete_project(
    project_id: str = typer.Argument(..., help="Project ID prefix or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a project together with its tasks."""
    async with sync_session() as sync_service:
        project = await resolve_project(sync_service, project_id)
        if not yes:
            confirm = typer.confirm(
                f"Delete project '{project.name}' and all of its tasks?"
            )
            if not confirm:
                format_error("Cancelled")
                raise typer.Exit(0)
        await run_operation(sync_service, DeleteProject(project.uuid))
