"""Rich output formatters for the command-line surface."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from terminalist.models import BackendInstance, Label, Project, Task
from terminalist.utils.dates import format_due, is_overdue
from terminalist.utils.ui.console import get_console

SHORT_ID_LENGTH = 8

PRIORITY_ICONS = {
    4: "🔴",  # URGENT
    3: "🟠",  # HIGH
    2: "🟡",  # MEDIUM
    1: "🟢",  # NORMAL
}

STATUS_ICONS = {
    "open": "⬜",
    "completed": "☑️",
    "recurring": "🔄",
    "deleted": "🗑️",
}


def short_id(uuid: str) -> str:
    return uuid[:SHORT_ID_LENGTH]


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {escape(message)}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {escape(message)}")


def format_warning(message: str) -> None:
    get_console().print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")


def format_info(message: str) -> None:
    get_console().print(f"[bold blue]Info:[/bold blue] {escape(message)}")


def _status_icon(task: Task) -> str:
    if task.is_deleted:
        return STATUS_ICONS["deleted"]
    if task.is_recurring:
        return STATUS_ICONS["recurring"]
    if task.is_completed:
        return STATUS_ICONS["completed"]
    return STATUS_ICONS["open"]


def format_task_line(
    task: Task,
    project_names: dict[str, str] | None = None,
    label_names: dict[str, str] | None = None,
) -> Text:
    """Render one task as a single line of rich text."""
    line = Text()
    line.append(f"{short_id(task.uuid)} ", style="dim")
    line.append(f"{_status_icon(task)} {PRIORITY_ICONS.get(task.priority, '')} ")
    line.append(task.content, style="dim" if task.is_completed else "")

    due = format_due(task.due_date, task.due_datetime)
    if due:
        style = "bold red" if is_overdue(task.due_date) else "cyan"
        line.append(f" • {due}", style=style)
    if task.deadline:
        line.append(f" ⚑ {task.deadline}", style="magenta")

    if project_names and task.project_uuid in project_names:
        line.append(f" [{project_names[task.project_uuid]}]", style="dim")
    for label_uuid in task.labels:
        if label_names and label_uuid in label_names:
            line.append(f" @{label_names[label_uuid]}", style="blue")
    return line


def format_tasks(
    tasks: list[Task],
    title: str,
    projects: list[Project] | None = None,
    labels: list[Label] | None = None,
) -> None:
    """Print a titled task list."""
    console = get_console()
    project_names = {p.uuid: p.name for p in projects or []}
    label_names = {lbl.uuid: lbl.name for lbl in labels or []}

    header = Text()
    header.append(f"📋 {title} ", style="bold cyan")
    header.append(f"({len(tasks)})", style="dim")
    console.print(header)

    if not tasks:
        console.print("  [dim]Nothing here[/dim]")
        return
    for task in tasks:
        console.print(Text("  ").append_text(format_task_line(task, project_names, label_names)))


def format_projects(projects: list[Project]) -> None:
    """Print projects as an indented tree."""
    console = get_console()
    children: dict[str | None, list[Project]] = {}
    for project in projects:
        children.setdefault(project.parent_uuid, []).append(project)

    known = {p.uuid for p in projects}
    roots = [p for p in projects if p.parent_uuid is None or p.parent_uuid not in known]

    def render(project: Project, depth: int) -> None:
        icon = "📥" if project.is_inbox_project else ("⭐" if project.is_favorite else "📁")
        line = Text("  " * depth)
        line.append(f"{short_id(project.uuid)} ", style="dim")
        line.append(f"{icon} {project.name}")
        console.print(line)
        for child in children.get(project.uuid, []):
            render(child, depth + 1)

    for root in roots:
        render(root, 0)


def format_labels(labels: list[Label]) -> None:
    console = get_console()
    for label in labels:
        line = Text(f"{short_id(label.uuid)} ", style="dim")
        line.append(f"@{label.name}", style="blue")
        console.print(line)


def format_backends(instances: list[BackendInstance], default_uuid: str | None) -> None:
    table = Table(title="Backends")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Type", style="cyan")
    table.add_column("Enabled")
    for instance in instances:
        marker = " *" if instance.uuid == default_uuid else ""
        table.add_row(
            instance.uuid,
            f"{instance.name}{marker}",
            instance.backend_type,
            "yes" if instance.is_enabled else "no",
        )
    get_console().print(table)
