"""Main entry point for terminalist."""

import typer

from terminalist import __version__
from terminalist.commands import backends, config, labels, projects, tasks, views
from terminalist.utils.typer_helpers import SuggestingGroup
from terminalist.utils.ui.console import get_console

app = typer.Typer(
    name="terminalist",
    cls=SuggestingGroup,
    help="Terminal client for remote task services, backed by a local cache",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(backends.app, name="backend", help="Backend instance management")
app.add_typer(tasks.app, name="task", help="Task management commands")
app.add_typer(projects.app, name="project", help="Project management commands")
app.add_typer(labels.app, name="label", help="Label management commands")
app.add_typer(config.app, name="config", help="Configuration management")

# Add top-level commands (task commands are also available without the "task" prefix)
for command in (
    views.sync,
    views.view,
    views.today,
    views.tomorrow,
    views.upcoming,
    views.search,
    views.show,
    views.logs,
    tasks.add,
    tasks.edit,
    tasks.done,
    tasks.delete,
    tasks.restore,
    tasks.priority,
    tasks.due,
):
    app.command(command.__name__)(command)

app.command("projects", help="List projects as a tree.")(projects.list_projects)
app.command("labels", help="List all labels.")(labels.list_labels)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]terminalist[/bold] version [cyan]{__version__}[/cyan]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
